"""
Block Shape Registry.

Maps discriminator tags (`"shared.quote"`) to the concrete
[`BlockComponent`][strapiclient.blocks.components.BlockComponent] subclass an
element with that tag decodes into.

The registry is an explicit object: decoders receive the instance they must
use. A single process-wide instance, returned by
[`default_registry()`][strapiclient.blocks.registry.default_registry], is the
one host applications normally populate at startup:

Example:
    ```python
    from strapiclient.blocks import register_block, register_blocks_from

    register_block("sections.hero", HeroBlock)
    register_blocks_from([CtaBlock, FaqBlock])   # tags read from @block_component
    ```
"""

import threading
from typing import Dict, Iterable, List, Optional, Type

from ..errors import ArgumentError
from ..logging_config import get_logger
from .components import BUILTIN_BLOCKS, BlockComponent, component_tag_of

# Set the hierarchical logger
logger = get_logger(__name__)


class BlockRegistry:
    """
    Thread-safe mapping from discriminator tag to block shape.

    Writes are serialized by a re-entrant lock; reads take the same lock so a
    lookup never observes a half-applied registration. When a tag is
    registered twice the last registration wins.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._shapes: Dict[str, Type[BlockComponent]] = {}
        self._names: Dict[Type[BlockComponent], str] = {}

    def register(self, tag: str, shape: Type[BlockComponent]) -> "BlockRegistry":
        """
        Inserts or replaces the shape registered for `tag`.

        Args:
            tag: The discriminator value (e.g. `"shared.rich-text"`).
            shape: A `BlockComponent` subclass.

        Raises:
            ArgumentError: If `tag` is blank.
            TypeError: If `shape` is not a `BlockComponent` subclass.
        """
        if tag is None or not str(tag).strip():
            raise ArgumentError("Component tag cannot be null or empty")
        if not (isinstance(shape, type) and issubclass(shape, BlockComponent)):
            raise TypeError(
                f"Block shape must be a subclass of 'BlockComponent', got '{shape!r}'"
            )
        tag = str(tag).strip()

        with self._lock:
            previous = self._shapes.get(tag)
            if previous is not None and previous is not shape:
                logger.info(
                    f"Component '{tag}' re-registered: '{previous.__name__}' replaced by '{shape.__name__}'"
                )
                if self._names.get(previous) == tag:
                    del self._names[previous]
            self._shapes[tag] = shape
            self._names[shape] = tag

        logger.debug(f"Registered block shape '{shape.__name__}' for component '{tag}'")
        return self

    def register_from(self, shapes: Iterable[Type[BlockComponent]]) -> int:
        """
        Registers every shape of a caller-supplied list that carries a
        `@block_component` tag. Untagged classes are skipped.

        Returns:
            The number of shapes registered.
        """
        count = 0
        for shape in shapes:
            tag = component_tag_of(shape) if isinstance(shape, type) else None
            if not tag:
                logger.debug(f"Skipping '{shape!r}': no component tag attached")
                continue
            self.register(tag, shape)
            count += 1
        return count

    def lookup(self, tag: str) -> Optional[Type[BlockComponent]]:
        with self._lock:
            return self._shapes.get(tag)

    def component_name(self, shape: Type[BlockComponent]) -> Optional[str]:
        """Reverse lookup: the tag `shape` is currently registered under."""
        with self._lock:
            return self._names.get(shape)

    def is_registered(self, tag: str) -> bool:
        with self._lock:
            return tag in self._shapes

    def registered_components(self) -> List[str]:
        with self._lock:
            return list(self._shapes.keys())

    def clear(self):
        """Drops every registration."""
        with self._lock:
            self._shapes.clear()
            self._names.clear()

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and self.is_registered(tag)

    def __len__(self) -> int:
        with self._lock:
            return len(self._shapes)

    def __repr__(self) -> str:
        return f"BlockRegistry({self.registered_components()!r})"


def register_builtin_blocks(registry: BlockRegistry) -> BlockRegistry:
    """Registers the built-in rich-text, quote, media and slider shapes."""
    registry.register_from(BUILTIN_BLOCKS)
    return registry


_default_registry: Optional[BlockRegistry] = None
_default_lock = threading.Lock()


def default_registry() -> BlockRegistry:
    """
    Returns the process-wide registry, creating it (with the built-in shapes)
    on first use.
    """
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = register_builtin_blocks(BlockRegistry())
    return _default_registry


def register_block(tag: str, shape: Type[BlockComponent]) -> BlockRegistry:
    """Registers `shape` for `tag` on the process-wide registry."""
    return default_registry().register(tag, shape)


def register_blocks_from(shapes: Iterable[Type[BlockComponent]]) -> int:
    """Scans `shapes` for tags and registers them on the process-wide registry."""
    return default_registry().register_from(shapes)
