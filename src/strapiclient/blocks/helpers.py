from typing import Iterable, List, Optional, Type, TypeVar

from .components import BlockComponent, GenericBlock
from .registry import BlockRegistry, default_registry

B = TypeVar("B", bound=BlockComponent)


def blocks_of_type(blocks: Iterable[BlockComponent], shape: Type[B]) -> List[B]:
    """Returns the blocks that are instances of `shape`, in order."""
    return [block for block in blocks if isinstance(block, shape)]


def first_block_of_type(blocks: Iterable[BlockComponent], shape: Type[B]) -> Optional[B]:
    return next((block for block in blocks if isinstance(block, shape)), None)


def blocks_by_component(blocks: Iterable[BlockComponent], tag: str) -> List[BlockComponent]:
    """Returns the blocks whose `__component` tag equals `tag`."""
    return [block for block in blocks if block.component == tag]


def blocks_by_registered_type(
    blocks: Iterable[BlockComponent],
    shape: Type[BlockComponent],
    registry: Optional[BlockRegistry] = None,
) -> List[BlockComponent]:
    """
    Returns the blocks carrying the tag `shape` is registered under.

    Unknown blocks whose tag matches are included too. An unregistered shape
    yields an empty list.
    """
    registry = registry if registry is not None else default_registry()
    tag = registry.component_name(shape)
    if tag is None:
        return []
    return blocks_by_component(blocks, tag)


def has_unknown_blocks(blocks: Iterable[BlockComponent]) -> bool:
    return any(isinstance(block, GenericBlock) for block in blocks)


def unknown_blocks(blocks: Iterable[BlockComponent]) -> List[GenericBlock]:
    """Returns the blocks decoded with the generic fallback shape."""
    return blocks_of_type(blocks, GenericBlock)
