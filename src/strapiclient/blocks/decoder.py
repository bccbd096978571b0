"""
Polymorphic decoding of block arrays.

[`PolymorphicBlockDecoder`][strapiclient.blocks.decoder.PolymorphicBlockDecoder]
dispatches every element of a dynamic zone on its `__component` tag:

| Element | Outcome |
| --- | --- |
| registered tag | decoded into the registered shape |
| unregistered tag | decoded into `GenericBlock` (fields kept verbatim) |
| missing or blank tag | skipped |
| already a `BlockComponent` | kept as is |
| not an object, or invalid for its shape | `DecodeError` recorded, siblings continue |

Inside pydantic models, the [`BlockList`][strapiclient.blocks.decoder.BlockList]
annotated type performs the same dispatch during model validation.
"""

import json
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, Iterator, List, Optional, Sequence

from pydantic import BeforeValidator, PlainSerializer, ValidationError, ValidationInfo

from ..errors import DecodeError
from ..logging_config import get_logger
from .components import BlockComponent, GenericBlock
from .registry import BlockRegistry, default_registry

# Set the hierarchical logger
logger = get_logger(__name__)

DISCRIMINATOR = "__component"
REGISTRY_CONTEXT_KEY = "block_registry"


@dataclass
class BlockDecodeResult:
    """
    The decoded blocks of an array, plus the per-element errors.

    Iterating the result iterates the decoded blocks.
    """

    blocks: List[BlockComponent] = field(default_factory=list)
    errors: List[DecodeError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def __iter__(self) -> Iterator[BlockComponent]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def __getitem__(self, index: int) -> BlockComponent:
        return self.blocks[index]


class PolymorphicBlockDecoder:
    """
    Decodes and encodes heterogeneous block arrays against a registry.

    Args:
        registry: The registry used for tag lookups. Defaults to the
            process-wide [`default_registry()`][strapiclient.blocks.registry.default_registry].
    """

    def __init__(self, registry: Optional[BlockRegistry] = None):
        self.registry = registry if registry is not None else default_registry()

    def decode_element(self, element: Any, index: int = 0) -> Optional[BlockComponent]:
        """
        Decodes a single element.

        Returns:
            The decoded block, or `None` when the element has no tag. A
            `BlockComponent` instance is returned unchanged.

        Raises:
            DecodeError: If the element is not an object, or fails validation
                against its resolved shape.
        """
        if isinstance(element, BlockComponent):
            return element
        if not isinstance(element, dict):
            raise DecodeError(
                f"Block at index {index} is not an object: '{type(element).__name__}'",
                payload=element,
            )

        tag = element.get(DISCRIMINATOR)
        if not isinstance(tag, str) or not tag.strip():
            logger.warning(f"Skipping block at index {index}: missing '{DISCRIMINATOR}' tag")
            return None

        shape = self.registry.lookup(tag) or GenericBlock
        try:
            return shape.model_validate(
                element, context={REGISTRY_CONTEXT_KEY: self.registry}
            )
        except ValidationError as e:
            raise DecodeError(
                f"Block at index {index} ('{tag}') does not match shape '{shape.__name__}': {e}",
                payload=element,
            ) from e

    def decode_array(self, items: Optional[Sequence[Any]]) -> BlockDecodeResult:
        """
        Decodes every element of `items`, in order.

        A malformed element is recorded in `errors` and never aborts the
        decoding of its siblings. An unregistered tag is not an error.
        """
        result = BlockDecodeResult()
        if items is None:
            return result
        if not isinstance(items, (list, tuple)):
            result.errors.append(
                DecodeError(
                    f"Expected a block array, got '{type(items).__name__}'", payload=items
                )
            )
            return result

        for index, element in enumerate(items):
            try:
                block = self.decode_element(element, index)
            except DecodeError as e:
                logger.warning(str(e))
                result.errors.append(e)
                continue
            if block is not None:
                result.blocks.append(block)
        return result

    def decode_json(self, text: str) -> BlockDecodeResult:
        """Parses a raw JSON array and decodes it."""
        try:
            items = json.loads(text)
        except (TypeError, ValueError) as e:
            return BlockDecodeResult(
                errors=[DecodeError(f"Block array is not valid JSON: {e}", payload=text)]
            )
        return self.decode_array(items)

    def encode_array(self, blocks: Sequence[BlockComponent]) -> List[Dict[str, Any]]:
        """Dumps every block with its own runtime shape, wire aliases included."""
        return encode_blocks(blocks)

    def encode_json(self, blocks: Sequence[BlockComponent]) -> str:
        return json.dumps(self.encode_array(blocks), default=str)


def _encode_block(block: BlockComponent) -> Dict[str, Any]:
    if isinstance(block, GenericBlock):
        # Unknown fields are written back verbatim, nulls included
        return block.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return block.model_dump(mode="json", by_alias=True, exclude_none=True)


def encode_blocks(blocks: Optional[Sequence[BlockComponent]]) -> List[Dict[str, Any]]:
    if not blocks:
        return []
    return [_encode_block(block) for block in blocks]


def _validate_block_list(value: Any, info: ValidationInfo) -> List[BlockComponent]:
    if value is None:
        return []
    if isinstance(value, BlockDecodeResult):
        return list(value.blocks)
    if isinstance(value, (list, tuple)) and all(
        isinstance(item, BlockComponent) for item in value
    ):
        return list(value)

    context = info.context if isinstance(info.context, dict) else {}
    registry = context.get(REGISTRY_CONTEXT_KEY)
    result = PolymorphicBlockDecoder(registry).decode_array(value)
    return result.blocks


BlockList = Annotated[
    List[BlockComponent],
    BeforeValidator(_validate_block_list),
    PlainSerializer(encode_blocks, return_type=List[Dict[str, Any]]),
]
"""
Pydantic field type for a dynamic zone.

Validation decodes the raw array with the registry found under the
`"block_registry"` key of the validation context, or with the process-wide
registry when no context is given. Malformed elements are dropped (and
logged); serialization writes each block back with its own shape.

Example:
    ```python
    class Article(BaseModel):
        title: str
        blocks: BlockList = []
    ```
"""
