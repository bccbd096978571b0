from .components import (
    BUILTIN_BLOCKS as BUILTIN_BLOCKS,
    BlockComponent as BlockComponent,
    GenericBlock as GenericBlock,
    Media as Media,
    MediaBlock as MediaBlock,
    MediaFormat as MediaFormat,
    MediaFormats as MediaFormats,
    QuoteBlock as QuoteBlock,
    RichTextBlock as RichTextBlock,
    SliderBlock as SliderBlock,
    block_component as block_component,
)
from .decoder import (
    BlockDecodeResult as BlockDecodeResult,
    BlockList as BlockList,
    PolymorphicBlockDecoder as PolymorphicBlockDecoder,
)
from .helpers import (
    blocks_by_component as blocks_by_component,
    blocks_by_registered_type as blocks_by_registered_type,
    blocks_of_type as blocks_of_type,
    first_block_of_type as first_block_of_type,
    has_unknown_blocks as has_unknown_blocks,
    unknown_blocks as unknown_blocks,
)
from .registry import (
    BlockRegistry as BlockRegistry,
    default_registry as default_registry,
    register_block as register_block,
    register_blocks_from as register_blocks_from,
    register_builtin_blocks as register_builtin_blocks,
)
