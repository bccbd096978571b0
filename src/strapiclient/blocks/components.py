"""
Block component shapes.

A dynamic zone is a heterogeneous list of objects, each carrying its own
discriminator tag in the `__component` member:

```json
[
  {"id": 1, "__component": "shared.rich-text", "body": "# Hello"},
  {"id": 2, "__component": "shared.quote", "title": "Ada", "body": "..."}
]
```

Every concrete shape derives from [`BlockComponent`][strapiclient.blocks.components.BlockComponent].
Tags that no shape is registered for decode into
[`GenericBlock`][strapiclient.blocks.components.GenericBlock], which keeps all
fields verbatim.

Host applications declare their own shapes the same way the built-ins do:

Example:
    ```python
    from typing import Optional
    from strapiclient.blocks import BlockComponent, block_component

    @block_component("sections.hero")
    class HeroBlock(BlockComponent):
        heading: Optional[str] = None
        subheading: Optional[str] = None
    ```
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

COMPONENT_TAG_ATTR = "__component_tag__"

_B = TypeVar("_B", bound=type)


def block_component(tag: str) -> Callable[[_B], _B]:
    """
    Class decorator attaching a discriminator tag to a block shape.

    The decorator only annotates the class; nothing is registered until the
    class is handed to
    [`BlockRegistry.register_from()`][strapiclient.blocks.registry.BlockRegistry.register_from].
    """

    def decorator(cls: _B) -> _B:
        setattr(cls, COMPONENT_TAG_ATTR, tag)
        return cls

    return decorator


def component_tag_of(shape: Type[Any]) -> Optional[str]:
    """Returns the tag declared on `shape` itself (inherited tags are ignored)."""
    return vars(shape).get(COMPONENT_TAG_ATTR)


class BlockComponent(BaseModel):
    """
    Base class of every block shape.

    Attributes:
        id: The component instance id.
        component: The discriminator tag (`__component` on the wire).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    component: Optional[str] = Field(default=None, alias="__component")


class GenericBlock(BlockComponent):
    """
    Catch-all shape for tags with no registered shape.

    Unknown members are stored as pydantic extras and written back unchanged
    when the block is encoded.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @property
    def additional_data(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


# --- Media ---


class MediaFormat(BaseModel):
    """One rendition (thumbnail, small, ...) of an uploaded file."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    hash: Optional[str] = None
    ext: Optional[str] = None
    mime: Optional[str] = None
    path: Optional[Any] = None
    width: Optional[int] = None
    height: Optional[int] = None
    size: Optional[float] = None
    size_in_bytes: Optional[int] = Field(default=None, alias="sizeInBytes")
    url: Optional[str] = None


class MediaFormats(BaseModel):
    model_config = ConfigDict(extra="allow")

    thumbnail: Optional[MediaFormat] = None
    large: Optional[MediaFormat] = None
    medium: Optional[MediaFormat] = None
    small: Optional[MediaFormat] = None


class Media(BaseModel):
    """An entry of the media library, as returned inside a populated relation."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    document_id: Optional[str] = Field(default=None, alias="documentId")
    name: Optional[str] = None
    alternative_text: Optional[str] = Field(default=None, alias="alternativeText")
    caption: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    formats: Optional[MediaFormats] = None
    hash: Optional[str] = None
    ext: Optional[str] = None
    mime: Optional[str] = None
    size: Optional[float] = None
    url: Optional[str] = None
    preview_url: Optional[Any] = Field(default=None, alias="previewUrl")
    provider: Optional[str] = None
    provider_metadata: Optional[Any] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    published_at: Optional[datetime] = Field(default=None, alias="publishedAt")


# --- Built-in shapes ---


@block_component("shared.rich-text")
class RichTextBlock(BlockComponent):
    body: Optional[str] = None


@block_component("shared.quote")
class QuoteBlock(BlockComponent):
    title: Optional[str] = None
    body: Optional[str] = None


@block_component("shared.media")
class MediaBlock(BlockComponent):
    file: Optional[Media] = None


@block_component("shared.slider")
class SliderBlock(BlockComponent):
    files: List[Media] = Field(default_factory=list)


BUILTIN_BLOCKS: List[Type[BlockComponent]] = [
    RichTextBlock,
    QuoteBlock,
    MediaBlock,
    SliderBlock,
]
