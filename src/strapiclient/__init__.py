"""
strapiclient - Python client for Strapi headless-CMS REST APIs.

This module provides the main entry points:

- **StrapiRequest**: The fluent query model (filters, populate, sort, pagination).
- **StrapiRestClient**: Runs requests and decodes the response envelopes.
- **Blocks**: Registry and decoder for dynamic-zone components.

Example:
    >>> from strapiclient import ClientConfig, Field, StrapiRequest, StrapiRestClient
    >>> request = StrapiRequest.get("articles").with_filter(Field("title").containsi("news"))
    >>> with StrapiRestClient(ClientConfig(base_url="http://localhost:1337/api")) as client:
    ...     result = client.execute(request, list)
"""

# --- Client ---
from .comm import (
    ClientConfig as ClientConfig,
    HttpxTransport as HttpxTransport,
    StrapiRestClient as StrapiRestClient,
    Transport as Transport,
    TransportResponse as TransportResponse,
)

# --- Query ---
from .models.query import (
    Field as Field,
    FilterCondition as FilterCondition,
    FilterExpression as FilterExpression,
    FilterGroup as FilterGroup,
    Pagination as Pagination,
    PopulateNode as PopulateNode,
    QuerySerializer as QuerySerializer,
    StrapiRequest as StrapiRequest,
    and_ as and_,
    build_url as build_url,
    not_ as not_,
    or_ as or_,
    serialize as serialize,
)

# --- Responses ---
from .models.response import (
    PaginationMeta as PaginationMeta,
    ResponseEnvelopeParser as ResponseEnvelopeParser,
    ResponseMeta as ResponseMeta,
    StrapiResult as StrapiResult,
)

# --- Blocks ---
from .blocks import (
    BlockComponent as BlockComponent,
    BlockDecodeResult as BlockDecodeResult,
    BlockList as BlockList,
    BlockRegistry as BlockRegistry,
    GenericBlock as GenericBlock,
    PolymorphicBlockDecoder as PolymorphicBlockDecoder,
    block_component as block_component,
    default_registry as default_registry,
    register_block as register_block,
    register_blocks_from as register_blocks_from,
)

# --- Enums ---
from .enum import (
    EnvelopeShape as EnvelopeShape,
    FilterOperator as FilterOperator,
    LogicalOperator as LogicalOperator,
    PublicationStatus as PublicationStatus,
    RequestMethod as RequestMethod,
    SortDirection as SortDirection,
)

# --- Errors ---
from .errors import (
    ArgumentError as ArgumentError,
    ConfigurationError as ConfigurationError,
    DecodeError as DecodeError,
    RemoteError as RemoteError,
    RequestCancelled as RequestCancelled,
    StrapiClientError as StrapiClientError,
    TransportFailure as TransportFailure,
)

from .logging_config import (
    get_logger as get_logger,
    setup_sdk_logging as setup_sdk_logging,
)

__all__ = [
    # Client
    "ClientConfig",
    "HttpxTransport",
    "StrapiRestClient",
    "Transport",
    "TransportResponse",
    # Logging
    "get_logger",
    "setup_sdk_logging",
    # Query
    "Field",
    "FilterCondition",
    "FilterExpression",
    "FilterGroup",
    "Pagination",
    "PopulateNode",
    "QuerySerializer",
    "StrapiRequest",
    "and_",
    "build_url",
    "not_",
    "or_",
    "serialize",
    # Responses
    "PaginationMeta",
    "ResponseEnvelopeParser",
    "ResponseMeta",
    "StrapiResult",
    # Blocks
    "BlockComponent",
    "BlockDecodeResult",
    "BlockList",
    "BlockRegistry",
    "GenericBlock",
    "PolymorphicBlockDecoder",
    "block_component",
    "default_registry",
    "register_block",
    "register_blocks_from",
    # Enums
    "EnvelopeShape",
    "FilterOperator",
    "LogicalOperator",
    "PublicationStatus",
    "RequestMethod",
    "SortDirection",
    # Errors
    "ArgumentError",
    "ConfigurationError",
    "DecodeError",
    "RemoteError",
    "RequestCancelled",
    "StrapiClientError",
    "TransportFailure",
]


# --- Set up the top-level logger for the SDK ---

from logging import NullHandler

logging_config = get_logger()
logging_config.addHandler(NullHandler())
