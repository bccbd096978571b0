"""
Query serializer and URL assembler.

Linearizes a [`StrapiRequest`][strapiclient.models.query.builders.StrapiRequest]
into the ordered `key=value` pairs of the bracket-notation grammar, then joins
them with the endpoint into the final URL.

Sections are always emitted in this order:

1. `filters[...]`
2. `locale=`
3. `status=`
4. `populate=*` or `populate[...]`
5. `fields[i]=`
6. `sort[i]=field:direction`
7. `randomSort=true`
8. `pagination[...]`
"""

from datetime import date, datetime, time
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Tuple
from urllib.parse import quote

from ...errors import ArgumentError
from ...logging_config import get_logger
from .populate import WILDCARD

if TYPE_CHECKING:
    from .builders import Pagination, StrapiRequest

# Set the hierarchical logger
logger = get_logger(__name__)

# Characters left untouched when percent-encoding
_KEY_SAFE_CHARS = "[]$"
_VALUE_SAFE_CHARS = "*,:"


def format_value(value: Any) -> str:
    """Renders a filter or parameter value as its query-string text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if value is None:
        return ""
    return str(value)


def _filter_pairs(request: "StrapiRequest") -> Iterator[Tuple[str, Optional[str]]]:
    for expr in request.filters:
        for key, value in expr.to_pairs("filters"):
            yield key, (None if value is None and _is_bare(key) else format_value(value))


def _is_bare(key: str) -> bool:
    return key.endswith("[$null]") or key.endswith("[$notNull]")


def flatten_populate(obj: Any, prefix: str = "populate") -> List[Tuple[str, str]]:
    """
    Flattens a populate wire object into bracket pairs.

    * `"*"` becomes `prefix=*`;
    * a mapping recurses into `prefix[key]` (the comma-joined `fields` string is
      emitted as a single value);
    * the compact root list of relation names becomes one `prefix[name]=*`
      pair per name.
    """
    pairs: List[Tuple[str, str]] = []
    if obj is None:
        return pairs
    if isinstance(obj, str):
        pairs.append((prefix, obj))
    elif isinstance(obj, list):
        for name in obj:
            pairs.append((f"{prefix}[{name}]", WILDCARD))
    elif isinstance(obj, dict):
        for key, value in obj.items():
            pairs.extend(flatten_populate(value, f"{prefix}[{key}]"))
    else:
        raise TypeError(f"Unsupported populate object type '{type(obj).__name__}'")
    return pairs


def _populate_pairs(request: "StrapiRequest") -> List[Tuple[str, str]]:
    if request.populate_everything:
        # Simple populate=* (everything one level deep); the tree is ignored
        return [("populate", WILDCARD)]
    return flatten_populate(request.populate_tree.to_wire_object())


def _pagination_pairs(pagination: "Pagination") -> List[Tuple[str, str]]:
    pairs: List[Tuple[str, str]] = []
    if pagination.is_page_based and pagination.is_offset_based:
        logger.warning(
            "Both page-based and offset-based pagination are set: "
            f"'start={pagination.start}', 'limit={pagination.limit}' are ignored."
        )
    if pagination.is_page_based:
        if pagination.page is not None:
            pairs.append(("pagination[page]", format_value(pagination.page)))
        if pagination.page_size is not None:
            pairs.append(("pagination[pageSize]", format_value(pagination.page_size)))
    else:
        if pagination.start is not None:
            pairs.append(("pagination[start]", format_value(pagination.start)))
        if pagination.limit is not None:
            pairs.append(("pagination[limit]", format_value(pagination.limit)))
    if pagination.with_count is not None:
        pairs.append(("pagination[withCount]", format_value(pagination.with_count)))
    return pairs


def iter_query_pairs(request: "StrapiRequest") -> Iterator[Tuple[str, Optional[str]]]:
    """
    Yields the raw (unencoded) query pairs of a request, in canonical order.

    A `None` value marks a bare key (null-test filters).
    """
    yield from _filter_pairs(request)

    if request.locale:
        yield "locale", request.locale
    if request.status:
        yield "status", request.status

    yield from _populate_pairs(request)

    for i, field in enumerate(request.fields):
        yield f"fields[{i}]", field

    for i, (field, direction) in enumerate(request.sort):
        yield f"sort[{i}]", f"{field}:{direction.value}"

    if request.random_sort:
        yield "randomSort", "true"

    yield from _pagination_pairs(request.pagination)


def encode_pair(key: str, value: Optional[str], encode: bool = True) -> str:
    """Renders a single pair as `key=value` (or the bare `key`)."""
    if encode:
        key = quote(key, safe=_KEY_SAFE_CHARS)
        value = None if value is None else quote(value, safe=_VALUE_SAFE_CHARS)
    return key if value is None else f"{key}={value}"


def serialize(request: "StrapiRequest", encode: bool = True) -> List[str]:
    """
    Converts a request into its ordered list of `key=value` strings.

    Args:
        request: The request to serialize.
        encode: Percent-encode keys and values. Brackets and `$` in keys, and
            `*`, `,`, `:` in values are kept literal.

    Returns:
        The ordered pairs, ready to be joined with `&`.
    """
    return [encode_pair(key, value, encode) for key, value in iter_query_pairs(request)]


def build_url(endpoint: str, request: "StrapiRequest", encode: bool = True) -> str:
    """
    Joins the endpoint, the collection, the optional id/slug suffix and the
    query string into the final URL.

    Example:
        ```python
        build_url("http://localhost:1337/api/", StrapiRequest.get("articles", "/1"))
        # 'http://localhost:1337/api/articles/1'
        ```

    Raises:
        ArgumentError: If the request has no collection, or the endpoint is blank.
    """
    if request is None or request.collection is None or not request.collection.strip():
        raise ArgumentError("Request and collection name are required to build a URL")
    if endpoint is None or not str(endpoint).strip():
        raise ArgumentError("Endpoint cannot be null or empty")

    base_url = f"{str(endpoint).strip().rstrip('/')}/{request.collection}{request.path}"
    pairs = serialize(request, encode=encode)
    url = f"{base_url}?{'&'.join(pairs)}" if pairs else base_url

    logger.debug(f"Built request URL: '{url}'")
    return url


class QuerySerializer:
    """
    Namespace-style facade over the module functions, for callers that prefer
    an object they can pass around (e.g. to swap encoding in tests).
    """

    def __init__(self, encode: bool = True):
        self.encode = encode

    def serialize(self, request: "StrapiRequest") -> List[str]:
        return serialize(request, encode=self.encode)

    def to_query_string(self, request: "StrapiRequest") -> str:
        return "&".join(self.serialize(request))

    def build_url(self, endpoint: str, request: "StrapiRequest") -> str:
        return build_url(endpoint, request, encode=self.encode)
