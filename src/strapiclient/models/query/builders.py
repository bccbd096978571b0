"""
This module provides the high-level "Fluent" API for describing a content query.

[`StrapiRequest`][strapiclient.models.query.builders.StrapiRequest] is the
declarative query model: target collection, filters, populate tree, sort,
pagination, field selection, locale and publication status. Every `with_*`
method validates its input eagerly and returns the request for chaining; the
wire encoding is produced later by
[`serializer`][strapiclient.models.query.serializer].

Example:
    ```python
    from strapiclient import Field, SortDirection, StrapiRequest

    request = (
        StrapiRequest.get("articles")
        .with_filter(Field("title").containsi("strapi"))
        .with_populate("category.author")
        .with_populate_fields("cover", "url", "alternativeText")
        .with_sort("publishedAt", SortDirection.Descending)
        .with_page(2)
        .with_page_size(10)
    )
    url = request.to_url("http://localhost:1337/api")
    ```
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from ...enum import FilterOperator, PublicationStatus, RequestMethod, SortDirection
from ...errors import ArgumentError
from .expressions import FilterCondition, FilterExpression
from .populate import PopulateNode


# Distinguishes "collection not given" (deferred assignment) from an explicit None.
_UNSET: Any = object()


def _validate_collection(collection: Optional[str]) -> str:
    if collection is None or not str(collection).strip():
        raise ArgumentError("Collection name cannot be null or empty")
    return str(collection).strip()


@dataclass
class Pagination:
    """
    Pagination descriptor of a request.

    Either page-based (`page`, `page_size`) or offset-based (`start`, `limit`)
    values can be set, plus the optional `with_count` flag. Both modes may be
    present at the same time; in that case the serializer gives precedence to
    the page-based values and drops `start` / `limit`.

    Attributes:
        page: 1-based page number.
        page_size: Number of entries per page.
        start: 0-based offset of the first entry.
        limit: Maximum number of entries.
        with_count: Whether the response meta must include the total count.
    """

    page: Optional[int] = None
    page_size: Optional[int] = None
    start: Optional[int] = None
    limit: Optional[int] = None
    with_count: Optional[bool] = None

    def __post_init__(self):
        _check_min("page", self.page, 1)
        _check_min("page_size", self.page_size, 1)
        _check_min("start", self.start, 0)
        _check_min("limit", self.limit, 1)

    @property
    def is_page_based(self) -> bool:
        return self.page is not None or self.page_size is not None

    @property
    def is_offset_based(self) -> bool:
        return self.start is not None or self.limit is not None

    def is_empty(self) -> bool:
        return not (self.is_page_based or self.is_offset_based or self.with_count is not None)


def _check_min(name: str, value: Optional[int], minimum: int):
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise ArgumentError(f"Pagination '{name}' must be an integer, got '{value!r}'")
    if value < minimum:
        raise ArgumentError(
            f"Pagination '{name}' must be greater than or equal to {minimum}, got {value}"
        )


class StrapiRequest:
    """
    The declarative description of a single API call.

    The collection name is validated when given to the constructor and again
    when the URL is built, because it can also be assigned later through
    [`with_collection()`][strapiclient.models.query.builders.StrapiRequest.with_collection].

    Attributes:
        method: The HTTP verb.
        collection: The target collection (plural API id, e.g. `"articles"`).
        path: Optional suffix appended to the collection (e.g. `"/1"` or `"/my-slug"`).
        body: Opaque payload forwarded as JSON by `POST` / `PUT` requests.
        filters: Top-level filter expressions, in call order.
        populate_tree: Root of the relation population tree.
        populate_everything: The simple `populate=*` toggle.
        fields: Selected top-level field names, in call order.
        sort: `(field, direction)` pairs, in call order.
        random_sort: Whether `randomSort=true` is emitted.
        pagination: The [`Pagination`][strapiclient.models.query.builders.Pagination] descriptor.
        locale: Optional locale code.
        status: Optional publication status token.
    """

    def __init__(
        self,
        collection: Optional[str] = _UNSET,  # type: ignore[assignment]
        method: RequestMethod = RequestMethod.GET,
        path: str = "",
        body: Any = None,
    ):
        """
        Args:
            collection: Target collection; omit it to assign it later with
                `with_collection()`. An explicit `None` is rejected.
            method: The HTTP verb. Defaults to `GET`.
            path: Optional id or slug suffix, with or without the leading `/`.
            body: Opaque payload for write requests.

        Raises:
            ArgumentError: If `collection` is given but null, empty or whitespace-only.
        """
        self.method = RequestMethod(method)
        self.collection: Optional[str] = None
        if collection is not _UNSET:
            self.collection = _validate_collection(collection)
        self.path = ""
        self.with_path(path)
        self.body = body

        self.filters: List[FilterExpression] = []
        self.populate_tree = PopulateNode()
        self.populate_everything = False
        self.fields: List[str] = []
        self.sort: List[Tuple[str, SortDirection]] = []
        self.random_sort = False
        self.pagination = Pagination()
        self.locale: Optional[str] = None
        self.status: Optional[str] = None

    # --- Factories ---

    @classmethod
    def get(cls, collection: str, path: str = "") -> "StrapiRequest":
        """Builds a `GET` request for a collection (optionally a single entry)."""
        return cls(_validate_collection(collection), RequestMethod.GET, path)

    @classmethod
    def post(cls, collection: str, body: Any, path: str = "") -> "StrapiRequest":
        """Builds a `POST` request carrying `body`."""
        return cls(_validate_collection(collection), RequestMethod.POST, path, body)

    @classmethod
    def put(cls, collection: str, body: Any, path: str = "") -> "StrapiRequest":
        """Builds a `PUT` request carrying `body`."""
        return cls(_validate_collection(collection), RequestMethod.PUT, path, body)

    @classmethod
    def delete(cls, collection: str, path: str = "") -> "StrapiRequest":
        """Builds a `DELETE` request."""
        return cls(_validate_collection(collection), RequestMethod.DELETE, path)

    # --- Target ---

    def with_collection(self, collection: str) -> "StrapiRequest":
        """Assigns (or replaces) the target collection."""
        self.collection = _validate_collection(collection)
        return self

    def with_path(self, path: str) -> "StrapiRequest":
        """
        Sets the id or slug suffix of the request.

        A missing leading `/` is added: `with_path("1")` and `with_path("/1")`
        are equivalent.
        """
        if path is None:
            raise ArgumentError("Path cannot be null")
        path = str(path).strip()
        if path and not path.startswith("/"):
            path = f"/{path}"
        self.path = path.rstrip("/") if path != "/" else ""
        return self

    # --- Filters ---

    def with_filter(
        self,
        operator_or_expr: Union[FilterExpression, FilterOperator, str],
        field: Optional[str] = None,
        value: Any = None,
    ) -> "StrapiRequest":
        """
        Appends a filter; filters are emitted in call order.

        Accepts either a ready-made expression, or an operator followed by the
        field path and the value:

        Example:
            ```python
            request.with_filter(FilterOperator.EQUAL, "title", "Test Article")
            request.with_filter("$containsi", "description", "lorem")
            request.with_filter(Field("author.name").eq("Sarah") | Field("author.name").eq("David"))
            ```

        Raises:
            ArgumentError: If the operator is unknown or the field is blank.
        """
        if isinstance(operator_or_expr, FilterExpression):
            if field is not None or value is not None:
                raise ArgumentError(
                    "'field' and 'value' must not be given together with an expression"
                )
            self.filters.append(operator_or_expr)
        else:
            self.filters.append(FilterCondition(field, operator_or_expr, value))
        return self

    def with_equal(self, field: str, value: Any) -> "StrapiRequest":
        """Shortcut for an `$eq` filter."""
        return self.with_filter(FilterOperator.EQUAL, field, value)

    def with_relation_filter(
        self,
        relation: str,
        field: str,
        operator: Union[FilterOperator, str],
        value: Any = None,
    ) -> "StrapiRequest":
        """
        Filters on a field of a related entity (`filters[relation][field][$op]`).

        Raises:
            ArgumentError: If the relation or field is blank.
        """
        if relation is None or not str(relation).strip():
            raise ArgumentError("Relation cannot be null or empty")
        if field is None or not str(field).strip():
            raise ArgumentError("Field cannot be null or empty")
        return self.with_filter(operator, f"{str(relation).strip()}.{str(field).strip()}", value)

    def clear_filters(self) -> "StrapiRequest":
        """Removes every filter expression."""
        self.filters.clear()
        return self

    # --- Locale & status ---

    def with_locale(self, locale: str) -> "StrapiRequest":
        if locale is None or not str(locale).strip():
            raise ArgumentError("Locale cannot be null or empty")
        self.locale = str(locale).strip()
        return self

    def with_status(self, status: Union[PublicationStatus, str]) -> "StrapiRequest":
        if status is None or not str(status).strip():
            raise ArgumentError("Status cannot be null or empty")
        self.status = str(status).strip()
        return self

    # --- Populate ---

    def with_populate(self, relation: str) -> "StrapiRequest":
        """
        Populates a relation; dotted paths (`"category.author"`) nest.

        Raises:
            ArgumentError: If the relation is blank.
        """
        self.populate_tree.populate(relation)
        return self

    def with_populate_fields(self, relation: str, *fields: str) -> "StrapiRequest":
        """
        Populates a relation restricted to the given fields.

        Raises:
            ArgumentError: If the relation or the field list is empty.
        """
        if not fields:
            raise ArgumentError("Fields cannot be null or empty")
        self.populate_tree.populate(relation).select_fields(*fields)
        return self

    def with_deep_populate(self, relation: str) -> "StrapiRequest":
        """Populates a relation (e.g. a dynamic zone) and everything one level below it."""
        self.populate_tree.populate(relation).deep()
        return self

    def with_populate_all(self) -> "StrapiRequest":
        """
        Emits the simple `populate=*` directive.

        This short-circuits the populate tree: any relation added through
        `with_populate*()` is ignored while the toggle is set.
        """
        self.populate_everything = True
        return self

    # --- Fields ---

    def with_select_field(self, field: str) -> "StrapiRequest":
        """Selects a single top-level field; duplicates are ignored."""
        if field is None or not str(field).strip():
            raise ArgumentError("Field cannot be null or empty")
        name = str(field).strip()
        if name not in self.fields:
            self.fields.append(name)
        return self

    def with_fields(self, *fields: str) -> "StrapiRequest":
        """
        Selects top-level fields, in order.

        Raises:
            ArgumentError: If the list is empty or contains a blank name.
        """
        if not fields:
            raise ArgumentError("Fields cannot be null or empty")
        for field in fields:
            self.with_select_field(field)
        return self

    # --- Sort ---

    def with_sort(
        self, field: str, direction: SortDirection = SortDirection.Ascending
    ) -> "StrapiRequest":
        """
        Appends a sort entry; entries are emitted in call order.

        Raises:
            ArgumentError: If the field is blank.
        """
        if field is None or not str(field).strip():
            raise ArgumentError("Field cannot be null or empty")
        self.sort.append((str(field).strip(), SortDirection(direction)))
        return self

    def with_random_sort(self) -> "StrapiRequest":
        """Asks the API for a random ordering (`randomSort=true`)."""
        self.random_sort = True
        return self

    # --- Pagination ---

    def _set_pagination(self, **values):
        current = self.pagination
        self.pagination = Pagination(
            page=values.get("page", current.page),
            page_size=values.get("page_size", current.page_size),
            start=values.get("start", current.start),
            limit=values.get("limit", current.limit),
            with_count=values.get("with_count", current.with_count),
        )
        return self

    def with_page(self, page: int) -> "StrapiRequest":
        """
        Raises:
            ArgumentError: If `page` is lower than 1.
        """
        return self._set_pagination(page=page)

    def with_page_size(self, page_size: int) -> "StrapiRequest":
        """
        Raises:
            ArgumentError: If `page_size` is lower than 1.
        """
        return self._set_pagination(page_size=page_size)

    def with_start(self, start: int) -> "StrapiRequest":
        """
        Raises:
            ArgumentError: If `start` is negative.
        """
        return self._set_pagination(start=start)

    def with_limit(self, limit: int) -> "StrapiRequest":
        """
        Raises:
            ArgumentError: If `limit` is lower than 1.
        """
        return self._set_pagination(limit=limit)

    def with_count(self, with_count: bool = True) -> "StrapiRequest":
        return self._set_pagination(with_count=bool(with_count))

    def with_pagination(
        self, page: Optional[int] = None, page_size: Optional[int] = None
    ) -> "StrapiRequest":
        """Replaces the pagination descriptor with a page-based one."""
        self.pagination = Pagination(page=page, page_size=page_size)
        return self

    # --- Serialization shortcuts ---

    def to_query_pairs(self) -> List[Tuple[str, Optional[str]]]:
        """Returns the raw, unencoded `(key, value)` pairs of the query string."""
        from .serializer import iter_query_pairs

        return list(iter_query_pairs(self))

    def to_query_string(self, encode: bool = True) -> str:
        """Returns the `&`-joined query string (without the leading `?`)."""
        from .serializer import serialize

        return "&".join(serialize(self, encode=encode))

    def to_url(self, endpoint: str, encode: bool = True) -> str:
        """
        Builds the full URL against `endpoint` (e.g. `"http://localhost:1337/api"`).

        Raises:
            ArgumentError: If the collection was never set.
        """
        from .serializer import build_url

        return build_url(endpoint, self, encode=encode)

    def __repr__(self) -> str:
        return (
            f"StrapiRequest(method={self.method.value}, collection={self.collection!r}, "
            f"path={self.path!r})"
        )
