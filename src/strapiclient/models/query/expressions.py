"""
Filter expressions of the query DSL.

A filter is a tree: leaves are [`FilterCondition`][strapiclient.models.query.expressions.FilterCondition]
objects (field path, operator, value), inner nodes are
[`FilterGroup`][strapiclient.models.query.expressions.FilterGroup] combinators
(`$and`, `$or`, `$not`). Every node knows how to linearize itself into the raw
`(key, value)` pairs of the bracket grammar via `to_pairs()`.

Expressions are usually generated through the [`Field`][strapiclient.models.query.expressions.Field]
proxy rather than instantiated directly:

| User Call | Internal Translation |
| --- | --- |
| `Field("title").eq("Hello")` | `FilterCondition("title", "$eq", "Hello")` |
| `Field("author.name").containsi("sarah")` | `FilterCondition("author.name", "$containsi", "sarah")` |
| `Field("id").in_([1, 2])` | `FilterCondition("id", "$in", [1, 2])` |
| `Field("a").eq(1) \\| Field("b").eq(2)` | `FilterGroup("$or", [...])` |
"""

from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

from ...enum import FilterOperator, LogicalOperator
from ...errors import ArgumentError

QueryPair = Tuple[str, Any]
"""A raw `(key, value)` pair; a `None` value means the key is emitted bare."""


def _coerce_operator(op: Union[FilterOperator, str]) -> FilterOperator:
    if isinstance(op, FilterOperator):
        return op
    try:
        return FilterOperator(op)
    except ValueError:
        raise ArgumentError(
            f"Unknown filter operator '{op}'. "
            f"Supported operators: {[o.value for o in FilterOperator]}"
        ) from None


def _field_segments(field: str) -> List[str]:
    """Splits a dotted relation path into its bracket segments."""
    if field is None or not str(field).strip():
        raise ArgumentError("Filter field cannot be null or empty")
    segments = str(field).strip().split(".")
    if any(not seg for seg in segments):
        raise ArgumentError(f"Invalid filter field path '{field}'")
    return segments


class FilterExpression:
    """
    Base class of every node of a filter tree.

    Subclasses implement `to_pairs()`. The base class provides the `&`, `|`
    and `~` operators, so that conditions can be combined inline:

    Example:
        ```python
        expr = Field("title").containsi("strapi") & ~Field("publishedAt").is_null()
        ```
    """

    def to_pairs(self, prefix: str = "filters") -> List[QueryPair]:
        raise NotImplementedError

    def __and__(self, other: "FilterExpression") -> "FilterGroup":
        return and_(self, other)

    def __or__(self, other: "FilterExpression") -> "FilterGroup":
        return or_(self, other)

    def __invert__(self) -> "FilterGroup":
        return not_(self)


class FilterCondition(FilterExpression):
    """
    An atomic `field / operator / value` predicate.

    Attributes:
        field: The dot-separated field path (e.g. `"author.name"`). Each
            segment becomes a bracket segment at serialization time.
        operator: The [`FilterOperator`][strapiclient.enum.FilterOperator].
        value: A scalar, or a sequence for list-valued operators. Ignored by
            null tests.
    """

    def __init__(self, field: str, operator: Union[FilterOperator, str], value: Any = None):
        """
        Raises:
            ArgumentError: If the field is blank, the operator is not part of the
                closed operator set, or a list-valued operator gets an invalid value.
        """
        self.segments = _field_segments(field)
        self.field = ".".join(self.segments)
        self.operator = _coerce_operator(operator)

        if self.operator.is_null_test:
            value = None
        elif self.operator.is_list_valued:
            if isinstance(value, (list, tuple, set, frozenset)):
                value = list(value)
            elif value is None:
                raise ArgumentError(
                    f"Operator '{self.operator.value}' requires a value for field '{self.field}'"
                )
            else:
                value = [value]
            if self.operator is FilterOperator.BETWEEN and len(value) != 2:
                raise ArgumentError(
                    f"Operator '$between' expects exactly two values, got {len(value)}"
                )
            if not value:
                raise ArgumentError(
                    f"Operator '{self.operator.value}' requires at least one value"
                )
        self.value = value

    def to_pairs(self, prefix: str = "filters") -> List[QueryPair]:
        key = prefix + "".join(f"[{seg}]" for seg in self.segments) + f"[{self.operator.value}]"
        if self.operator.is_null_test:
            return [(key, None)]
        if self.operator.is_list_valued:
            return [(f"{key}[{i}]", item) for i, item in enumerate(self.value)]
        return [(key, self.value)]

    def __repr__(self) -> str:
        return f"FilterCondition({self.field!r}, {self.operator.value!r}, {self.value!r})"


class FilterGroup(FilterExpression):
    """
    A logical combinator over child expressions.

    `$and` / `$or` children are indexed by their zero-based position among
    siblings (`filters[$or][0][...]`); `$not` wraps exactly one child without
    an index (`filters[$not][...]`).
    """

    def __init__(
        self,
        operator: Union[LogicalOperator, str],
        children: Sequence[FilterExpression],
    ):
        try:
            self.operator = LogicalOperator(operator)
        except ValueError:
            raise ArgumentError(f"Unknown logical operator '{operator}'") from None

        self.children = list(children)
        if not self.children:
            raise ArgumentError(
                f"Logical operator '{self.operator.value}' needs at least one expression"
            )
        if self.operator is LogicalOperator.NOT and len(self.children) != 1:
            raise ArgumentError("Logical operator '$not' wraps exactly one expression")
        for child in self.children:
            if not isinstance(child, FilterExpression):
                raise TypeError(
                    f"Invalid expression type. Expected 'FilterExpression', but got '{type(child).__name__}'."
                )

    def to_pairs(self, prefix: str = "filters") -> List[QueryPair]:
        if self.operator is LogicalOperator.NOT:
            return self.children[0].to_pairs(f"{prefix}[{self.operator.value}]")
        pairs: List[QueryPair] = []
        for i, child in enumerate(self.children):
            pairs.extend(child.to_pairs(f"{prefix}[{self.operator.value}][{i}]"))
        return pairs

    def __iter__(self) -> Iterator[FilterExpression]:
        return iter(self.children)

    def __repr__(self) -> str:
        return f"FilterGroup({self.operator.value!r}, {self.children!r})"


def and_(*expressions: FilterExpression) -> FilterGroup:
    """Groups the expressions under `$and`."""
    return FilterGroup(LogicalOperator.AND, expressions)


def or_(*expressions: FilterExpression) -> FilterGroup:
    """Groups the expressions under `$or`."""
    return FilterGroup(LogicalOperator.OR, expressions)


def not_(expression: FilterExpression) -> FilterGroup:
    """Negates a single expression with `$not`."""
    return FilterGroup(LogicalOperator.NOT, [expression])


class Field:
    """
    Query proxy for a single (possibly nested) field path.

    Every terminal method returns a [`FilterCondition`][strapiclient.models.query.expressions.FilterCondition]
    that can be handed to [`StrapiRequest.with_filter()`][strapiclient.models.query.builders.StrapiRequest.with_filter]
    or combined with other expressions.

    Example:
        ```python
        from strapiclient import Field, StrapiRequest

        request = (
            StrapiRequest.get("articles")
            .with_filter(Field("category.slug").in_(["news", "tech"]))
            .with_filter(Field("title").startswith("How to") | Field("title").containsi("guide"))
        )
        ```
    """

    def __init__(self, path: str):
        self.path = ".".join(_field_segments(path))

    def __getattr__(self, name: str) -> "Field":
        # Field("author").name -> Field("author.name")
        if name.startswith("_"):
            raise AttributeError(name)
        return Field(f"{self.path}.{name}")

    def _make(self, op: FilterOperator, value: Any = None) -> FilterCondition:
        return FilterCondition(self.path, op, value)

    def eq(self, value: Any) -> FilterCondition:
        return self._make(FilterOperator.EQUAL, value)

    def eqi(self, value: str) -> FilterCondition:
        return self._make(FilterOperator.EQUAL_CASE_INSENSITIVE, value)

    def ne(self, value: Any) -> FilterCondition:
        return self._make(FilterOperator.NOT_EQUAL, value)

    def nei(self, value: str) -> FilterCondition:
        return self._make(FilterOperator.NOT_EQUAL_CASE_INSENSITIVE, value)

    def lt(self, value: Any) -> FilterCondition:
        return self._make(FilterOperator.LESS_THAN, value)

    def leq(self, value: Any) -> FilterCondition:
        return self._make(FilterOperator.LESS_THAN_OR_EQUAL, value)

    def gt(self, value: Any) -> FilterCondition:
        return self._make(FilterOperator.GREATER_THAN, value)

    def geq(self, value: Any) -> FilterCondition:
        return self._make(FilterOperator.GREATER_THAN_OR_EQUAL, value)

    def in_(self, values: Sequence[Any]) -> FilterCondition:
        return self._make(FilterOperator.IN, values)

    def not_in(self, values: Sequence[Any]) -> FilterCondition:
        return self._make(FilterOperator.NOT_IN, values)

    def contains(self, value: str) -> FilterCondition:
        return self._make(FilterOperator.CONTAINS, value)

    def containsi(self, value: str) -> FilterCondition:
        return self._make(FilterOperator.CONTAINS_CASE_INSENSITIVE, value)

    def not_contains(self, value: str) -> FilterCondition:
        return self._make(FilterOperator.NOT_CONTAINS, value)

    def not_containsi(self, value: str) -> FilterCondition:
        return self._make(FilterOperator.NOT_CONTAINS_CASE_INSENSITIVE, value)

    def startswith(self, value: str) -> FilterCondition:
        return self._make(FilterOperator.STARTS_WITH, value)

    def startswithi(self, value: str) -> FilterCondition:
        return self._make(FilterOperator.STARTS_WITH_CASE_INSENSITIVE, value)

    def endswith(self, value: str) -> FilterCondition:
        return self._make(FilterOperator.ENDS_WITH, value)

    def endswithi(self, value: str) -> FilterCondition:
        return self._make(FilterOperator.ENDS_WITH_CASE_INSENSITIVE, value)

    def is_null(self) -> FilterCondition:
        return self._make(FilterOperator.IS_NULL)

    def is_not_null(self) -> FilterCondition:
        return self._make(FilterOperator.IS_NOT_NULL)

    def between(self, start: Any, end: Optional[Any] = None) -> FilterCondition:
        """
        Inclusive range filter.

        Accepts either two arguments or a single `[start, end]` sequence, in the
        same spirit as the `.between([a, b])` terminal of other query DSLs.
        """
        if end is None and isinstance(start, (list, tuple)):
            return self._make(FilterOperator.BETWEEN, start)
        return self._make(FilterOperator.BETWEEN, [start, end])

    def __repr__(self) -> str:
        return f"Field({self.path!r})"
