from enum import StrEnum


class FilterOperator(StrEnum):
    """
    Closed set of comparison operators understood by the `filters[...]` grammar.

    The enum value is the exact token placed between brackets in the query
    string (e.g. `filters[title][$eq]=...`). Building a filter with any other
    token is rejected with an [`ArgumentError`][strapiclient.errors.ArgumentError].
    """

    EQUAL = "$eq"
    EQUAL_CASE_INSENSITIVE = "$eqi"
    NOT_EQUAL = "$ne"
    NOT_EQUAL_CASE_INSENSITIVE = "$nei"
    LESS_THAN = "$lt"
    LESS_THAN_OR_EQUAL = "$lte"
    GREATER_THAN = "$gt"
    GREATER_THAN_OR_EQUAL = "$gte"
    IN = "$in"
    NOT_IN = "$notIn"
    CONTAINS = "$contains"
    CONTAINS_CASE_INSENSITIVE = "$containsi"
    NOT_CONTAINS = "$notContains"
    NOT_CONTAINS_CASE_INSENSITIVE = "$notContainsi"
    STARTS_WITH = "$startsWith"
    STARTS_WITH_CASE_INSENSITIVE = "$startsWithi"
    ENDS_WITH = "$endsWith"
    ENDS_WITH_CASE_INSENSITIVE = "$endsWithi"
    IS_NULL = "$null"
    IS_NOT_NULL = "$notNull"
    BETWEEN = "$between"

    @property
    def is_list_valued(self) -> bool:
        """True for operators whose value is emitted as indexed pairs."""
        return self in (FilterOperator.IN, FilterOperator.NOT_IN, FilterOperator.BETWEEN)

    @property
    def is_null_test(self) -> bool:
        """True for operators emitted as a bare key, without `=value`."""
        return self in (FilterOperator.IS_NULL, FilterOperator.IS_NOT_NULL)


class LogicalOperator(StrEnum):
    """Combinators that group filter expressions."""

    AND = "$and"
    OR = "$or"
    NOT = "$not"
