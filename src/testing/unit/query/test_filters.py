from datetime import date, datetime

import pytest

from strapiclient import (
    ArgumentError,
    Field,
    FilterCondition,
    FilterGroup,
    FilterOperator,
    LogicalOperator,
    StrapiRequest,
    and_,
    not_,
    or_,
)


def test_condition_pairs():
    cond = Field("title").eq("Hello")
    assert cond.to_pairs() == [("filters[title][$eq]", "Hello")]


def test_dotted_field_nests_as_bracket_segments():
    cond = Field("author.name").containsi("sarah")
    assert cond.to_pairs() == [("filters[author][name][$containsi]", "sarah")]


def test_attribute_chaining_builds_the_path():
    cond = Field("author").company.name.eq("ACME")
    assert cond.field == "author.company.name"


def test_list_operator_emits_indexed_pairs():
    cond = Field("id").in_([3, 5, 8])
    assert cond.to_pairs() == [
        ("filters[id][$in][0]", 3),
        ("filters[id][$in][1]", 5),
        ("filters[id][$in][2]", 8),
    ]


def test_list_operator_accepts_a_scalar():
    cond = FilterCondition("id", FilterOperator.NOT_IN, 7)
    assert cond.value == [7]


def test_between_needs_two_values():
    assert Field("price").between(10, 20).value == [10, 20]
    assert Field("price").between([10, 20]).value == [10, 20]
    with pytest.raises(ArgumentError):
        FilterCondition("price", "$between", [1, 2, 3])


def test_null_tests_have_no_value():
    cond = FilterCondition("publishedAt", FilterOperator.IS_NULL, "ignored")
    assert cond.value is None
    assert cond.to_pairs() == [("filters[publishedAt][$null]", None)]


def test_unknown_operator_is_rejected():
    with pytest.raises(ArgumentError, match="Unknown filter operator"):
        FilterCondition("title", "$like", "x")


def test_operator_tokens_are_accepted_as_strings():
    cond = FilterCondition("title", "$startsWith", "How")
    assert cond.operator is FilterOperator.STARTS_WITH


@pytest.mark.parametrize("field", ["", "  ", None, "author.", ".name"])
def test_blank_field_is_rejected(field):
    with pytest.raises(ArgumentError):
        FilterCondition(field, FilterOperator.EQUAL, 1)


def test_or_group_indexes_children():
    expr = Field("title").eq("A") | Field("title").eq("B")
    assert isinstance(expr, FilterGroup)
    assert expr.operator is LogicalOperator.OR
    assert expr.to_pairs() == [
        ("filters[$or][0][title][$eq]", "A"),
        ("filters[$or][1][title][$eq]", "B"),
    ]


def test_not_group_has_no_index():
    expr = ~Field("title").contains("draft")
    assert expr.to_pairs() == [("filters[$not][title][$contains]", "draft")]


def test_nested_groups():
    expr = and_(
        Field("category.slug").eq("news"),
        or_(Field("views").gt(100), not_(Field("publishedAt").is_null())),
    )
    request = StrapiRequest.get("articles").with_filter(expr)
    assert request.to_query_string(encode=False) == (
        "filters[$and][0][category][slug][$eq]=news"
        "&filters[$and][1][$or][0][views][$gt]=100"
        "&filters[$and][1][$or][1][$not][publishedAt][$null]"
    )


def test_not_wraps_exactly_one_expression():
    with pytest.raises(ArgumentError):
        FilterGroup(LogicalOperator.NOT, [Field("a").eq(1), Field("b").eq(2)])
    with pytest.raises(ArgumentError):
        FilterGroup(LogicalOperator.AND, [])


def test_group_rejects_non_expressions():
    with pytest.raises(TypeError):
        FilterGroup(LogicalOperator.AND, ["title"])


def test_values_are_formatted():
    request = (
        StrapiRequest.get("articles")
        .with_filter(Field("featured").eq(True))
        .with_filter(Field("publishedAt").geq(datetime(2024, 1, 2, 3, 4, 5)))
        .with_filter(Field("date").lt(date(2024, 6, 1)))
    )
    assert request.to_query_string() == (
        "filters[featured][$eq]=true"
        "&filters[publishedAt][$gte]=2024-01-02T03:04:05"
        "&filters[date][$lt]=2024-06-01"
    )


def test_relation_filter():
    request = StrapiRequest.get("articles").with_relation_filter(
        "author", "name", FilterOperator.CONTAINS, "Sarah"
    )
    assert request.to_query_string() == "filters[author][name][$contains]=Sarah"


def test_every_operator_has_a_field_terminal():
    f = Field("x")
    terminals = [
        f.eq(1), f.eqi("a"), f.ne(1), f.nei("a"), f.lt(1), f.leq(1), f.gt(1), f.geq(1),
        f.in_([1]), f.not_in([1]), f.contains("a"), f.containsi("a"), f.not_contains("a"),
        f.not_containsi("a"), f.startswith("a"), f.startswithi("a"), f.endswith("a"),
        f.endswithi("a"), f.is_null(), f.is_not_null(), f.between(1, 2),
    ]
    assert {t.operator for t in terminals} == set(FilterOperator)
