from .query import (
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
from .response import (
    PaginationMeta as PaginationMeta,
    ResponseEnvelopeParser as ResponseEnvelopeParser,
    ResponseMeta as ResponseMeta,
    StrapiResult as StrapiResult,
)
