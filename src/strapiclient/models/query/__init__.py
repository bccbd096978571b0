from .builders import Pagination as Pagination, StrapiRequest as StrapiRequest
from .expressions import (
    Field as Field,
    FilterCondition as FilterCondition,
    FilterExpression as FilterExpression,
    FilterGroup as FilterGroup,
    and_ as and_,
    not_ as not_,
    or_ as or_,
)
from .populate import PopulateNode as PopulateNode
from .serializer import (
    QuerySerializer as QuerySerializer,
    build_url as build_url,
    serialize as serialize,
)
