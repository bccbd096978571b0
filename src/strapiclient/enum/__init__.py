from .envelope_shape import EnvelopeShape as EnvelopeShape
from .filter_operator import (
    FilterOperator as FilterOperator,
    LogicalOperator as LogicalOperator,
)
from .publication_status import PublicationStatus as PublicationStatus
from .request_method import RequestMethod as RequestMethod
from .sort_direction import SortDirection as SortDirection
