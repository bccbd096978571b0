from enum import Enum


class SortDirection(Enum):
    """
    Ordering applied to a `sort[i]=field:direction` entry.
    """

    Ascending = "asc"
    Descending = "desc"
