from enum import StrEnum


class PublicationStatus(StrEnum):
    """
    Document status tokens accepted by the `status=` query parameter.
    """

    Draft = "draft"
    Published = "published"
