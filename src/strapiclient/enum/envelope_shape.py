from enum import Enum


class EnvelopeShape(Enum):
    """
    The response shape recognized by the envelope parser.
    """

    Collection = "collection"  # {"data": [...], "meta": {...}}
    Single = "single"  # {"data": {...}, "meta"?: {...}}
    Raw = "raw"  # The whole document decoded as the target type.
    Error = "error"  # {"error": {...}} returned with a non-2xx status.
    Invalid = "invalid"  # No attempt matched, or the text is not JSON.
