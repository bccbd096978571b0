from enum import StrEnum


class RequestMethod(StrEnum):
    """
    HTTP verbs a request can be issued with.

    Only `GET` carries query parameters in practice; `POST` and `PUT` carry an
    opaque JSON body which the SDK forwards without inspecting.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
