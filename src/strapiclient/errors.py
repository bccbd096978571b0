"""
Error Taxonomy.

All exceptions raised (or carried inside results) by the SDK derive from
`StrapiClientError`, so host applications can catch the whole family with a
single clause.

* `ArgumentError` is raised synchronously when a request model is built with
  invalid input.
* `DecodeError` and `RemoteError` are *values*: the envelope parser and the
  block decoder store them in their results instead of raising them.
* `TransportFailure` is raised by transports and crosses the core untouched.
"""

from typing import Any, Optional


class StrapiClientError(Exception):
    """Base class for every error of the SDK."""

    pass


class ArgumentError(StrapiClientError, ValueError):
    """Raised when a request, populate node or filter is built with invalid input."""

    pass


class ConfigurationError(StrapiClientError):
    """Raised when the client configuration is incomplete."""

    pass


class DecodeError(StrapiClientError):
    """
    Raised (or stored) when a payload does not match any of the attempted shapes.

    Attributes:
        payload: The raw text or element that failed to decode, if available.
    """

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class RemoteError(StrapiClientError):
    """
    A well-formed error envelope returned by the API.

    Mirrors the `{"error": {"status", "name", "message", "details"}}` body
    that Strapi returns alongside non-2xx statuses.
    """

    def __init__(
        self,
        status: int,
        name: Optional[str] = None,
        message: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(f"[{status}] {name or 'Error'}: {message or ''}".rstrip())
        self.status = status
        self.name = name
        self.message = message
        self.details = details


class TransportFailure(StrapiClientError):
    """Raised by a transport when no response could be obtained."""

    pass


class RequestCancelled(TransportFailure):
    """Raised by a transport when the caller's cancellation token is set."""

    pass
