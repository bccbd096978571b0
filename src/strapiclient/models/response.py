"""
Response envelopes and their parser.

The API wraps every payload into one of three envelopes:

* collection: `{"data": [...], "meta": {"pagination": {...}}}`
* single item: `{"data": {...}, "meta"?: {...}}`
* error: `{"error": {"status": ..., "name": ..., "message": ..., "details"?: ...}}`

[`ResponseEnvelopeParser`][strapiclient.models.response.ResponseEnvelopeParser]
parses the raw text once, classifies it by the JSON type of its `data` member
and decodes the payload into the caller's target type. Remote and decode
errors are returned inside the [`StrapiResult`][strapiclient.models.response.StrapiResult]
instead of being raised.
"""

import json
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..enum import EnvelopeShape
from ..errors import DecodeError, RemoteError
from ..logging_config import get_logger

# Set the hierarchical logger
logger = get_logger(__name__)

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """
    Pagination counters of a collection response.

    Page-based responses fill `page`, `page_size`, `page_count` and `total`;
    offset-based responses fill `start`, `limit` and `total`.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    page: Optional[int] = None
    page_size: Optional[int] = Field(default=None, alias="pageSize")
    page_count: Optional[int] = Field(default=None, alias="pageCount")
    total: Optional[int] = None
    start: Optional[int] = None
    limit: Optional[int] = None


class ResponseMeta(BaseModel):
    """The `meta` member of an envelope. Unknown keys are kept as extras."""

    model_config = ConfigDict(extra="allow")

    pagination: Optional[PaginationMeta] = None


class _ErrorBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: Optional[int] = None
    name: Optional[str] = None
    message: Optional[str] = None
    details: Any = None


class _ErrorEnvelope(BaseModel):
    error: _ErrorBody


@dataclass
class StrapiResult(Generic[T]):
    """
    Outcome of a single API call.

    Exactly one of `data` and `error` is meaningful: on success `error` is
    `None`; on failure `error` holds either a
    [`RemoteError`][strapiclient.errors.RemoteError] (the API answered with an
    error envelope) or a [`DecodeError`][strapiclient.errors.DecodeError] (the
    text did not match the target type).

    Attributes:
        data: The decoded payload. For collections this is the unwrapped list.
        status_code: The transport status code.
        meta: Envelope metadata (pagination counters), when present.
        error: The error surfaced by the parser, if any.
        shape: The envelope shape the payload was decoded from.
    """

    data: Optional[T] = None
    status_code: int = 200
    meta: Optional[ResponseMeta] = None
    error: Optional[Union[RemoteError, DecodeError]] = None
    shape: EnvelopeShape = EnvelopeShape.Invalid

    @property
    def is_success(self) -> bool:
        return self.error is None and 200 <= self.status_code <= 299

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        if isinstance(self.error, RemoteError):
            return self.error.message
        return str(self.error)

    @property
    def pagination(self) -> Optional[PaginationMeta]:
        return self.meta.pagination if self.meta is not None else None

    @property
    def total_count(self) -> Optional[int]:
        return self.pagination.total if self.pagination else None

    @property
    def current_page(self) -> Optional[int]:
        return self.pagination.page if self.pagination else None

    @property
    def page_size(self) -> Optional[int]:
        return self.pagination.page_size if self.pagination else None

    @property
    def page_count(self) -> Optional[int]:
        return self.pagination.page_count if self.pagination else None

    def raise_for_error(self) -> "StrapiResult[T]":
        """
        Raises the stored error, if any; returns the result otherwise.

        Example:
            ```python
            articles = client.execute(request, List[Article]).raise_for_error().data
            ```
        """
        if self.error is not None:
            raise self.error
        return self


@lru_cache(maxsize=256)
def _adapter_for(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)


class ResponseEnvelopeParser:
    """
    Classifies raw response text and decodes it into a target type.

    The document is parsed once, then the decode attempts run in order:

    1. **collection**: `data` is an array and `meta` is an object;
    2. **single item**: `data` is an object;
    3. **raw**: the whole document is decoded as the target type.

    An attempt whose decoding fails falls through to the next one; only the
    failure of the last attempt tried is surfaced, as a `DecodeError`. A
    non-2xx status bypasses the attempts and decodes the error envelope.

    Args:
        context: Optional pydantic validation context forwarded to every
            decode (the client passes its block registry this way).
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        self.context = context

    def parse(
        self, text: str, target: Any, status_code: int = 200
    ) -> StrapiResult[Any]:
        """
        Parses `text` into a [`StrapiResult`][strapiclient.models.response.StrapiResult].

        Args:
            text: The raw response body.
            target: Any type pydantic can validate (`Article`, `List[Article]`,
                `dict`, ...). For collection responses, pass the list type.
            status_code: The transport status code.

        Returns:
            The populated result; never raises for remote or decode errors.
        """
        if not 200 <= status_code <= 299:
            return self._parse_error(text, status_code)

        try:
            document = json.loads(text)
        except (TypeError, ValueError) as e:
            logger.debug(f"Response body is not valid JSON: {e}")
            return StrapiResult(
                status_code=status_code,
                error=DecodeError(f"Response body is not valid JSON: {e}", payload=text),
                shape=EnvelopeShape.Invalid,
            )

        last_error: Optional[Exception] = None
        for shape, payload, meta in self._candidates(document):
            try:
                data = _adapter_for(target).validate_python(payload, context=self.context)
                parsed_meta = (
                    ResponseMeta.model_validate(meta) if isinstance(meta, dict) else None
                )
            except ValidationError as e:
                logger.debug(
                    f"Envelope attempt '{shape.value}' did not match target '{_type_name(target)}'"
                )
                last_error = e
                continue

            logger.debug(f"Decoded response as '{shape.value}' envelope")
            return StrapiResult(
                data=data, status_code=status_code, meta=parsed_meta, shape=shape
            )

        return StrapiResult(
            status_code=status_code,
            error=DecodeError(
                f"Unable to decode response as '{_type_name(target)}': {last_error}",
                payload=text,
            ),
            shape=EnvelopeShape.Invalid,
        )

    @staticmethod
    def _candidates(document: Any) -> List[Tuple[EnvelopeShape, Any, Any]]:
        attempts: List[Tuple[EnvelopeShape, Any, Any]] = []
        if isinstance(document, dict):
            data = document.get("data")
            meta = document.get("meta")
            if isinstance(data, list) and isinstance(meta, dict):
                attempts.append((EnvelopeShape.Collection, data, meta))
            elif isinstance(data, dict):
                attempts.append((EnvelopeShape.Single, data, meta))
        attempts.append((EnvelopeShape.Raw, document, None))
        return attempts

    @staticmethod
    def _parse_error(text: str, status_code: int) -> StrapiResult[Any]:
        try:
            envelope = _ErrorEnvelope.model_validate_json(text)
        except ValidationError:
            logger.debug(
                f"Error response with status {status_code} has no valid error envelope"
            )
            error = RemoteError(status=status_code, message=text or None)
        else:
            body = envelope.error
            error = RemoteError(
                status=body.status if body.status is not None else status_code,
                name=body.name,
                message=body.message,
                details=body.details,
            )
        return StrapiResult(status_code=status_code, error=error, shape=EnvelopeShape.Error)
