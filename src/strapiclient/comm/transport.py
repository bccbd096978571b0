"""
Transport layer.

A transport turns `(method, url, body, cancel_token)` into
`(status_code, text)`. Anything that satisfies the
[`Transport`][strapiclient.comm.transport.Transport] protocol can be handed to
the client; [`HttpxTransport`][strapiclient.comm.transport.HttpxTransport] is
the default one.

Retries and backoff are the transport's responsibility: the client and the
parsers above it never retry.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, runtime_checkable

import httpx

from ..enum import RequestMethod
from ..errors import RequestCancelled, TransportFailure
from ..logging_config import get_logger
from .config import ClientConfig

# Set the hierarchical logger
logger = get_logger(__name__)

# Retried on top of every 5xx status
RETRYABLE_STATUS_CODES = frozenset({408, 429})


@dataclass
class TransportResponse:
    status_code: int
    text: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299


@runtime_checkable
class Transport(Protocol):
    """
    Structural protocol of a transport collaborator.

    Implementations return the response for every status code (error envelopes
    are decoded by the caller) and raise
    [`TransportFailure`][strapiclient.errors.TransportFailure] only when no
    response could be obtained at all.
    """

    def send(
        self,
        method: RequestMethod,
        url: str,
        body: Any = None,
        cancel_token: Optional[threading.Event] = None,
    ) -> TransportResponse: ...

    def close(self) -> None: ...


def _is_retryable(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS_CODES or status_code >= 500


class HttpxTransport:
    """
    [`Transport`][strapiclient.comm.transport.Transport] backed by a
    synchronous `httpx.Client`.

    * Sends `Authorization: Bearer <api_key>` when the config carries a key.
    * Retries 5xx, 408 and 429 responses and `httpx.TransportError` failures
      up to `config.max_retries` times, sleeping `backoff_factor ** attempt`
      seconds in between.
    * Checks the cancellation token before every attempt and wakes up from the
      backoff sleep as soon as it is set.

    Args:
        config: The client configuration.
        client: An already configured `httpx.Client`. When given, the transport
            does not own it and `close()` leaves it open.
        sleep: Replaces `time.sleep` for the backoff delay when no cancellation
            token is given.
    """

    def __init__(
        self,
        config: ClientConfig,
        client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._config = config
        self._sleep = sleep
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(
            headers=self._default_headers(config),
            timeout=config.timeout,
        )

    @staticmethod
    def _default_headers(config: ClientConfig) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        return headers

    def _wait(self, delay: float, cancel_token: Optional[threading.Event]):
        if delay <= 0:
            return
        if cancel_token is not None:
            if cancel_token.wait(delay):
                raise RequestCancelled("Request cancelled during retry backoff")
        else:
            self._sleep(delay)

    def send(
        self,
        method: RequestMethod,
        url: str,
        body: Any = None,
        cancel_token: Optional[threading.Event] = None,
    ) -> TransportResponse:
        """
        Performs the call, retrying transient failures.

        Returns:
            The last response obtained, whatever its status.

        Raises:
            RequestCancelled: If `cancel_token` is set before an attempt or
                during a backoff sleep.
            TransportFailure: If every attempt failed without a response.
        """
        method = RequestMethod(method)
        max_retries = self._config.max_retries

        for attempt in range(max_retries + 1):
            if cancel_token is not None and cancel_token.is_set():
                raise RequestCancelled(f"Request '{method.value} {url}' cancelled")

            try:
                response = self._client.request(method.value, url, json=body)
            except httpx.RequestError as e:
                # Only network-level errors are worth another attempt
                if attempt >= max_retries or not isinstance(e, httpx.TransportError):
                    raise TransportFailure(
                        f"Request '{method.value} {url}' failed after {attempt + 1} attempt(s).\nInner err: '{e}'"
                    ) from e
                delay = self._config.backoff_factor ** (attempt + 1)
                logger.warning(
                    f"Transport error on '{method.value} {url}': '{e}'. Retrying in {delay:.1f}s ({attempt + 1}/{max_retries})"
                )
                self._wait(delay, cancel_token)
                continue

            if _is_retryable(response.status_code) and attempt < max_retries:
                delay = self._config.backoff_factor ** (attempt + 1)
                logger.warning(
                    f"Status {response.status_code} on '{method.value} {url}'. Retrying in {delay:.1f}s ({attempt + 1}/{max_retries})"
                )
                self._wait(delay, cancel_token)
                continue

            return TransportResponse(status_code=response.status_code, text=response.text)

        # The loop always returns or raises on its last attempt.
        raise TransportFailure(f"Request '{method.value} {url}' exhausted its retries")

    def close(self):
        if self._owns_client:
            self._client.close()
