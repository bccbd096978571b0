"""
Strapi Client Entry Point.

This module provides the `StrapiRestClient`, the object host applications use
to run a [`StrapiRequest`][strapiclient.models.query.builders.StrapiRequest]
against a server. It assembles the URL, delegates the call to a
[`Transport`][strapiclient.comm.transport.Transport] and hands the response
text to the [`ResponseEnvelopeParser`][strapiclient.models.response.ResponseEnvelopeParser].
"""

import threading
from typing import Any, Optional, Type

from ..blocks.decoder import REGISTRY_CONTEXT_KEY
from ..blocks.registry import BlockRegistry, default_registry
from ..logging_config import get_logger
from ..models.query.builders import StrapiRequest
from ..models.response import ResponseEnvelopeParser, StrapiResult
from .config import ClientConfig
from .transport import HttpxTransport, Transport

# Set the hierarchical logger
logger = get_logger(__name__)


class StrapiRestClient:
    """
    The gateway to a Strapi REST API.

    Remote errors (non-2xx envelopes) and decode errors are returned inside the
    [`StrapiResult`][strapiclient.models.response.StrapiResult];
    [`ArgumentError`][strapiclient.errors.ArgumentError] and
    [`TransportFailure`][strapiclient.errors.TransportFailure] are raised.

    Tip: Context Manager Usage
        The client is best used as a context manager, so that the underlying
        HTTP connection pool is closed on exit.

        ```python
        from typing import List
        from strapiclient import ClientConfig, StrapiRequest, StrapiRestClient

        with StrapiRestClient(ClientConfig(base_url="http://localhost:1337/api")) as client:
            result = client.execute(StrapiRequest.get("articles").with_page_size(5), List[Article])
            if result.is_success:
                print(result.total_count, [a.title for a in result.data])
        ```

    Args:
        config: Connection settings.
        transport: Custom transport. Defaults to an
            [`HttpxTransport`][strapiclient.comm.transport.HttpxTransport]
            built from `config`, owned (and closed) by the client.
        registry: Block registry used to decode `BlockList` fields of target
            models. Defaults to the process-wide registry.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[Transport] = None,
        registry: Optional[BlockRegistry] = None,
    ):
        self._config = config
        self._owns_transport = transport is None
        self._transport: Transport = (
            transport if transport is not None else HttpxTransport(config)
        )
        self._registry = registry if registry is not None else default_registry()
        self._parser = ResponseEnvelopeParser(
            context={REGISTRY_CONTEXT_KEY: self._registry}
        )
        self._closed = False

    @classmethod
    def from_env(cls, prefix: str = "STRAPI_", **kwargs) -> "StrapiRestClient":
        """
        Builds a client from [`ClientConfig.from_env()`][strapiclient.comm.config.ClientConfig.from_env].

        Raises:
            ConfigurationError: If the base URL variable is missing.
        """
        return cls(ClientConfig.from_env(prefix), **kwargs)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def registry(self) -> BlockRegistry:
        return self._registry

    def build_url(self, request: StrapiRequest) -> str:
        """Builds the full URL of `request` against the configured base URL."""
        return request.to_url(self._config.base_url)

    def execute(
        self,
        request: StrapiRequest,
        target: Any,
        cancel_token: Optional[threading.Event] = None,
    ) -> StrapiResult[Any]:
        """
        Runs `request` and decodes the response into `target`.

        Args:
            request: The request to run.
            target: The decode type, e.g. `List[Article]` for a collection or
                `Article` for a single entry.
            cancel_token: Optional event forwarded to the transport.

        Returns:
            The decoded result, or a result carrying a `RemoteError` /
            `DecodeError`.

        Raises:
            ArgumentError: If the request has no collection.
            TransportFailure: If no response could be obtained.
        """
        url = self.build_url(request)
        logger.debug(f"Sending '{request.method.value} {url}'")

        response = self._transport.send(
            request.method, url, body=request.body, cancel_token=cancel_token
        )
        result = self._parser.parse(response.text, target, response.status_code)

        if result.error is not None:
            logger.debug(
                f"'{request.method.value} {url}' returned status {response.status_code}: '{result.error}'"
            )
        return result

    def get_raw_json(
        self,
        request: StrapiRequest,
        cancel_token: Optional[threading.Event] = None,
    ) -> str:
        """
        Runs `request` and returns the response body untouched.

        Raises:
            ArgumentError: If the request has no collection.
            RemoteError: If the server answers with a non-2xx status.
            TransportFailure: If no response could be obtained.
        """
        url = self.build_url(request)
        logger.debug(f"Sending '{request.method.value} {url}' (raw)")

        response = self._transport.send(
            request.method, url, body=request.body, cancel_token=cancel_token
        )
        if not response.is_success:
            # Non-2xx bodies always parse into a RemoteError
            raise self._parser.parse(response.text, dict, response.status_code).error
        return response.text

    def close(self):
        """
        Releases the transport, if the client created it.

        Calling `close()` twice is a no-op.
        """
        if self._closed:
            return
        self._closed = True
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> "StrapiRestClient":
        """Context manager entry point."""
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        """
        Context manager exit point. Ensures resources are closed.

        Exceptions raised within the `with` block are propagated.
        """
        try:
            self.close()
        except Exception as e:
            logger.error(
                f"Error releasing resources allocated from StrapiRestClient.\nInner err: '{e}'"
            )
