"""
Configuration Module.

This module defines the connection settings consumed by
[`StrapiRestClient`][strapiclient.comm.client.StrapiRestClient] and its
default transport. The query and decoding layers never read configuration.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ..errors import ConfigurationError

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_FACTOR = 2.0


@dataclass
class ClientConfig:
    """
    Connection settings for the REST client.

    Example:
        ```python
        from strapiclient import ClientConfig, StrapiRestClient

        config = ClientConfig(base_url="http://localhost:1337/api", api_key="...")
        with StrapiRestClient(config) as client:
            ...
        ```
    """

    base_url: str
    """The API endpoint every request URL is built against (e.g. `http://localhost:1337/api`)."""

    api_key: Optional[str] = None
    """
    Optional API token. When set, it is sent as `Authorization: Bearer <api_key>`
    on every request.
    """

    timeout: float = DEFAULT_TIMEOUT
    """Per-request timeout, in seconds."""

    max_retries: int = DEFAULT_MAX_RETRIES
    """
    How many times a transient failure (5xx, 429, network error) is retried
    before the last response is returned or the failure is raised.
    """

    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    """The delay before retry `n` (1-based) is `backoff_factor ** n` seconds."""

    def __post_init__(self):
        if self.base_url is None or not str(self.base_url).strip():
            raise ConfigurationError("Strapi base URL is not configured.")
        self.base_url = str(self.base_url).strip()
        if self.api_key is not None and not str(self.api_key).strip():
            self.api_key = None
        if self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {self.timeout}")
        if self.max_retries < 0:
            raise ConfigurationError(
                f"Max retries cannot be negative, got {self.max_retries}"
            )
        if self.backoff_factor < 0:
            raise ConfigurationError(
                f"Backoff factor cannot be negative, got {self.backoff_factor}"
            )

    @classmethod
    def from_env(
        cls, prefix: str = "STRAPI_", environ: Optional[Mapping[str, str]] = None
    ) -> "ClientConfig":
        """
        Builds the configuration from environment variables.

        Reads `<prefix>BASE_URL` (required), `<prefix>API_KEY`,
        `<prefix>TIMEOUT` and `<prefix>MAX_RETRIES`.

        Raises:
            ConfigurationError: If the base URL is missing, or a numeric
                variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        base_url = env.get(f"{prefix}BASE_URL")
        if not base_url or not base_url.strip():
            raise ConfigurationError(f"'{prefix}BASE_URL' is not set.")

        try:
            timeout = float(env.get(f"{prefix}TIMEOUT", DEFAULT_TIMEOUT))
            max_retries = int(env.get(f"{prefix}MAX_RETRIES", DEFAULT_MAX_RETRIES))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting in environment: {e}") from e

        return cls(
            base_url=base_url,
            api_key=env.get(f"{prefix}API_KEY"),
            timeout=timeout,
            max_retries=max_retries,
        )
