"""
HTTP transport for the Alpha Vantage query endpoint.

The adapter issues one GET per call and never retries: retry policy belongs
to the caller. JSON bodies are decoded, everything else (CSV, plain-text
error messages) is returned as text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from avfeed.core.config import ConnectorConfig
from avfeed.core.exceptions import NetworkError, ProtocolError
from avfeed.core.logging import get_logger

logger = get_logger(__name__)

QUERY_PATH = "/query"


@dataclass
class HttpConfig:
    """Configuration for HTTP client behavior."""

    base_url: str
    timeout: float = 5.0
    verify_ssl: bool = True
    user_agent: str = "avfeed/0.1.0"
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate HTTP configuration."""
        if not self.base_url:
            raise ValueError("base_url cannot be empty")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @classmethod
    def from_connector(cls, config: ConnectorConfig) -> HttpConfig:
        return cls(base_url=config.url, timeout=config.timeout)


class HttpFetcher:
    """Async fetcher bound to one ``httpx.AsyncClient`` for the life of a request."""

    def __init__(self, http_config: HttpConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.http_config = http_config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> HttpFetcher:
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.http_config.base_url,
                timeout=httpx.Timeout(self.http_config.timeout),
                follow_redirects=True,
                verify=self.http_config.verify_ssl,
                headers={"User-Agent": self.http_config.user_agent, **self.http_config.headers},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, params: Mapping[str, str]) -> str | Mapping[str, Any]:
        """GET the query endpoint with ``params``."""
        client = self._ensure_client()
        function = params.get("function")
        try:
            response = await client.get(QUERY_PATH, params=dict(params))
        except httpx.TimeoutException as exc:
            raise NetworkError(
                f"Request to Alpha Vantage timed out after {self.http_config.timeout}s",
                details={"function": function},
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Request to Alpha Vantage failed: {exc}", details={"function": function}) from exc

        if response.status_code >= 400:
            raise ProtocolError(
                f"HTTP request failed: {response.status_code}",
                status_code=response.status_code,
                details={"function": function},
            )

        logger.debug("Fetched Alpha Vantage payload", function=function, bytes=len(response.content))
        if "json" in response.headers.get("content-type", ""):
            try:
                return response.json()
            except ValueError as exc:
                raise ProtocolError("Malformed JSON payload", status_code=response.status_code) from exc
        return response.text


__all__ = ["HttpConfig", "HttpFetcher", "QUERY_PATH"]
