"""Outbound HTTP client wrapper.

One httpx.AsyncClient per process, created lazily and closed from the FastAPI
lifespan. Connection pooling is shared by the proxy and the catalog gateway.
"""

from __future__ import annotations

import httpx
from loguru import logger

from src.core.config import settings


class HttpClient:
    """Lazy holder for a pooled httpx.AsyncClient."""

    def __init__(
        self,
        timeout_sec: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Create the holder.

        Args:
            timeout_sec: request timeout, defaults to PROXY_TIMEOUT_SEC
            transport: custom transport (tests pass httpx.MockTransport)
        """
        self._timeout_sec = timeout_sec or settings.PROXY_TIMEOUT_SEC
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout_sec,
                follow_redirects=False,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.debug("Outbound HTTP client closed")


http_client = HttpClient()


def get_http_client() -> httpx.AsyncClient:
    """FastAPI dependency returning the shared client."""
    return http_client.client
