"""Gateway adapters for the catalog client."""

from __future__ import annotations

from typing import Any

import httpx

from src.core.config import settings
from src.modules.catalog.domain.gateway import GatewayPort
from src.modules.proxy.application.service import ProxyService


class InProcessGateway(GatewayPort):
    """Call the proxy service directly when it runs in the same process."""

    def __init__(self, proxy_service: ProxyService):
        self.proxy_service = proxy_service

    async def get_json(self, target_url: str) -> Any:
        response = await self.proxy_service.proxy(target_url)
        return response.payload


class HttpGateway(GatewayPort):
    """Call a separately deployed proxy over HTTP: ``GET <gateway>?url=<target>``."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        gateway_url: str,
        timeout_sec: float | None = None,
    ):
        self.client = client
        self.gateway_url = gateway_url
        self.timeout_sec = timeout_sec or settings.CLIENT_TIMEOUT_SEC

    async def get_json(self, target_url: str) -> Any:
        # 400/403 responses still carry a JSON envelope, so no raise_for_status
        response = await self.client.get(
            self.gateway_url,
            params={"url": target_url},
            headers={"Accept": "application/json"},
            timeout=self.timeout_sec,
        )
        return response.json()
