"""Proxy module application dependencies."""

from typing import NoReturn

import httpx
from fastapi import Depends

from src.modules.proxy.application.service import ProxyService


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_outbound_client() -> httpx.AsyncClient:
    _missing_dependency("OutboundHttpClient")


async def get_proxy_service(
    client: httpx.AsyncClient = Depends(get_outbound_client),
) -> ProxyService:
    return ProxyService(client)
