"""Catalog module infrastructure dependencies."""

import httpx
from fastapi import Request

from src.core.config import settings
from src.core.infrastructure.http import http_client
from src.modules.catalog.application.catalog_client import CatalogClient
from src.modules.catalog.domain.gateway import GatewayPort
from src.modules.catalog.infrastructure.gateways import HttpGateway, InProcessGateway
from src.modules.proxy.application.service import ProxyService


def build_gateway(client: httpx.AsyncClient) -> GatewayPort:
    if settings.PROXY_GATEWAY_URL:
        return HttpGateway(client, settings.PROXY_GATEWAY_URL)
    return InProcessGateway(ProxyService(client))


def build_catalog_client(client: httpx.AsyncClient) -> CatalogClient:
    return CatalogClient(build_gateway(client))


def get_catalog_client(request: Request) -> CatalogClient:
    """Process-wide catalog client stored on the application state."""
    catalog_client = getattr(request.app.state, "catalog_client", None)
    if catalog_client is None:
        catalog_client = build_catalog_client(http_client.client)
        request.app.state.catalog_client = catalog_client
    return catalog_client
