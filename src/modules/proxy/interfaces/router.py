"""Proxy gateway routes."""

from fastapi import APIRouter, Depends, Query, Response, status

from src.core.config import settings
from src.modules.proxy.application.dependencies import get_proxy_service
from src.modules.proxy.application.service import ProxyService

router = APIRouter(tags=["proxy"])


def cors_headers() -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": settings.PROXY_CORS_ALLOW_HEADERS,
    }


@router.options(
    "",
    summary="CORS preflight",
    description="Answer browser preflight requests with an empty body",
)
async def proxy_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=cors_headers())


@router.get(
    "",
    summary="Proxy a third-party JSON API",
    description=(
        "Fetch an allowlisted URL and return its JSON, or an "
        '`{"error": ..., "data": []}` envelope when the call cannot be served'
    ),
)
async def proxy(
    url: str | None = Query(None, description="Percent-encoded absolute target URL"),
    service: ProxyService = Depends(get_proxy_service),
) -> Response:
    result = await service.proxy(url)
    return Response(
        content=result.body,
        status_code=result.status_code,
        media_type="application/json",
        headers=cors_headers(),
    )
