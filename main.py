"""Study Ocean Backend - quiz catalog aggregation entry point."""

import sentry_sdk
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.concurrency import asynccontextmanager
from fastapi.routing import APIRoute
from loguru import logger

from src.core.config import settings
from src.core.domain.exceptions import DomainException
from src.core.infrastructure.health import HealthStatus, check_gateway_health
from src.core.infrastructure.http import get_http_client, http_client
from src.core.infrastructure.logging import setup_logging
from src.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
    request_validation_handler,
)
from src.core.interfaces.http.routers import api_router
from src.modules.catalog.application import dependencies as catalog_app_deps
from src.modules.catalog.infrastructure import dependencies as catalog_infra_deps
from src.modules.proxy.application import dependencies as proxy_app_deps
from src.modules.proxy.interfaces.router import router as proxy_router


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        enable_tracing=True,
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting Study Ocean backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(
        f"Proxy gateway: {settings.gateway_mode}, "
        f"{len(settings.PROXY_ALLOWED_DOMAINS)} allowlisted domains"
    )

    app.state.catalog_client = catalog_infra_deps.build_catalog_client(
        http_client.client
    )

    yield

    logger.info("Shutting down Study Ocean backend...")
    await http_client.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "Quiz catalog aggregation backend\n\n"
        "- **Proxy gateway**: allowlisted JSON forwarding for third-party "
        "test-series APIs\n"
        "- **Catalog**: normalised providers, test series, subjects, tests "
        "and questions"
    ),
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[proxy_app_deps.get_outbound_client] = get_http_client
app.dependency_overrides[catalog_app_deps.get_catalog_client] = (
    catalog_infra_deps.get_catalog_client
)

# Exception handlers
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Proxy gateway (sets its own CORS headers)
app.include_router(proxy_router, prefix=settings.PROXY_PATH)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint.

    Reports the proxy gateway configuration. No upstream provider is probed,
    since a single provider outage only degrades the catalog.
    """
    gateway_health_result = check_gateway_health(
        settings.gateway_mode, settings.PROXY_ALLOWED_DOMAINS
    )
    overall_status = (
        "healthy" if gateway_health_result.status == HealthStatus.OK else "unhealthy"
    )

    return {
        "status": overall_status,
        "environment": settings.ENVIRONMENT,
        "version": "0.1.0",
        "components": {
            "proxy_gateway": gateway_health_result.to_dict(),
        },
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to Study Ocean API",
        "docs": f"{settings.API_V1_STR}/docs",
        "proxy": settings.PROXY_PATH,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
