"""
pytest configuration and shared fixtures.

Test layout:
- unit/: unit tests (no network, upstreams are faked)

Usage:
    # Run all tests
    uv run pytest

    # Unit tests only
    uv run pytest tests/unit/

    # With coverage
    uv run pytest --cov=src --cov-report=html
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from src.core.config import Settings
from src.modules.catalog.application.catalog_client import CatalogClient
from src.modules.catalog.domain.entities import Provider

MANIFEST_URL = "https://studyuk.site/appxapis.json"
BASE_URL = "https://studyuk.site/appx.php"


# ============================================
# Config Fixtures
# ============================================


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def test_settings() -> Settings:
    """Test environment settings."""
    return Settings(
        ENVIRONMENT="local",
        PROXY_ALLOWED_DOMAINS="studyuk.site,classx.co.in",
        PROXY_GATEWAY_URL=None,
        BATCH_CONCURRENCY=5,
        BATCH_CHUNK_DELAY_MS=0,
    )


# ============================================
# Fake upstreams
# ============================================


class StubGateway:
    """Gateway fake keyed by exact target URL.

    A value that is an exception instance is raised; anything else is
    returned as the decoded JSON payload. Unknown URLs raise KeyError.
    """

    def __init__(self, responses: dict[str, Any] | None = None):
        self.responses = dict(responses or {})
        self.calls: list[str] = []

    async def get_json(self, target_url: str) -> Any:
        self.calls.append(target_url)
        value = self.responses[target_url]
        if isinstance(value, BaseException):
            raise value
        return value


@pytest.fixture
def stub_gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def catalog_client(stub_gateway: StubGateway) -> CatalogClient:
    return CatalogClient(stub_gateway, base_url=BASE_URL, manifest_url=MANIFEST_URL)


@pytest.fixture
def mock_transport_factory() -> Callable[..., httpx.MockTransport]:
    """Build an httpx.MockTransport that records every outbound request."""

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        requests: list[httpx.Request] | None = None,
    ) -> httpx.MockTransport:
        def record(request: httpx.Request) -> httpx.Response:
            if requests is not None:
                requests.append(request)
            return handler(request)

        return httpx.MockTransport(record)

    return factory


# ============================================
# HTTP Client Fixtures
# ============================================


@pytest.fixture
async def async_client(
    stub_gateway: StubGateway, catalog_client: CatalogClient
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for API tests.

    Outbound proxy calls go to a MockTransport that answers ``[]`` for
    every allowlisted URL; the catalog talks to ``stub_gateway``.
    """
    from main import app
    from src.modules.catalog.application import dependencies as catalog_app_deps
    from src.modules.proxy.application import dependencies as proxy_app_deps

    outbound = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
    )

    # Override dependencies
    app.dependency_overrides[proxy_app_deps.get_outbound_client] = lambda: outbound
    app.dependency_overrides[catalog_app_deps.get_catalog_client] = (
        lambda: catalog_client
    )

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    await outbound.aclose()
    # Clear dependency overrides
    app.dependency_overrides.clear()


# ============================================
# Domain Object Fixtures
# ============================================


@pytest.fixture
def sample_providers() -> list[Provider]:
    return [
        Provider(name=f"Provider {index}", api=f"https://api{index}.classx.co.in")
        for index in range(1, 6)
    ]


@pytest.fixture
def sample_manifest_data() -> list[dict[str, Any]]:
    """Raw provider manifest as served upstream."""
    return [
        {"name": "Alpha Academy", "api": "https://alpha.classx.co.in"},
        {"title": "Beta Classes", "api_url": "https://beta.classx.co.in"},
        {"name": "No API"},
    ]


@pytest.fixture
def sample_series_data() -> dict[str, Any]:
    """Raw series list wrapped in a data envelope."""
    return {
        "data": [
            {
                "id": 101,
                "series_name": "SSC CGL Mock Tests",
                "series_logo": "https://alpha.classx.co.in/logo.png",
                "is_paid": "1",
                "test_count": "25",
                "offer_price": "499",
            },
            {
                "test_id": "102",
                "name": "Free Practice Set",
                "is_paid": 0,
                "total_tests": 10,
            },
        ]
    }


@pytest.fixture
def sample_question_data() -> list[dict[str, Any]]:
    return [
        {
            "question_id": 1,
            "question": "<p>2 + 2 = ?</p>",
            "option_1": "3",
            "option_2": "4",
            "option_3": "",
            "answer": "2",
            "explanation": "<p>Basic addition</p>",
        }
    ]
