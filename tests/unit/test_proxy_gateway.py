"""Proxy gateway unit tests.

Coverage:
- Target URL validation and the domain allowlist
- Envelope shapes and status codes
- HTML error page and invalid JSON detection
- Redirect handling
- Outbound request headers
"""

import json

import httpx
import pytest

from src.modules.proxy.application.service import ProxyResponse, ProxyService
from src.modules.proxy.domain.allowlist import DomainAllowlist
from src.modules.proxy.domain.exceptions import (
    DomainNotAllowedError,
    UpstreamFetchError,
)

pytestmark = pytest.mark.anyio

ALLOWLIST = DomainAllowlist(["studyuk.site", "classx.co.in"])


def _service(handler, requests: list[httpx.Request] | None = None) -> ProxyService:
    def record(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(record))
    return ProxyService(client, allowlist=ALLOWLIST, user_agent="TestAgent/1.0")


def _json_handler(payload, status_code: int = 200):
    return lambda request: httpx.Response(status_code, json=payload)


def _text_handler(text: str, status_code: int = 200):
    return lambda request: httpx.Response(status_code, text=text)


# ============================================
# DomainAllowlist
# ============================================


class TestDomainAllowlist:
    def test_exact_and_subdomain_match(self):
        assert ALLOWLIST.is_allowed("studyuk.site")
        assert ALLOWLIST.is_allowed("api.studyuk.site")
        assert ALLOWLIST.is_allowed("testseries-assets.classx.co.in")

    def test_suffix_without_dot_is_rejected(self):
        assert not ALLOWLIST.is_allowed("evilstudyuk.site")
        assert not ALLOWLIST.is_allowed("studyuk.site.evil.com")

    def test_case_insensitive(self):
        assert ALLOWLIST.is_allowed("API.StudyUK.Site")

    def test_empty_host(self):
        assert not ALLOWLIST.is_allowed(None)
        assert not ALLOWLIST.is_allowed("")

    def test_normalizes_and_dedupes(self):
        allowlist = DomainAllowlist([" StudyUK.site ", "studyuk.site", "", ".appx.co.in"])
        assert allowlist.domains == ("studyuk.site", "appx.co.in")
        assert len(allowlist) == 2


# ============================================
# Input validation
# ============================================


class TestProxyValidation:
    async def test_missing_url_returns_200_envelope_without_outbound_call(self):
        requests: list[httpx.Request] = []
        service = _service(_json_handler([]), requests)

        result = await service.proxy(None)

        assert result.status_code == 200
        assert result.payload == {"error": "Missing url parameter", "data": []}
        assert requests == []

    async def test_blank_url_counts_as_missing(self):
        service = _service(_json_handler([]))
        result = await service.proxy("   ")
        assert result.payload["error"] == "Missing url parameter"

    async def test_unparseable_url_returns_400(self):
        requests: list[httpx.Request] = []
        service = _service(_json_handler([]), requests)

        result = await service.proxy("not a url")

        assert result.status_code == 400
        assert result.payload == {"error": "Invalid URL format", "data": []}
        assert requests == []

    async def test_non_http_scheme_returns_400(self):
        service = _service(_json_handler([]))
        result = await service.proxy("ftp://studyuk.site/file.json")
        assert result.status_code == 400

    async def test_disallowed_domain_returns_403_without_outbound_call(self):
        requests: list[httpx.Request] = []
        service = _service(_json_handler([]), requests)

        result = await service.proxy("https://evil.example.com/x")

        assert result.status_code == 403
        assert result.payload == {"error": "Domain not allowed", "data": []}
        assert requests == []

    async def test_injected_empty_allowlist_rejects_everything(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=[])

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        service = ProxyService(client, allowlist=DomainAllowlist([]))

        result = await service.proxy("https://studyuk.site/appxapis.json")

        assert result.status_code == 403
        assert requests == []

    def test_validate_target_raises_for_lookalike_domain(self):
        service = _service(_json_handler([]))
        with pytest.raises(DomainNotAllowedError) as exc_info:
            service.validate_target("https://evilstudyuk.site/api")
        assert exc_info.value.host == "evilstudyuk.site"


# ============================================
# Forwarding
# ============================================


class TestProxyForwarding:
    async def test_forwards_json_body_verbatim(self):
        body = '[{"name": "Alpha", "api": "https://alpha.classx.co.in"}]'
        service = _service(_text_handler(body))

        result = await service.proxy("https://studyuk.site/appxapis.json")

        assert result.status_code == 200
        assert result.body == body

    async def test_utf8_bom_is_dropped_before_parsing(self):
        service = _service(
            lambda request: httpx.Response(
                200,
                content=b'\xef\xbb\xbf[{"name": "A"}]',
                headers={"Content-Type": "application/json; charset=utf-8"},
            )
        )

        result = await service.proxy("https://studyuk.site/appx.php?action=series")

        assert result.status_code == 200
        assert result.body == '[{"name": "A"}]'
        assert result.payload == [{"name": "A"}]

    async def test_upstream_error_status_with_json_is_forwarded_as_200(self):
        service = _service(_json_handler({"msg": "Invalid Token"}, status_code=401))

        result = await service.proxy("https://studyuk.site/appx.php?action=series")

        assert result.status_code == 200
        assert result.payload == {"msg": "Invalid Token"}

    async def test_sends_user_agent_and_accept_headers(self):
        requests: list[httpx.Request] = []
        service = _service(_json_handler([]), requests)

        await service.proxy("https://studyuk.site/appxapis.json")

        assert len(requests) == 1
        assert requests[0].headers["User-Agent"] == "TestAgent/1.0"
        assert requests[0].headers["Accept"] == "application/json"
        assert requests[0].method == "GET"

    async def test_percent_encoded_query_reaches_upstream(self):
        requests: list[httpx.Request] = []
        service = _service(_json_handler([]), requests)
        target = (
            "https://studyuk.site/appx.php"
            "?bash_url=https%3A%2F%2Falpha.classx.co.in&action=series"
        )

        await service.proxy(target)

        assert requests[0].url.params["bash_url"] == "https://alpha.classx.co.in"
        assert requests[0].url.params["action"] == "series"

    @pytest.mark.parametrize(
        "body",
        [
            "<!DOCTYPE html><html><body>Error</body></html>",
            "  <html><body>502</body></html>",
            "<div>Maintenance</div>",
        ],
    )
    async def test_html_error_page_is_detected(self, body: str):
        service = _service(_text_handler(body, status_code=502))

        result = await service.proxy("https://studyuk.site/appxapis.json")

        assert result.status_code == 200
        assert result.payload == {
            "error": "External API returned error page",
            "data": [],
        }

    async def test_invalid_json_is_reported(self):
        service = _service(_text_handler("OK, not json"))

        result = await service.proxy("https://studyuk.site/appxapis.json")

        assert result.status_code == 200
        assert result.payload == {"error": "Invalid JSON response", "data": []}

    async def test_network_error_returns_fetch_envelope_with_message(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        service = _service(handler)

        result = await service.proxy("https://studyuk.site/appxapis.json")

        assert result.status_code == 200
        assert result.payload == {
            "error": "Failed to fetch data",
            "message": "connection refused",
            "data": [],
        }

    async def test_unexpected_exception_never_escapes(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise RuntimeError("boom")

        service = _service(handler)

        result = await service.proxy("https://studyuk.site/appxapis.json")

        assert result.payload["error"] == "Failed to fetch data"
        assert result.payload["message"] == "boom"


# ============================================
# Redirects
# ============================================


class TestProxyRedirects:
    async def test_follows_redirect_inside_allowlist(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "studyuk.site":
                return httpx.Response(
                    302, headers={"Location": "https://cdn.classx.co.in/data.json"}
                )
            return httpx.Response(200, json=[1, 2])

        requests: list[httpx.Request] = []
        service = _service(handler, requests)

        result = await service.proxy("https://studyuk.site/data.json")

        assert result.payload == [1, 2]
        assert [request.url.host for request in requests] == [
            "studyuk.site",
            "cdn.classx.co.in",
        ]

    async def test_redirect_to_disallowed_host_is_rejected(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": "https://evil.example.com/"})

        requests: list[httpx.Request] = []
        service = _service(handler, requests)

        result = await service.proxy("https://studyuk.site/data.json")

        assert result.status_code == 403
        assert result.payload["error"] == "Domain not allowed"
        assert len(requests) == 1

    async def test_redirect_loop_is_bounded(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": "https://studyuk.site/loop"})

        requests: list[httpx.Request] = []
        service = _service(handler, requests)
        service.max_redirects = 2

        result = await service.proxy("https://studyuk.site/loop")

        assert result.payload["error"] == "Failed to fetch data"
        assert "redirects" in result.payload["message"]
        assert len(requests) == 3


# ============================================
# ProxyResponse
# ============================================


class TestProxyResponse:
    def test_from_error_uses_exception_status_and_envelope(self):
        response = ProxyResponse.from_error(UpstreamFetchError("timeout"))

        assert response.status_code == 200
        assert json.loads(response.body) == {
            "error": "Failed to fetch data",
            "message": "timeout",
            "data": [],
        }
