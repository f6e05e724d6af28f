"""Proxy gateway service.

Fetches an allowlisted remote URL and always answers with JSON: either the
upstream body verbatim, or an ``{"error", "data": []}`` envelope.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from src.core.config import settings
from src.core.infrastructure.logging import BusinessEvents
from src.modules.proxy.domain.allowlist import DomainAllowlist
from src.modules.proxy.domain.exceptions import (
    DomainNotAllowedError,
    InvalidTargetUrlError,
    InvalidUpstreamJsonError,
    MissingTargetUrlError,
    ProxyError,
    UpstreamErrorPageError,
    UpstreamFetchError,
)


@dataclass(frozen=True)
class ProxyResponse:
    """Status code plus the JSON text to send back."""

    status_code: int
    body: str

    @property
    def payload(self) -> Any:
        return json.loads(self.body)

    @classmethod
    def from_error(cls, exc: ProxyError) -> "ProxyResponse":
        return cls(status_code=exc.http_status_code, body=json.dumps(exc.envelope()))


class ProxyService:
    """Stateless translator between a caller and third-party JSON APIs."""

    HTML_MARKERS = ("<!doctype", "<html", "<div")

    def __init__(
        self,
        client: httpx.AsyncClient,
        allowlist: DomainAllowlist | None = None,
        user_agent: str | None = None,
        max_redirects: int | None = None,
    ):
        self.client = client
        self.allowlist = (
            DomainAllowlist(settings.PROXY_ALLOWED_DOMAINS)
            if allowlist is None
            else allowlist
        )
        self.user_agent = user_agent or settings.PROXY_USER_AGENT
        self.max_redirects = (
            settings.PROXY_MAX_REDIRECTS if max_redirects is None else max_redirects
        )

    async def proxy(self, target_url: str | None) -> ProxyResponse:
        """Fetch ``target_url`` and normalise the outcome.

        Never raises: input, security and upstream failures all come back as
        an envelope with the matching HTTP status.
        """
        start_time = time.time()
        try:
            url = self.validate_target(target_url)
            body = await self._forward(url)
        except ProxyError as exc:
            self._log_failure(target_url, exc)
            return ProxyResponse.from_error(exc)
        except Exception as exc:
            logger.exception(f"Proxy error for {target_url}: {exc}")
            return ProxyResponse.from_error(
                UpstreamFetchError(str(exc) or type(exc).__name__)
            )

        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"Proxied {target_url} in {duration_ms}ms ({len(body)} chars)")
        return ProxyResponse(status_code=200, body=body)

    def validate_target(self, target_url: str | None) -> httpx.URL:
        """Parse the target and enforce the host allowlist."""
        if target_url is None or not target_url.strip():
            raise MissingTargetUrlError()

        target_url = target_url.strip()
        try:
            url = httpx.URL(target_url)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise InvalidTargetUrlError(target_url) from exc

        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidTargetUrlError(target_url)

        if not self.allowlist.is_allowed(url.host):
            raise DomainNotAllowedError(url.host)
        return url

    async def _forward(self, url: httpx.URL) -> str:
        logger.info(f"Proxying request to: {url}")
        try:
            response = await self._get_following_redirects(url)
        except httpx.HTTPError as exc:
            raise UpstreamFetchError(str(exc) or type(exc).__name__) from exc

        # Legacy PHP providers prefix the body with a UTF-8 BOM
        text = response.text.removeprefix("\ufeff")
        logger.debug(f"Upstream status {response.status_code}, preview: {text[:500]!r}")

        stripped = text.strip()
        if stripped.lower().startswith(self.HTML_MARKERS):
            raise UpstreamErrorPageError(response.status_code)

        try:
            json.loads(stripped)
        except ValueError as exc:
            raise InvalidUpstreamJsonError(response.status_code) from exc
        return text

    async def _get_following_redirects(self, url: httpx.URL) -> httpx.Response:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }
        response = await self.client.get(url, headers=headers, follow_redirects=False)
        for _ in range(self.max_redirects):
            if not response.has_redirect_location or response.next_request is None:
                return response
            next_url = response.next_request.url
            if not self.allowlist.is_allowed(next_url.host):
                raise DomainNotAllowedError(next_url.host)
            logger.debug(f"Following redirect to {next_url}")
            response = await self.client.get(
                next_url, headers=headers, follow_redirects=False
            )

        if response.has_redirect_location:
            raise UpstreamFetchError(f"Exceeded {self.max_redirects} redirects")
        return response

    @staticmethod
    def _log_failure(target_url: str | None, exc: ProxyError) -> None:
        if isinstance(exc, DomainNotAllowedError):
            logger.error(f"Domain not allowed: {exc.host}")
            BusinessEvents.proxy_request_rejected(host=exc.host, reason="domain")
        elif isinstance(exc, InvalidTargetUrlError):
            logger.error(f"Invalid URL format: {exc.target_url}")
            BusinessEvents.proxy_request_rejected(host=None, reason="invalid_url")
        elif isinstance(exc, MissingTargetUrlError):
            logger.error("Missing url parameter")
        elif isinstance(exc, UpstreamErrorPageError | InvalidUpstreamJsonError):
            logger.warning(f"{exc.message} for {target_url}")
            BusinessEvents.upstream_degraded(
                url=target_url or "",
                error=exc.message,
                upstream_status=exc.upstream_status,
            )
        else:
            logger.error(f"Proxy error for {target_url}: {exc.message}")
            BusinessEvents.upstream_degraded(url=target_url or "", error=exc.message)
