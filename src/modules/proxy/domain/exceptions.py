"""Proxy gateway exceptions.

Every proxy failure maps to the same ``{"error": ..., "data": []}`` envelope.
Only the HTTP status differs: 400 for malformed input, 403 for hosts outside
the allowlist, 200 for everything upstream-related.
"""

from typing import Any

from fastapi import status

from src.core.domain.exceptions import DomainException


class ProxyError(DomainException):
    """Base class for failures surfaced as an envelope."""

    http_status_code = status.HTTP_200_OK
    error_code = "PROXY_ERROR"

    def envelope(self) -> dict[str, Any]:
        return {"error": self.message, "data": []}


class MissingTargetUrlError(ProxyError):
    error_code = "MISSING_URL"

    def __init__(self) -> None:
        super().__init__("Missing url parameter")


class InvalidTargetUrlError(ProxyError):
    http_status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_URL"

    def __init__(self, target_url: str) -> None:
        self.target_url = target_url
        super().__init__("Invalid URL format")


class DomainNotAllowedError(ProxyError):
    http_status_code = status.HTTP_403_FORBIDDEN
    error_code = "DOMAIN_NOT_ALLOWED"

    def __init__(self, host: str | None) -> None:
        self.host = host
        super().__init__("Domain not allowed")


class UpstreamErrorPageError(ProxyError):
    error_code = "UPSTREAM_ERROR_PAGE"

    def __init__(self, upstream_status: int) -> None:
        self.upstream_status = upstream_status
        super().__init__("External API returned error page")


class InvalidUpstreamJsonError(ProxyError):
    error_code = "UPSTREAM_INVALID_JSON"

    def __init__(self, upstream_status: int) -> None:
        self.upstream_status = upstream_status
        super().__init__("Invalid JSON response")


class UpstreamFetchError(ProxyError):
    error_code = "UPSTREAM_FETCH_FAILED"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__("Failed to fetch data")

    def envelope(self) -> dict[str, Any]:
        return {"error": self.message, "message": self.detail, "data": []}
