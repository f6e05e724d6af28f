"""Shared outbound HTTP client."""

from src.core.infrastructure.http.client import (
    HttpClient,
    get_http_client,
    http_client,
)

__all__ = [
    "HttpClient",
    "get_http_client",
    "http_client",
]
