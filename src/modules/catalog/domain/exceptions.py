"""Catalog domain exceptions.

Raised while reading upstream payloads; the catalog client turns every one of
them into an empty result.
"""

from src.core.domain.exceptions import DomainException


class CatalogPayloadError(DomainException):
    """Upstream payload carries no usable data."""

    error_code = "CATALOG_PAYLOAD_ERROR"


class GatewayEnvelopeError(CatalogPayloadError):
    """The proxy answered with an ``{"error", "data": []}`` envelope."""

    error_code = "GATEWAY_ENVELOPE_ERROR"

    def __init__(self, error: str):
        super().__init__(f"Gateway error: {error}")


class UnexpectedPayloadError(CatalogPayloadError):
    error_code = "UNEXPECTED_PAYLOAD"

    def __init__(self, expected: str, actual: object):
        super().__init__(f"Expected {expected}, got {type(actual).__name__}")


class ProviderAuthRequiredError(CatalogPayloadError):
    """Provider refused the call with its auth error signature."""

    error_code = "PROVIDER_AUTH_REQUIRED"

    def __init__(self, provider_api: str):
        self.provider_api = provider_api
        super().__init__(f"Provider requires authentication: {provider_api}")
