"""Base domain exceptions.

All domain errors inherit from DomainException and can declare the
http_status_code and error_code class attributes to shape the HTTP response.
"""

from fastapi import status


class DomainException(Exception):
    """Base exception for all domain errors.

    Subclasses customise the HTTP response through:
    - http_status_code: HTTP status code (default 400)
    - error_code: error code string (default "DOMAIN_ERROR")
    """

    http_status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "A domain error occurred"):
        self.message = message
        super().__init__(self.message)


class ValidationError(DomainException):
    """Raised when validation fails."""

    http_status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"

