"""Standard API response model."""

from typing import TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse[T](BaseModel):
    """Envelope for catalog API responses.

    ``meta`` carries counts and, for degraded loads, the error message. The
    status stays 200 when individual providers fail.
    """

    code: int = 200
    message: str = "Operation successful"
    data: T | None = None
    meta: dict | None = None

    @classmethod
    def success(
        cls,
        data: T = None,
        message: str = "Operation successful",
        meta: dict | None = None,
    ) -> "ApiResponse[T]":
        return cls(code=200, message=message, data=data, meta=meta)
