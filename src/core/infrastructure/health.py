"""Health check result types."""

from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
    SKIPPED = "skipped"
    DEGRADED = "degraded"


class GatewayHealthResult(BaseModel):
    """Proxy gateway health (configuration only, no outbound probe)."""

    status: HealthStatus = Field(..., description="Health status")
    mode: str = Field(..., description="in_process or http")
    allowed_domains: int = Field(..., description="Number of allowlisted domains")
    error: str | None = Field(None, description="Error message")

    def to_dict(self) -> dict[str, str | int | None]:
        return self.model_dump(mode="json", exclude_none=False)


def check_gateway_health(mode: str, allowed_domains: list[str]) -> GatewayHealthResult:
    if not allowed_domains:
        return GatewayHealthResult(
            status=HealthStatus.ERROR,
            mode=mode,
            allowed_domains=0,
            error="Proxy allowlist is empty, every request will be rejected",
        )
    return GatewayHealthResult(
        status=HealthStatus.OK,
        mode=mode,
        allowed_domains=len(allowed_domains),
    )
