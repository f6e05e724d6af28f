"""Port through which the catalog reaches the proxy gateway."""

from typing import Any, Protocol


class GatewayPort(Protocol):
    """Fetch a third-party URL through the proxy gateway.

    Returns whatever JSON the gateway answered with: the upstream payload or
    an error envelope. Transport failures raise httpx errors.
    """

    async def get_json(self, target_url: str) -> Any: ...
