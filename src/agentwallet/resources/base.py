"""
Base resource class for the AgentWallet gateway.

Resource classes group related endpoints and delegate the HTTP work to the
owning :class:`~agentwallet.client.AgentWalletClient`.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from ..client import AgentWalletClient


class AsyncBaseResource:
    """Base class for async API resources.

    Attributes:
        _client: The owning client instance
    """

    def __init__(self, client: "AgentWalletClient") -> None:
        self._client = client

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Make a GET request."""
        return await self._client._request("GET", path, params=params)

    async def _post(
        self,
        path: str,
        data: Optional[Dict[str, Any]] = None,
        skip_x402: bool = False,
    ) -> Any:
        """Make a POST request.

        Args:
            path: API endpoint path
            data: Request body
            skip_x402: Send the bypass marker so the gateway does not answer
                this call with its own 402 challenge
        """
        return await self._client._request("POST", path, json=data, skip_x402=skip_x402)

    async def _put(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        """Make a PUT request."""
        return await self._client._request("PUT", path, json=data)

    async def _delete(self, path: str) -> Any:
        """Make a DELETE request."""
        return await self._client._request("DELETE", path)
