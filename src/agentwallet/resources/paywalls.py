"""Paywalls resource: the seller side of x402."""
from __future__ import annotations

from typing import Any, Optional

from ..units import to_raw_units
from .base import AsyncBaseResource

DEFAULT_PAYWALL_DECIMALS = 6


class PaywallsResource(AsyncBaseResource):
    """Create and manage x402 paywalls.

    A paywall answers ``402`` at its access URL until a payment to
    ``wallet_id`` is proven, then serves ``resource_url``. Prices are given
    in human-readable units and stored raw.
    """

    async def create(
        self,
        wallet_id: int,
        name: str,
        amount: str,
        resource_url: str,
        description: str = "",
        token_type: str = "erc20",
        token_address: str = "",
        token_decimals: int = DEFAULT_PAYWALL_DECIMALS,
        token_name: str = "USDC",
        chain_id: int = 8453,
        resource_mime: str = "application/json",
    ) -> dict[str, Any]:
        data = await self._post("/x402/paywalls", {
            "wallet_id": wallet_id,
            "name": name,
            "description": description,
            "amount": to_raw_units(amount, token_decimals),
            "token_type": token_type,
            "token_address": token_address,
            "token_decimals": token_decimals,
            "token_name": token_name,
            "chain_id": chain_id,
            "resource_url": resource_url,
            "resource_mime": resource_mime,
        })
        return {**data, "price": f"{amount} {token_name}", "chain_id": chain_id}

    async def list(self, page: int = 1, per_page: int = 50) -> Any:
        return await self._get("/x402/paywalls", params={"page": page, "per_page": per_page})

    async def get(self, paywall_id: int) -> dict[str, Any]:
        return await self._get(f"/x402/paywalls/{paywall_id}")

    async def update(
        self,
        paywall_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        amount: Optional[str] = None,
        token_decimals: Optional[int] = None,
        resource_url: Optional[str] = None,
        resource_mime: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> dict[str, Any]:
        """Partial update; only the fields given are sent.

        ``amount`` is converted with ``token_decimals`` (USDC's 6 if omitted).
        """
        body: dict[str, Any] = {
            key: value
            for key, value in (
                ("name", name),
                ("description", description),
                ("resource_url", resource_url),
                ("resource_mime", resource_mime),
                ("is_active", is_active),
            )
            if value is not None
        }
        if amount is not None:
            decimals = DEFAULT_PAYWALL_DECIMALS if token_decimals is None else token_decimals
            body["amount"] = to_raw_units(amount, decimals)
        return await self._put(f"/x402/paywalls/{paywall_id}", body)

    async def delete(self, paywall_id: int) -> dict[str, Any]:
        return await self._delete(f"/x402/paywalls/{paywall_id}")

    async def payments(self, paywall_id: int, page: int = 1, per_page: int = 20) -> Any:
        """Verified payments with tx hashes, payers and amounts."""
        return await self._get(
            f"/x402/paywalls/{paywall_id}/payments",
            params={"page": page, "per_page": per_page},
        )

    async def revenue(self) -> dict[str, Any]:
        """Totals across all paywalls, by chain and token."""
        return await self._get("/x402/revenue")
