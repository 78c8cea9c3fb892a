"""Account resource."""
from __future__ import annotations

from typing import Any

from .base import AsyncBaseResource

MIN_VERIFICATION_CREDITS = 100


class AccountResource(AsyncBaseResource):
    """Usage, supported chains and billing."""

    async def usage(self) -> dict[str, Any]:
        """This month's operation count, tier, remaining quota and fees."""
        return await self._get("/usage")

    async def chains(self) -> Any:
        """Supported chains with native tokens, stablecoins and RPC status."""
        return await self._get("/chains")

    async def buy_verification_credits(self, count: int = 1000) -> dict[str, Any]:
        """Buy x402 verification credits with USDC.

        The gateway answers with its own 402; a client configured with an
        auto-pay wallet settles it and returns the purchase result.
        """
        if count < MIN_VERIFICATION_CREDITS:
            raise ValueError(f"count must be at least {MIN_VERIFICATION_CREDITS}, got {count}")
        return await self._post("/billing/verification-credits", {"count": count})
