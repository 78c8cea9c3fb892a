"""Wallets resource: custody operations delegated to the gateway."""
from __future__ import annotations

import logging
from typing import Any, Optional, Union

from ..chains import is_account_based
from ..models import TransactionRequest, TransactionResult
from ..units import from_raw_units
from .base import AsyncBaseResource

logger = logging.getLogger(__name__)

TxInput = Union[TransactionRequest, dict[str, Any]]


def _tx_body(tx: TxInput) -> dict[str, Any]:
    if isinstance(tx, TransactionRequest):
        return tx.to_dict()
    return TransactionRequest.model_validate(tx).to_dict()


class WalletsResource(AsyncBaseResource):
    """Create, inspect and operate custodial wallets.

    Private keys are generated and encrypted server-side; nothing here ever
    sees key material.
    """

    async def create(self, label: str = "", chain_id: int = 8453) -> dict[str, Any]:
        """Create a new EVM or Solana wallet; returns its ID and address."""
        return await self._post("/wallets", {"label": label, "chain_id": chain_id})

    async def list(self) -> Any:
        return await self._get("/wallets")

    async def get(self, wallet_id: int) -> dict[str, Any]:
        return await self._get(f"/wallets/{wallet_id}")

    async def delete(self, wallet_id: int) -> dict[str, Any]:
        """Soft-delete a wallet."""
        return await self._delete(f"/wallets/{wallet_id}")

    async def pause(self, wallet_id: int) -> dict[str, Any]:
        """Emergency pause: the gateway refuses to sign while paused."""
        return await self._post(f"/wallets/{wallet_id}/pause")

    async def unpause(self, wallet_id: int) -> dict[str, Any]:
        return await self._post(f"/wallets/{wallet_id}/unpause")

    async def balance(self, wallet_id: int, chain_id: Optional[int] = None) -> dict[str, Any]:
        """Native balance, in wei/lamports and human-readable form."""
        return await self._get(f"/wallets/{wallet_id}/balance", params={"chain_id": chain_id or None})

    async def token_balance(
        self,
        wallet_id: int,
        token: str,
        chain_id: int,
        decimals: int = 18,
    ) -> dict[str, Any]:
        """ERC-20 or SPL balance with a human-readable ``balance`` field.

        Solana responses already carry ``balance_formatted`` and ``decimals``;
        EVM responses only carry ``balance_raw`` and are formatted here.
        """
        data = await self._get(
            f"/wallets/{wallet_id}/token-balance",
            params={"chain_id": chain_id, "token": token},
        )
        if is_account_based(chain_id) and data.get("balance_formatted") is not None:
            return {
                **data,
                "balance": data["balance_formatted"],
                "decimals": data.get("decimals", decimals),
            }
        return {
            **data,
            "balance": from_raw_units(data.get("balance_raw") or "0", decimals),
            "decimals": decimals,
        }

    async def sign(self, wallet_id: int, tx: TxInput) -> TransactionResult:
        """Sign without broadcasting."""
        data = await self._post(f"/wallets/{wallet_id}/sign", _tx_body(tx))
        return TransactionResult.model_validate(data)

    async def send(
        self,
        wallet_id: int,
        tx: TxInput,
        skip_x402: bool = False,
    ) -> TransactionResult:
        """Sign and broadcast a transaction.

        Args:
            wallet_id: Paying wallet
            tx: Transaction body
            skip_x402: Set for x402 payments so the gateway does not
                challenge the payment itself
        """
        body = _tx_body(tx)
        logger.debug(f"Sending tx from wallet {wallet_id} on chain {body.get('chain_id')}")
        data = await self._post(f"/wallets/{wallet_id}/send", body, skip_x402=skip_x402)
        return TransactionResult.model_validate(data)
