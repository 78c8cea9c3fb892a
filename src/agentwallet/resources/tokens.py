"""Tokens resource: value transfers and contract helpers.

Every write goes through ``POST /wallets/{id}/send`` with calldata built by
:mod:`agentwallet.abi`; reads go through the gateway's ``POST /eth-call``.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..abi import (
    ContractCall,
    decode_abi_string,
    decode_uint256,
    encode_allowance,
    encode_approve,
    encode_call,
    encode_deposit,
    encode_transfer,
    encode_withdraw,
)
from ..chains import get_wrapped_native, is_account_based, native_decimals
from ..errors import AgentWalletError, UnsupportedChainOperationError
from ..models import TransactionRequest
from ..units import from_raw_units, is_unlimited, parse_approval_amount, to_raw_units
from .base import AsyncBaseResource

logger = logging.getLogger(__name__)

_EMPTY_RESULT = {"result": "0x"}


def _require_evm(operation: str, chain_id: int, hint: str) -> None:
    if is_account_based(chain_id):
        raise UnsupportedChainOperationError(operation, chain_id, hint)


class TokensResource(AsyncBaseResource):
    """Native, ERC-20 and SPL token operations."""

    async def _send(self, wallet_id: int, tx: TransactionRequest) -> dict[str, Any]:
        result = await self._client.wallets.send(wallet_id, tx)
        return result.to_dict()

    async def transfer(
        self,
        wallet_id: int,
        to: str,
        amount: str,
        chain_id: int,
    ) -> dict[str, Any]:
        """Send native tokens (ETH, POL, SOL...) in human-readable units."""
        value = to_raw_units(amount, native_decimals(chain_id))
        tx = TransactionRequest.for_chain(to=to, chain_id=chain_id, value=value)
        result = await self._send(wallet_id, tx)
        return {**result, "amount": amount, "chain_id": chain_id}

    async def transfer_token(
        self,
        wallet_id: int,
        token: str,
        to: str,
        amount: str,
        chain_id: int,
        decimals: int = 18,
    ) -> dict[str, Any]:
        """Send ERC-20 (EVM) or SPL (Solana) tokens.

        SPL transfers go to the recipient with the mint attached and the
        gateway derives the token accounts. ERC-20 transfers are a zero-value
        call to the token contract.
        """
        raw_amount = to_raw_units(amount, decimals)
        if is_account_based(chain_id):
            tx = TransactionRequest(
                to=to,
                value=raw_amount,
                chain_id=chain_id,
                token_mint=token,
                token_decimals=decimals,
            )
        else:
            tx = TransactionRequest(
                to=token,
                value="0",
                chain_id=chain_id,
                data=encode_transfer(to, raw_amount),
            )
        result = await self._send(wallet_id, tx)
        return {
            **result,
            "token": token,
            "recipient": to,
            "amount": amount,
            "decimals": decimals,
        }

    async def approve(
        self,
        wallet_id: int,
        token: str,
        spender: str,
        amount: str,
        chain_id: int,
        decimals: int = 18,
    ) -> dict[str, Any]:
        """ERC-20 ``approve``; ``amount="max"`` grants an unlimited allowance."""
        _require_evm(
            "approve_token", chain_id,
            "Solana SPL tokens do not use ERC-20 style approvals.",
        )
        raw_amount = parse_approval_amount(amount, decimals)
        tx = TransactionRequest(
            to=token,
            value="0",
            chain_id=chain_id,
            data=encode_approve(spender, raw_amount),
        )
        result = await self._send(wallet_id, tx)
        return {
            **result,
            "token": token,
            "spender": spender,
            "amount": "unlimited" if is_unlimited(raw_amount) else amount,
        }

    async def allowance(
        self,
        wallet_id: int,
        token: str,
        spender: str,
        chain_id: int,
        decimals: int = 18,
    ) -> dict[str, Any]:
        """How much ``spender`` may move out of the wallet's ``token`` balance."""
        _require_evm(
            "get_allowance", chain_id,
            "Solana SPL tokens do not use ERC-20 style allowances.",
        )
        wallet = await self._client.wallets.get(wallet_id)
        result = await self.call(chain_id, token, encode_allowance(wallet["address"], spender))

        raw = str(decode_uint256(result.get("result", "0x")))
        unlimited = is_unlimited(raw)
        return {
            "token": token,
            "spender": spender,
            "allowance_raw": raw,
            "allowance": "unlimited" if unlimited else from_raw_units(raw, decimals),
            "is_unlimited": unlimited,
            "decimals": decimals,
        }

    async def wrap(self, wallet_id: int, amount: str, chain_id: int) -> dict[str, Any]:
        """Wrap native tokens into WETH/WPOL/WBNB/... via ``deposit()``."""
        _require_evm(
            "wrap_eth", chain_id,
            "Solana does not use wrapped native tokens like WETH.",
        )
        wrapped = get_wrapped_native(chain_id)
        if wrapped is None:
            raise UnsupportedChainOperationError(
                "wrap_eth", chain_id, "No wrapped native token is configured for this chain."
            )
        tx = TransactionRequest(
            to=wrapped.address,
            value=to_raw_units(amount, 18),
            chain_id=chain_id,
            data=encode_deposit(),
        )
        result = await self._send(wallet_id, tx)
        return {
            **result,
            "wrapped_token": wrapped.symbol,
            "wrapped_address": wrapped.address,
            "amount": amount,
        }

    async def unwrap(self, wallet_id: int, amount: str, chain_id: int) -> dict[str, Any]:
        """Unwrap back to the native token via ``withdraw(uint256)``."""
        _require_evm(
            "unwrap_eth", chain_id,
            "Solana does not use wrapped native tokens like WETH.",
        )
        wrapped = get_wrapped_native(chain_id)
        if wrapped is None:
            raise UnsupportedChainOperationError(
                "unwrap_eth", chain_id, "No wrapped native token is configured for this chain."
            )
        tx = TransactionRequest(
            to=wrapped.address,
            value="0",
            chain_id=chain_id,
            data=encode_withdraw(to_raw_units(amount, 18)),
        )
        result = await self._send(wallet_id, tx)
        return {**result, "unwrapped_token": wrapped.symbol, "amount": amount}

    async def token_info(self, token: str, chain_id: int) -> dict[str, Any]:
        """Name, symbol and decimals of an ERC-20 token.

        The three reads run concurrently. A contract that reverts on one of
        them reports ``"Unknown"`` (or 0 decimals) for that field.
        """
        _require_evm(
            "get_token_info", chain_id,
            "Use Solana token metadata programs to query SPL token details.",
        )
        name, symbol, decimals = await asyncio.gather(
            self._safe_call(chain_id, token, encode_call(ContractCall.NAME)),
            self._safe_call(chain_id, token, encode_call(ContractCall.SYMBOL)),
            self._safe_call(chain_id, token, encode_call(ContractCall.DECIMALS)),
        )
        return {
            "token": token,
            "chain_id": chain_id,
            "name": decode_abi_string(name["result"]) or "Unknown",
            "symbol": decode_abi_string(symbol["result"]) or "Unknown",
            "decimals": decode_uint256(decimals["result"]),
        }

    async def _safe_call(self, chain_id: int, to: str, data: str) -> dict[str, Any]:
        try:
            result = await self.call(chain_id, to, data)
        except AgentWalletError as e:
            logger.debug(f"eth_call {data[:10]} on {to[:10]}... failed: {e}")
            return dict(_EMPTY_RESULT)
        if not isinstance(result.get("result"), str):
            return dict(_EMPTY_RESULT)
        return result

    async def call(self, chain_id: int, to: str, data: str) -> dict[str, Any]:
        """Read-only ``eth_call``; returns the raw hex ``result``."""
        _require_evm(
            "call_contract", chain_id,
            "Use Solana-specific RPC methods instead.",
        )
        return await self._post("/eth-call", {"chain_id": chain_id, "to": to, "data": data})
