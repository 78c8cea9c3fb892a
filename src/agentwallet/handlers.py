"""Tool call handlers for AgentWallet tools.

Processes Claude ``tool_use`` content blocks and returns ``tool_result``
blocks that can be sent back in the conversation.

Each handler method maps a tool name to the corresponding
:class:`~agentwallet.client.AgentWalletClient` or
:class:`~agentwallet.payments.X402Payer` operation and wraps errors so the
agent always receives useful feedback.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Optional

from .chains import is_valid_address
from .client import AgentWalletClient
from .errors import InvalidAddressError
from .models import TransactionRequest
from .payments import X402Payer, parse_headers
from .tools import TOOL_NAMES

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any]], Awaitable[Any]]


class AgentWalletToolHandler:
    """Processes Claude tool_use calls and returns tool_result responses.

    Args:
        client: A configured :class:`AgentWalletClient`.
        payer: x402 payer for ``pay_x402``; defaults to one paying through
            ``client.wallets`` with the client's configuration.
    """

    def __init__(self, client: AgentWalletClient, payer: Optional[X402Payer] = None) -> None:
        self.client = client
        self.payer = payer or X402Payer(client.wallets, config=client.config)
        self._handlers: dict[str, Handler] = {
            "create_wallet": self._handle_create_wallet,
            "list_wallets": self._handle_list_wallets,
            "get_wallet": self._handle_get_wallet,
            "get_balance": self._handle_get_balance,
            "sign_transaction": self._handle_sign_transaction,
            "send_transaction": self._handle_send_transaction,
            "transfer": self._handle_transfer,
            "get_token_balance": self._handle_get_token_balance,
            "transfer_token": self._handle_transfer_token,
            "call_contract": self._handle_call_contract,
            "approve_token": self._handle_approve_token,
            "get_allowance": self._handle_get_allowance,
            "wrap_eth": self._handle_wrap_eth,
            "unwrap_eth": self._handle_unwrap_eth,
            "get_token_info": self._handle_get_token_info,
            "pay_x402": self._handle_pay_x402,
            "get_usage": self._handle_get_usage,
            "buy_verification_credits": self._handle_buy_verification_credits,
            "pause_wallet": self._handle_pause_wallet,
            "unpause_wallet": self._handle_unpause_wallet,
            "get_chains": self._handle_get_chains,
            "delete_wallet": self._handle_delete_wallet,
            "create_paywall": self._handle_create_paywall,
            "list_paywalls": self._handle_list_paywalls,
            "get_paywall": self._handle_get_paywall,
            "update_paywall": self._handle_update_paywall,
            "delete_paywall": self._handle_delete_paywall,
            "get_paywall_payments": self._handle_get_paywall_payments,
            "get_x402_revenue": self._handle_get_x402_revenue,
        }

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    async def handle(self, tool_name: str, tool_input: dict[str, Any]) -> dict[str, Any]:
        """Process a tool call and return the result as a dict.

        Returns:
            A dict with ``"status"`` (``"success"`` or ``"error"``) and
            a ``"result"`` or ``"error"`` key with the details.

        Raises:
            ValueError: If *tool_name* is not an AgentWallet tool.
        """
        if tool_name not in self._handlers:
            raise ValueError(
                f"Unknown tool '{tool_name}'. "
                f"Valid tools: {', '.join(sorted(TOOL_NAMES))}"
            )
        handler = self._handlers[tool_name]
        try:
            result = await handler(tool_input or {})
            return {"status": "success", "result": result}
        except Exception as exc:
            logger.warning(f"Tool {tool_name} failed: {exc}")
            return {"status": "error", "error": str(exc)}

    async def process_tool_use_block(self, tool_use_block: dict[str, Any]) -> dict[str, Any]:
        """Process a Claude API tool_use content block directly.

        Takes ``{"type": "tool_use", "id": ..., "name": ..., "input": {...}}``
        and returns ``{"type": "tool_result", "tool_use_id": ..., "content": ...}``
        with ``"is_error": True`` when the call failed.
        """
        tool_use_id = tool_use_block.get("id", "")
        result = await self.handle(tool_use_block.get("name", ""), tool_use_block.get("input", {}))

        if result["status"] == "success":
            return {
                "type": "tool_result",
                "tool_use_id": tool_use_id,
                "content": json.dumps(result["result"], default=str),
            }
        return {
            "type": "tool_result",
            "tool_use_id": tool_use_id,
            "content": json.dumps({"error": result["error"]}),
            "is_error": True,
        }

    # ------------------------------------------------------------------
    # Wallets
    # ------------------------------------------------------------------

    async def _handle_create_wallet(self, input_data: dict[str, Any]) -> Any:
        return await self.client.wallets.create(
            label=input_data.get("label", ""),
            chain_id=input_data.get("chain_id", 8453),
        )

    async def _handle_list_wallets(self, input_data: dict[str, Any]) -> Any:
        return await self.client.wallets.list()

    async def _handle_get_wallet(self, input_data: dict[str, Any]) -> Any:
        return await self.client.wallets.get(input_data["wallet_id"])

    async def _handle_get_balance(self, input_data: dict[str, Any]) -> Any:
        return await self.client.wallets.balance(
            input_data["wallet_id"], chain_id=input_data.get("chain_id")
        )

    async def _handle_sign_transaction(self, input_data: dict[str, Any]) -> Any:
        result = await self.client.wallets.sign(input_data["wallet_id"], self._tx(input_data))
        return result.to_dict()

    async def _handle_send_transaction(self, input_data: dict[str, Any]) -> Any:
        result = await self.client.wallets.send(input_data["wallet_id"], self._tx(input_data))
        return result.to_dict()

    async def _handle_pause_wallet(self, input_data: dict[str, Any]) -> Any:
        return await self.client.wallets.pause(input_data["wallet_id"])

    async def _handle_unpause_wallet(self, input_data: dict[str, Any]) -> Any:
        return await self.client.wallets.unpause(input_data["wallet_id"])

    async def _handle_delete_wallet(self, input_data: dict[str, Any]) -> Any:
        return await self.client.wallets.delete(input_data["wallet_id"])

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    async def _handle_transfer(self, input_data: dict[str, Any]) -> Any:
        return await self.client.tokens.transfer(
            input_data["wallet_id"],
            to=self._address(input_data, "to"),
            amount=str(input_data["amount"]),
            chain_id=input_data["chain_id"],
        )

    async def _handle_get_token_balance(self, input_data: dict[str, Any]) -> Any:
        return await self.client.wallets.token_balance(
            input_data["wallet_id"],
            token=self._address(input_data, "token"),
            chain_id=input_data["chain_id"],
            decimals=input_data.get("decimals", 18),
        )

    async def _handle_transfer_token(self, input_data: dict[str, Any]) -> Any:
        return await self.client.tokens.transfer_token(
            input_data["wallet_id"],
            token=self._address(input_data, "token"),
            to=self._address(input_data, "to"),
            amount=str(input_data["amount"]),
            chain_id=input_data["chain_id"],
            decimals=input_data.get("decimals", 18),
        )

    async def _handle_call_contract(self, input_data: dict[str, Any]) -> Any:
        return await self.client.tokens.call(
            input_data["chain_id"],
            to=self._address(input_data, "to"),
            data=input_data["data"],
        )

    async def _handle_approve_token(self, input_data: dict[str, Any]) -> Any:
        return await self.client.tokens.approve(
            input_data["wallet_id"],
            token=self._address(input_data, "token"),
            spender=self._address(input_data, "spender"),
            amount=str(input_data["amount"]),
            chain_id=input_data["chain_id"],
            decimals=input_data.get("decimals", 18),
        )

    async def _handle_get_allowance(self, input_data: dict[str, Any]) -> Any:
        return await self.client.tokens.allowance(
            input_data["wallet_id"],
            token=self._address(input_data, "token"),
            spender=self._address(input_data, "spender"),
            chain_id=input_data["chain_id"],
            decimals=input_data.get("decimals", 18),
        )

    async def _handle_wrap_eth(self, input_data: dict[str, Any]) -> Any:
        return await self.client.tokens.wrap(
            input_data["wallet_id"], str(input_data["amount"]), input_data["chain_id"]
        )

    async def _handle_unwrap_eth(self, input_data: dict[str, Any]) -> Any:
        return await self.client.tokens.unwrap(
            input_data["wallet_id"], str(input_data["amount"]), input_data["chain_id"]
        )

    async def _handle_get_token_info(self, input_data: dict[str, Any]) -> Any:
        return await self.client.tokens.token_info(
            self._address(input_data, "token"), input_data["chain_id"]
        )

    # ------------------------------------------------------------------
    # x402
    # ------------------------------------------------------------------

    async def _handle_pay_x402(self, input_data: dict[str, Any]) -> Any:
        result = await self.payer.pay(
            input_data["url"],
            input_data["wallet_id"],
            method=input_data.get("method", "GET"),
            headers=parse_headers(input_data.get("headers")),
            body=input_data.get("body"),
            max_payment=input_data.get("max_payment"),
            prefer_chain=input_data.get("prefer_chain"),
        )
        return result.to_dict()

    async def _handle_create_paywall(self, input_data: dict[str, Any]) -> Any:
        fields = (
            "description", "token_type", "token_address", "token_decimals",
            "token_name", "chain_id", "resource_mime",
        )
        return await self.client.paywalls.create(
            wallet_id=input_data["wallet_id"],
            name=input_data["name"],
            amount=str(input_data["amount"]),
            resource_url=input_data["resource_url"],
            **{key: input_data[key] for key in fields if key in input_data},
        )

    async def _handle_list_paywalls(self, input_data: dict[str, Any]) -> Any:
        return await self.client.paywalls.list(
            page=input_data.get("page", 1), per_page=input_data.get("per_page", 50)
        )

    async def _handle_get_paywall(self, input_data: dict[str, Any]) -> Any:
        return await self.client.paywalls.get(input_data["paywall_id"])

    async def _handle_update_paywall(self, input_data: dict[str, Any]) -> Any:
        fields = (
            "name", "description", "amount", "token_decimals",
            "resource_url", "resource_mime", "is_active",
        )
        return await self.client.paywalls.update(
            input_data["paywall_id"],
            **{key: input_data[key] for key in fields if key in input_data},
        )

    async def _handle_delete_paywall(self, input_data: dict[str, Any]) -> Any:
        return await self.client.paywalls.delete(input_data["paywall_id"])

    async def _handle_get_paywall_payments(self, input_data: dict[str, Any]) -> Any:
        return await self.client.paywalls.payments(
            input_data["paywall_id"],
            page=input_data.get("page", 1),
            per_page=input_data.get("per_page", 20),
        )

    async def _handle_get_x402_revenue(self, input_data: dict[str, Any]) -> Any:
        return await self.client.paywalls.revenue()

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    async def _handle_get_usage(self, input_data: dict[str, Any]) -> Any:
        return await self.client.account.usage()

    async def _handle_get_chains(self, input_data: dict[str, Any]) -> Any:
        return await self.client.account.chains()

    async def _handle_buy_verification_credits(self, input_data: dict[str, Any]) -> Any:
        return await self.client.account.buy_verification_credits(input_data.get("count", 1000))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _address(input_data: dict[str, Any], field: str) -> str:
        address = input_data[field]
        if not is_valid_address(address):
            raise InvalidAddressError(address, field)
        return address

    def _tx(self, input_data: dict[str, Any]) -> TransactionRequest:
        return TransactionRequest.for_chain(
            to=self._address(input_data, "to"),
            chain_id=input_data.get("chain_id"),
            value=str(input_data.get("value", "0")),
            data=input_data.get("data", ""),
            gas_limit=input_data.get("gas_limit"),
            max_fee=input_data.get("max_fee"),
            priority_fee=input_data.get("priority_fee"),
            token_mint=input_data.get("token_mint"),
            token_decimals=input_data.get("token_decimals"),
        )


__all__ = ["AgentWalletToolHandler"]
