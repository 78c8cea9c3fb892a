"""Anthropic tool_use definitions for AgentWallet.

Each tool is defined as a dict matching the Anthropic Messages API
``tools`` parameter schema. Pass them to ``client.messages.create(tools=...)``
and route the resulting ``tool_use`` blocks through
:class:`agentwallet.handlers.AgentWalletToolHandler`.

Example::

    import anthropic
    from agentwallet.tools import ALL_TOOLS

    client = anthropic.Anthropic()
    response = client.messages.create(
        model="claude-sonnet-4-5-20250929",
        tools=ALL_TOOLS,
        messages=[{"role": "user", "content": "Buy the report at https://..."}],
    )
"""

from __future__ import annotations

from typing import Any

_CHAIN_IDS_HELP = (
    "1=Ethereum, 8453=Base, 42161=Arbitrum, 10=Optimism, 137=Polygon, "
    "43114=Avalanche, 56=BSC, 7777777=Zora, 369=PulseChain, 900=Solana, "
    "901=Solana Devnet"
)

_WALLET_ID: dict[str, Any] = {"type": "integer", "description": "Wallet ID"}
_CHAIN_ID: dict[str, Any] = {"type": "integer", "description": f"Chain ID ({_CHAIN_IDS_HELP})"}
_PAYWALL_ID: dict[str, Any] = {"type": "integer", "description": "Paywall ID"}
_DECIMALS: dict[str, Any] = {
    "type": "integer",
    "description": "Token decimals (6 for USDC, 18 for most tokens)",
    "default": 18,
}
_EVM_ADDRESS: dict[str, Any] = {"type": "string", "pattern": "^0x[a-fA-F0-9]{40}$"}
_ADDRESS_HELP = "0x-prefixed for EVM, Base58 for Solana"


def _object(properties: dict[str, Any], required: list[str] | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


# ---------------------------------------------------------------------------
# Wallets
# ---------------------------------------------------------------------------

CREATE_WALLET_TOOL: dict[str, Any] = {
    "name": "create_wallet",
    "description": (
        "Create a new EVM or Solana wallet. Returns the wallet ID and address. "
        "The private key is encrypted server-side and never exposed."
    ),
    "input_schema": _object({
        "label": {"type": "string", "description": "Friendly name for the wallet", "default": ""},
        "chain_id": {**_CHAIN_ID, "description": f"Default chain ID ({_CHAIN_IDS_HELP})", "default": 8453},
    }),
}

LIST_WALLETS_TOOL: dict[str, Any] = {
    "name": "list_wallets",
    "description": (
        "List all wallets owned by the authenticated user with their IDs, "
        "addresses, labels, chain IDs and status."
    ),
    "input_schema": _object({}),
}

GET_WALLET_TOOL: dict[str, Any] = {
    "name": "get_wallet",
    "description": "Get a wallet's address, label, chain, spending limits and pause status.",
    "input_schema": _object({"wallet_id": _WALLET_ID}, ["wallet_id"]),
}

GET_BALANCE_TOOL: dict[str, Any] = {
    "name": "get_balance",
    "description": (
        "Get the native token balance of a wallet, in wei (lamports on Solana) "
        "and human-readable form."
    ),
    "input_schema": _object({
        "wallet_id": _WALLET_ID,
        "chain_id": {**_CHAIN_ID, "description": "Chain ID to check (defaults to the wallet's chain)"},
    }, ["wallet_id"]),
}

_TX_PROPERTIES: dict[str, Any] = {
    "wallet_id": _WALLET_ID,
    "to": {"type": "string", "description": f"Destination address ({_ADDRESS_HELP})"},
    "chain_id": {**_CHAIN_ID, "description": "Chain ID (defaults to the wallet's chain)"},
    "value": {"type": "string", "description": "Value in wei/lamports (decimal string)", "default": "0"},
    "data": {"type": "string", "description": "0x-prefixed calldata for EVM contract calls", "default": ""},
    "gas_limit": {"type": "string", "description": "Gas limit, EVM only (estimated if omitted)"},
    "max_fee": {"type": "string", "description": "Max fee per gas in wei, EVM only"},
    "priority_fee": {"type": "string", "description": "Max priority fee per gas in wei, EVM only"},
    "token_mint": {"type": "string", "description": "SPL token mint, Solana only"},
    "token_decimals": {"type": "integer", "description": "SPL token decimals, Solana only"},
}

SIGN_TRANSACTION_TOOL: dict[str, Any] = {
    "name": "sign_transaction",
    "description": (
        "Sign a transaction with a wallet's key without broadcasting it. "
        "Returns signed raw hex (EVM) or a base64 transaction (Solana)."
    ),
    "input_schema": _object(_TX_PROPERTIES, ["wallet_id", "to"]),
}

SEND_TRANSACTION_TOOL: dict[str, Any] = {
    "name": "send_transaction",
    "description": (
        "Sign and broadcast a transaction. Returns the transaction hash (EVM) "
        "or signature (Solana)."
    ),
    "input_schema": _object(_TX_PROPERTIES, ["wallet_id", "to"]),
}

PAUSE_WALLET_TOOL: dict[str, Any] = {
    "name": "pause_wallet",
    "description": "Emergency pause a wallet. No transactions can be signed while paused.",
    "input_schema": _object({"wallet_id": _WALLET_ID}, ["wallet_id"]),
}

UNPAUSE_WALLET_TOOL: dict[str, Any] = {
    "name": "unpause_wallet",
    "description": "Resume a paused wallet so transactions can be signed again.",
    "input_schema": _object({"wallet_id": _WALLET_ID}, ["wallet_id"]),
}

DELETE_WALLET_TOOL: dict[str, Any] = {
    "name": "delete_wallet",
    "description": "Soft-delete a wallet. It disappears from listings and cannot transact.",
    "input_schema": _object({"wallet_id": _WALLET_ID}, ["wallet_id"]),
}

# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

TRANSFER_TOOL: dict[str, Any] = {
    "name": "transfer",
    "description": (
        "Send native tokens (ETH, AVAX, BNB, POL, PLS, SOL). The amount is "
        "human-readable (e.g. \"0.1\") and converted to wei/lamports."
    ),
    "input_schema": _object({
        "wallet_id": _WALLET_ID,
        "to": {"type": "string", "description": f"Destination address ({_ADDRESS_HELP})"},
        "amount": {"type": "string", "description": "Amount in human-readable format (e.g. \"0.1\")"},
        "chain_id": _CHAIN_ID,
    }, ["wallet_id", "to", "amount", "chain_id"]),
}

GET_TOKEN_BALANCE_TOOL: dict[str, Any] = {
    "name": "get_token_balance",
    "description": (
        "Get the ERC-20 or SPL token balance of a wallet, raw and human-readable. "
        "Use get_chains to find stablecoin addresses."
    ),
    "input_schema": _object({
        "wallet_id": _WALLET_ID,
        "token": {"type": "string", "description": "ERC-20 contract (EVM) or SPL mint (Solana)"},
        "chain_id": _CHAIN_ID,
        "decimals": _DECIMALS,
    }, ["wallet_id", "token", "chain_id"]),
}

TRANSFER_TOKEN_TOOL: dict[str, Any] = {
    "name": "transfer_token",
    "description": (
        "Send ERC-20 tokens (EVM) or SPL tokens (Solana). The amount is "
        "human-readable (e.g. \"100\" for 100 USDC)."
    ),
    "input_schema": _object({
        "wallet_id": _WALLET_ID,
        "token": {"type": "string", "description": "ERC-20 contract (EVM) or SPL mint (Solana)"},
        "to": {"type": "string", "description": f"Recipient address ({_ADDRESS_HELP})"},
        "amount": {"type": "string", "description": "Amount in human-readable format"},
        "chain_id": _CHAIN_ID,
        "decimals": _DECIMALS,
    }, ["wallet_id", "token", "to", "amount", "chain_id"]),
}

CALL_CONTRACT_TOOL: dict[str, Any] = {
    "name": "call_contract",
    "description": (
        "Read-only contract call (eth_call). Returns the raw hex result. "
        "Costs no gas. EVM chains only."
    ),
    "input_schema": _object({
        "chain_id": _CHAIN_ID,
        "to": {**_EVM_ADDRESS, "description": "Contract address"},
        "data": {"type": "string", "description": "ABI-encoded calldata (0x-prefixed hex)"},
    }, ["chain_id", "to", "data"]),
}

APPROVE_TOKEN_TOOL: dict[str, Any] = {
    "name": "approve_token",
    "description": (
        "Approve a spender contract to move ERC-20 tokens from the wallet. "
        "Use amount \"max\" for an unlimited approval. EVM chains only."
    ),
    "input_schema": _object({
        "wallet_id": _WALLET_ID,
        "token": {**_EVM_ADDRESS, "description": "ERC-20 token contract"},
        "spender": {**_EVM_ADDRESS, "description": "Contract to approve as spender"},
        "amount": {"type": "string", "description": "Human-readable amount, or \"max\""},
        "chain_id": _CHAIN_ID,
        "decimals": _DECIMALS,
    }, ["wallet_id", "token", "spender", "amount", "chain_id"]),
}

GET_ALLOWANCE_TOOL: dict[str, Any] = {
    "name": "get_allowance",
    "description": (
        "Check how many ERC-20 tokens a spender may move from the wallet. "
        "EVM chains only."
    ),
    "input_schema": _object({
        "wallet_id": {**_WALLET_ID, "description": "Wallet ID (the token owner)"},
        "token": {**_EVM_ADDRESS, "description": "ERC-20 token contract"},
        "spender": {**_EVM_ADDRESS, "description": "Spender contract"},
        "chain_id": _CHAIN_ID,
        "decimals": _DECIMALS,
    }, ["wallet_id", "token", "spender", "chain_id"]),
}

WRAP_ETH_TOOL: dict[str, Any] = {
    "name": "wrap_eth",
    "description": (
        "Wrap native tokens (ETH, AVAX, BNB, POL, PLS) into their ERC-20 "
        "version (WETH, WAVAX, ...)."
    ),
    "input_schema": _object({
        "wallet_id": _WALLET_ID,
        "amount": {"type": "string", "description": "Amount to wrap (e.g. \"0.5\")"},
        "chain_id": _CHAIN_ID,
    }, ["wallet_id", "amount", "chain_id"]),
}

UNWRAP_ETH_TOOL: dict[str, Any] = {
    "name": "unwrap_eth",
    "description": "Unwrap WETH, WAVAX, WBNB, ... back to the native token.",
    "input_schema": _object({
        "wallet_id": _WALLET_ID,
        "amount": {"type": "string", "description": "Amount to unwrap (e.g. \"0.5\")"},
        "chain_id": _CHAIN_ID,
    }, ["wallet_id", "amount", "chain_id"]),
}

GET_TOKEN_INFO_TOOL: dict[str, Any] = {
    "name": "get_token_info",
    "description": "Get the name, symbol and decimals of an ERC-20 token.",
    "input_schema": _object({
        "token": {**_EVM_ADDRESS, "description": "ERC-20 token contract"},
        "chain_id": _CHAIN_ID,
    }, ["token", "chain_id"]),
}

# ---------------------------------------------------------------------------
# x402
# ---------------------------------------------------------------------------

PAY_X402_TOOL: dict[str, Any] = {
    "name": "pay_x402",
    "description": (
        "Fetch a URL and, if the server answers HTTP 402 Payment Required, pay "
        "on-chain and retry with proof of payment (https://x402.org). Returns "
        "the final response. Set max_payment to prevent overspending."
    ),
    "input_schema": _object({
        "url": {"type": "string", "description": "HTTPS URL to access"},
        "wallet_id": {**_WALLET_ID, "description": "Wallet ID to pay from"},
        "method": {"type": "string", "description": "HTTP method", "default": "GET"},
        "headers": {"type": "string", "description": "Optional JSON object of extra request headers"},
        "body": {"type": "string", "description": "Optional request body for POST/PUT"},
        "max_payment": {
            "type": "string",
            "description": (
                "Maximum payment in human-readable units (e.g. \"1.00\" for 1 USDC). "
                "Strongly recommended."
            ),
        },
        "prefer_chain": {
            "type": "integer",
            "description": "Preferred chain ID when several are accepted (e.g. 8453 for Base)",
        },
    }, ["url", "wallet_id"]),
}

CREATE_PAYWALL_TOOL: dict[str, Any] = {
    "name": "create_paywall",
    "description": (
        "Create an x402 paywall that charges clients for a resource. Returns a "
        "public access URL that answers 402 until paid."
    ),
    "input_schema": _object({
        "wallet_id": {**_WALLET_ID, "description": "Wallet ID that receives payments"},
        "name": {"type": "string", "description": "Paywall name"},
        "description": {"type": "string", "description": "Shown in the 402 response", "default": ""},
        "amount": {"type": "string", "description": "Price in human-readable units (e.g. \"0.01\")"},
        "token_type": {"type": "string", "enum": ["erc20", "spl", "native"], "default": "erc20"},
        "token_address": {
            "type": "string",
            "description": "Token contract or SPL mint; required for erc20 and spl",
            "default": "",
        },
        "token_decimals": {"type": "integer", "description": "Token decimals", "default": 6},
        "token_name": {"type": "string", "description": "Token display name", "default": "USDC"},
        "chain_id": {**_CHAIN_ID, "default": 8453},
        "resource_url": {"type": "string", "description": "URL served after payment is verified"},
        "resource_mime": {"type": "string", "default": "application/json"},
    }, ["wallet_id", "name", "amount", "resource_url"]),
}

LIST_PAYWALLS_TOOL: dict[str, Any] = {
    "name": "list_paywalls",
    "description": "List your x402 paywalls with pricing, access URLs, payment counts and revenue.",
    "input_schema": _object({
        "page": {"type": "integer", "default": 1},
        "per_page": {"type": "integer", "description": "Results per page (max 100)", "default": 50},
    }),
}

GET_PAYWALL_TOOL: dict[str, Any] = {
    "name": "get_paywall",
    "description": "Get an x402 paywall's pricing, access URL, stats and configuration.",
    "input_schema": _object({"paywall_id": _PAYWALL_ID}, ["paywall_id"]),
}

UPDATE_PAYWALL_TOOL: dict[str, Any] = {
    "name": "update_paywall",
    "description": "Update an x402 paywall's price, resource, active status or any other field.",
    "input_schema": _object({
        "paywall_id": _PAYWALL_ID,
        "name": {"type": "string"},
        "description": {"type": "string"},
        "amount": {"type": "string", "description": "New price in human-readable units"},
        "token_decimals": {"type": "integer", "description": "Decimals for amount (default 6)"},
        "resource_url": {"type": "string"},
        "resource_mime": {"type": "string"},
        "is_active": {"type": "boolean", "description": "Enable or disable the paywall"},
    }, ["paywall_id"]),
}

DELETE_PAYWALL_TOOL: dict[str, Any] = {
    "name": "delete_paywall",
    "description": "Delete an x402 paywall. Its access URL returns 404 afterwards.",
    "input_schema": _object({"paywall_id": _PAYWALL_ID}, ["paywall_id"]),
}

GET_PAYWALL_PAYMENTS_TOOL: dict[str, Any] = {
    "name": "get_paywall_payments",
    "description": "Verified payments for a paywall: tx hashes, payers, amounts and timestamps.",
    "input_schema": _object({
        "paywall_id": _PAYWALL_ID,
        "page": {"type": "integer", "default": 1},
        "per_page": {"type": "integer", "description": "Results per page (max 100)", "default": 20},
    }, ["paywall_id"]),
}

GET_X402_REVENUE_TOOL: dict[str, Any] = {
    "name": "get_x402_revenue",
    "description": "Aggregate x402 revenue across all paywalls, by chain and token.",
    "input_schema": _object({}),
}

# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------

GET_USAGE_TOOL: dict[str, Any] = {
    "name": "get_usage",
    "description": "This month's operation count, tier, remaining quota and fees.",
    "input_schema": _object({}),
}

GET_CHAINS_TOOL: dict[str, Any] = {
    "name": "get_chains",
    "description": (
        "List supported chains (EVM and Solana) with chain IDs, native tokens, "
        "stablecoins and RPC status."
    ),
    "input_schema": _object({}),
}

BUY_VERIFICATION_CREDITS_TOOL: dict[str, Any] = {
    "name": "buy_verification_credits",
    "description": (
        "Buy x402 verification credits with USDC. Paywall owners need credits "
        "beyond the free tier of 1,000 verifications a month."
    ),
    "input_schema": _object({
        "count": {
            "type": "integer",
            "description": "Credits to buy (min 100)",
            "minimum": 100,
            "default": 1000,
        },
    }),
}

# ---------------------------------------------------------------------------
# Convenience aggregates
# ---------------------------------------------------------------------------

ALL_TOOLS: list[dict[str, Any]] = [
    CREATE_WALLET_TOOL,
    LIST_WALLETS_TOOL,
    GET_WALLET_TOOL,
    GET_BALANCE_TOOL,
    SIGN_TRANSACTION_TOOL,
    SEND_TRANSACTION_TOOL,
    TRANSFER_TOOL,
    GET_TOKEN_BALANCE_TOOL,
    TRANSFER_TOKEN_TOOL,
    CALL_CONTRACT_TOOL,
    APPROVE_TOKEN_TOOL,
    GET_ALLOWANCE_TOOL,
    WRAP_ETH_TOOL,
    UNWRAP_ETH_TOOL,
    GET_TOKEN_INFO_TOOL,
    PAY_X402_TOOL,
    GET_USAGE_TOOL,
    BUY_VERIFICATION_CREDITS_TOOL,
    PAUSE_WALLET_TOOL,
    UNPAUSE_WALLET_TOOL,
    GET_CHAINS_TOOL,
    DELETE_WALLET_TOOL,
    CREATE_PAYWALL_TOOL,
    LIST_PAYWALLS_TOOL,
    GET_PAYWALL_TOOL,
    UPDATE_PAYWALL_TOOL,
    DELETE_PAYWALL_TOOL,
    GET_PAYWALL_PAYMENTS_TOOL,
    GET_X402_REVENUE_TOOL,
]

READ_ONLY_TOOLS: list[dict[str, Any]] = [
    LIST_WALLETS_TOOL,
    GET_WALLET_TOOL,
    GET_BALANCE_TOOL,
    GET_TOKEN_BALANCE_TOOL,
    CALL_CONTRACT_TOOL,
    GET_ALLOWANCE_TOOL,
    GET_TOKEN_INFO_TOOL,
    GET_USAGE_TOOL,
    GET_CHAINS_TOOL,
    LIST_PAYWALLS_TOOL,
    GET_PAYWALL_TOOL,
    GET_PAYWALL_PAYMENTS_TOOL,
    GET_X402_REVENUE_TOOL,
]

TOOL_NAMES: set[str] = {tool["name"] for tool in ALL_TOOLS}
