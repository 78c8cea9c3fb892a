"""
Pytest configuration and fixtures for AgentWallet tests.
"""
from __future__ import annotations

import base64
import json
from typing import Any, Optional

import pytest

from agentwallet import AgentWalletClient, AgentWalletConfig, set_config
from agentwallet.models import TransactionRequest, TransactionResult

GATEWAY_URL = "https://gateway.test/wp-json/agentwallet/v1"
RESOURCE_URL = "https://api.example.com/premium/report"

PAY_TO = "0x1111111111111111111111111111111111111111"
USDC_BASE = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
SOLANA_PAY_TO = "7EcDhSYGxXyscszYEp35KHN8vvw3svAuLKTzXwCFLtV"
USDC_SOLANA = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
TX_HASH = "0x" + "ab" * 32

MOCK_RESPONSES = {
    "wallet": {
        "id": 7,
        "address": "0x2222222222222222222222222222222222222222",
        "label": "research-agent",
        "chain_id": 8453,
        "is_paused": False,
    },
    "send": {"tx_hash": TX_HASH, "status": "broadcast"},
    "solana_send": {"signature": "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnb"},
    "usage": {"month": "2026-10", "operations": 42, "tier": "free", "remaining": 4958},
}


def challenge_body(*accepts: dict[str, Any], error: str = "Payment required") -> dict[str, Any]:
    return {"x402Version": 1, "accepts": list(accepts), "error": error}


def native_option(
    network: str = "base",
    amount: str = "10000000000000000",
    decimals: int = 18,
    **extra_fields: Any,
) -> dict[str, Any]:
    return {
        "scheme": "exact",
        "network": network,
        "maxAmountRequired": amount,
        "payTo": PAY_TO,
        "requiredDecimals": decimals,
        **extra_fields,
    }


def usdc_option(network: str = "eip155:8453", amount: str = "1000000") -> dict[str, Any]:
    return {
        "scheme": "exact",
        "network": network,
        "maxAmountRequired": amount,
        "payTo": PAY_TO,
        "requiredDecimals": 6,
        "description": "Premium report",
        "extra": {"token": USDC_BASE, "name": "USDC"},
    }


def decode_payment_header(value: str) -> dict[str, Any]:
    return json.loads(base64.b64decode(value))


class FakeGateway:
    """Records ``send`` calls and replays a canned result or error."""

    def __init__(
        self,
        result: Optional[dict[str, Any]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.result = result if result is not None else MOCK_RESPONSES["send"]
        self.error = error
        self.calls: list[tuple[int, TransactionRequest, bool]] = []

    async def send(
        self,
        wallet_id: int,
        tx: TransactionRequest,
        skip_x402: bool = False,
    ) -> TransactionResult:
        self.calls.append((wallet_id, tx, skip_x402))
        if self.error is not None:
            raise self.error
        return TransactionResult.model_validate(self.result)


@pytest.fixture(autouse=True)
def reset_global_config():
    """Keep the process-wide config from leaking between tests."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def config() -> AgentWalletConfig:
    """Test configuration with settlement delays disabled."""
    return AgentWalletConfig(
        api_url=GATEWAY_URL,
        username="agent",
        password="app-password",
        timeout_seconds=5.0,
        evm_settlement_delay_seconds=0.0,
        account_settlement_delay_seconds=0.0,
    )


@pytest.fixture
async def client(config: AgentWalletConfig) -> AgentWalletClient:
    """Gateway client without auto-pay."""
    client = AgentWalletClient(config=config)
    yield client
    await client.close()


@pytest.fixture
async def autopay_client(config: AgentWalletConfig) -> AgentWalletClient:
    """Gateway client that pays the gateway's own 402s from wallet 7."""
    client = AgentWalletClient(config=config, x402_wallet_id=7)
    yield client
    await client.close()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def mock_responses() -> dict:
    """Return mock response data."""
    return MOCK_RESPONSES
