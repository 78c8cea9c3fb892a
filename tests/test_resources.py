"""
Tests for the wallets, tokens, paywalls and account resources
"""
import json

import pytest

from agentwallet.abi import encode_allowance, encode_approve, encode_transfer, encode_withdraw
from agentwallet.errors import UnsupportedChainOperationError
from agentwallet.models import TransactionRequest

from conftest import GATEWAY_URL, PAY_TO, SOLANA_PAY_TO, TX_HASH, USDC_BASE, USDC_SOLANA

WALLET_ADDRESS = "0x2222222222222222222222222222222222222222"
SPENDER = "0x3333333333333333333333333333333333333333"
SEND_URL = f"{GATEWAY_URL}/wallets/7/send"
ETH_CALL_URL = f"{GATEWAY_URL}/eth-call"


def _body(request):
    return json.loads(request.content)


def _word(value: int) -> str:
    return "0x" + format(value, "x").zfill(64)


def _abi_string(text: str) -> str:
    data = text.encode().hex().ljust(64, "0")
    return "0x" + format(32, "x").zfill(64) + format(len(text), "x").zfill(64) + data


class TestWallets:
    async def test_create(self, client, httpx_mock, mock_responses):
        httpx_mock.add_response(url=f"{GATEWAY_URL}/wallets", method="POST", json=mock_responses["wallet"])

        wallet = await client.wallets.create(label="research-agent", chain_id=8453)

        assert wallet["id"] == 7
        assert _body(httpx_mock.get_requests()[0]) == {"label": "research-agent", "chain_id": 8453}

    async def test_list_and_get(self, client, httpx_mock, mock_responses):
        httpx_mock.add_response(url=f"{GATEWAY_URL}/wallets", method="GET", json=[mock_responses["wallet"]])
        httpx_mock.add_response(url=f"{GATEWAY_URL}/wallets/7", method="GET", json=mock_responses["wallet"])

        assert len(await client.wallets.list()) == 1
        assert (await client.wallets.get(7))["address"] == WALLET_ADDRESS

    async def test_pause_and_unpause(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{GATEWAY_URL}/wallets/7/pause", method="POST", json={"is_paused": True})
        httpx_mock.add_response(url=f"{GATEWAY_URL}/wallets/7/unpause", method="POST", json={"is_paused": False})

        assert (await client.wallets.pause(7))["is_paused"] is True
        assert (await client.wallets.unpause(7))["is_paused"] is False

    async def test_balance_with_and_without_chain(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{GATEWAY_URL}/wallets/7/balance", json={"balance": "1.0"})
        httpx_mock.add_response(url=f"{GATEWAY_URL}/wallets/7/balance?chain_id=1", json={"balance": "2.0"})

        assert (await client.wallets.balance(7))["balance"] == "1.0"
        assert (await client.wallets.balance(7, chain_id=1))["balance"] == "2.0"

    async def test_evm_token_balance_is_formatted(self, client, httpx_mock):
        httpx_mock.add_response(
            url=f"{GATEWAY_URL}/wallets/7/token-balance?chain_id=8453&token={USDC_BASE}",
            json={"balance_raw": "12500000"},
        )

        result = await client.wallets.token_balance(7, USDC_BASE, 8453, decimals=6)

        assert result["balance"] == "12.5"
        assert result["balance_raw"] == "12500000"
        assert result["decimals"] == 6

    async def test_solana_token_balance_uses_gateway_format(self, client, httpx_mock):
        httpx_mock.add_response(
            url=f"{GATEWAY_URL}/wallets/7/token-balance?chain_id=900&token={USDC_SOLANA}",
            json={"balance_raw": "1000", "balance_formatted": "0.001", "decimals": 6},
        )

        result = await client.wallets.token_balance(7, USDC_SOLANA, 900)

        assert result["balance"] == "0.001"
        assert result["decimals"] == 6

    async def test_send_returns_settlement_id(self, client, httpx_mock, mock_responses):
        httpx_mock.add_response(url=SEND_URL, method="POST", json=mock_responses["send"])

        tx = TransactionRequest.for_chain(to=PAY_TO, chain_id=8453, value="1", gas_limit="21000")
        result = await client.wallets.send(7, tx)

        assert result.settlement_id() == TX_HASH
        assert result.model_extra["status"] == "broadcast"
        request = httpx_mock.get_requests()[0]
        assert _body(request) == {
            "to": PAY_TO, "value": "1", "chain_id": 8453, "data": "", "gas_limit": "21000",
        }
        assert "X-AGW-SKIP-X402" not in request.headers

    async def test_sign_solana_keeps_only_solana_fields(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{GATEWAY_URL}/wallets/7/sign", method="POST", json={"signed_tx": "AQID"})

        tx = TransactionRequest.for_chain(
            to=SOLANA_PAY_TO, chain_id=900, value="5", data="0x00", gas_limit="1",
            token_mint=USDC_SOLANA, token_decimals=6,
        )
        await client.wallets.sign(7, tx)

        assert _body(httpx_mock.get_requests()[0]) == {
            "to": SOLANA_PAY_TO, "value": "5", "chain_id": 900,
            "token_mint": USDC_SOLANA, "token_decimals": 6,
        }


class TestTokens:
    async def test_native_transfer_evm(self, client, httpx_mock, mock_responses):
        httpx_mock.add_response(url=SEND_URL, method="POST", json=mock_responses["send"])

        result = await client.tokens.transfer(7, PAY_TO, "0.1", 8453)

        assert _body(httpx_mock.get_requests()[0]) == {
            "to": PAY_TO, "value": "100000000000000000", "chain_id": 8453, "data": "",
        }
        assert result["tx_hash"] == TX_HASH
        assert result["amount"] == "0.1"

    async def test_native_transfer_solana_uses_lamports(self, client, httpx_mock, mock_responses):
        httpx_mock.add_response(url=SEND_URL, method="POST", json=mock_responses["solana_send"])

        await client.tokens.transfer(7, SOLANA_PAY_TO, "0.5", 900)

        assert _body(httpx_mock.get_requests()[0]) == {
            "to": SOLANA_PAY_TO, "value": "500000000", "chain_id": 900,
        }

    async def test_erc20_transfer(self, client, httpx_mock, mock_responses):
        httpx_mock.add_response(url=SEND_URL, method="POST", json=mock_responses["send"])

        result = await client.tokens.transfer_token(7, USDC_BASE, PAY_TO, "100", 8453, decimals=6)

        assert _body(httpx_mock.get_requests()[0]) == {
            "to": USDC_BASE,
            "value": "0",
            "chain_id": 8453,
            "data": encode_transfer(PAY_TO, "100000000"),
        }
        assert result["recipient"] == PAY_TO
        assert result["decimals"] == 6

    async def test_spl_transfer(self, client, httpx_mock, mock_responses):
        httpx_mock.add_response(url=SEND_URL, method="POST", json=mock_responses["solana_send"])

        await client.tokens.transfer_token(7, USDC_SOLANA, SOLANA_PAY_TO, "2.5", 900, decimals=6)

        assert _body(httpx_mock.get_requests()[0]) == {
            "to": SOLANA_PAY_TO,
            "value": "2500000",
            "chain_id": 900,
            "token_mint": USDC_SOLANA,
            "token_decimals": 6,
        }

    async def test_unlimited_approval(self, client, httpx_mock, mock_responses):
        httpx_mock.add_response(url=SEND_URL, method="POST", json=mock_responses["send"])

        result = await client.tokens.approve(7, USDC_BASE, SPENDER, "max", 8453, decimals=6)

        assert _body(httpx_mock.get_requests()[0])["data"] == encode_approve(SPENDER, 2**256 - 1)
        assert result["amount"] == "unlimited"

    async def test_approval_on_solana_is_refused(self, client, httpx_mock):
        with pytest.raises(UnsupportedChainOperationError) as exc_info:
            await client.tokens.approve(7, USDC_SOLANA, SOLANA_PAY_TO, "1", 900)
        assert exc_info.value.code == "UNSUPPORTED_CHAIN_OPERATION"
        assert httpx_mock.get_requests() == []

    async def test_allowance(self, client, httpx_mock, mock_responses):
        httpx_mock.add_response(url=f"{GATEWAY_URL}/wallets/7", json=mock_responses["wallet"])
        httpx_mock.add_response(url=ETH_CALL_URL, method="POST", json={"result": _word(2500000)})

        result = await client.tokens.allowance(7, USDC_BASE, SPENDER, 8453, decimals=6)

        eth_call = httpx_mock.get_requests()[1]
        assert _body(eth_call) == {
            "chain_id": 8453,
            "to": USDC_BASE,
            "data": encode_allowance(WALLET_ADDRESS, SPENDER),
        }
        assert result["allowance_raw"] == "2500000"
        assert result["allowance"] == "2.5"
        assert result["is_unlimited"] is False

    async def test_unlimited_allowance(self, client, httpx_mock, mock_responses):
        httpx_mock.add_response(url=f"{GATEWAY_URL}/wallets/7", json=mock_responses["wallet"])
        httpx_mock.add_response(url=ETH_CALL_URL, method="POST", json={"result": "0x" + "f" * 64})

        result = await client.tokens.allowance(7, USDC_BASE, SPENDER, 8453)

        assert result["allowance"] == "unlimited"
        assert result["is_unlimited"] is True

    async def test_wrap_and_unwrap(self, client, httpx_mock, mock_responses):
        httpx_mock.add_response(url=SEND_URL, method="POST", json=mock_responses["send"])
        httpx_mock.add_response(url=SEND_URL, method="POST", json=mock_responses["send"])

        wrapped = await client.tokens.wrap(7, "0.5", 137)
        unwrapped = await client.tokens.unwrap(7, "0.5", 137)

        wrap_request, unwrap_request = httpx_mock.get_requests()
        wpol = "0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270"
        assert _body(wrap_request) == {
            "to": wpol, "value": "500000000000000000", "chain_id": 137, "data": "0xd0e30db0",
        }
        assert _body(unwrap_request) == {
            "to": wpol, "value": "0", "chain_id": 137,
            "data": encode_withdraw(500000000000000000),
        }
        assert wrapped["wrapped_token"] == "WPOL"
        assert unwrapped["unwrapped_token"] == "WPOL"

    async def test_wrap_without_wrapped_token(self, client, httpx_mock):
        with pytest.raises(UnsupportedChainOperationError):
            await client.tokens.wrap(7, "1", 84532)

    async def test_token_info_tolerates_failed_reads(self, client, httpx_mock):
        httpx_mock.add_response(
            url=ETH_CALL_URL, method="POST",
            match_json={"chain_id": 8453, "to": USDC_BASE, "data": "0x06fdde03"},
            json={"result": _abi_string("USD Coin")},
        )
        httpx_mock.add_response(
            url=ETH_CALL_URL, method="POST",
            match_json={"chain_id": 8453, "to": USDC_BASE, "data": "0x95d89b41"},
            status_code=500, json={"error": "execution reverted"},
        )
        httpx_mock.add_response(
            url=ETH_CALL_URL, method="POST",
            match_json={"chain_id": 8453, "to": USDC_BASE, "data": "0x313ce567"},
            json={"result": _word(6)},
        )

        info = await client.tokens.token_info(USDC_BASE, 8453)

        assert info == {
            "token": USDC_BASE,
            "chain_id": 8453,
            "name": "USD Coin",
            "symbol": "Unknown",
            "decimals": 6,
        }

    async def test_eth_call_is_evm_only(self, client):
        with pytest.raises(UnsupportedChainOperationError):
            await client.tokens.call(901, SOLANA_PAY_TO, "0x")


class TestPaywalls:
    async def test_create_converts_price(self, client, httpx_mock):
        httpx_mock.add_response(
            url=f"{GATEWAY_URL}/x402/paywalls", method="POST",
            json={"id": 3, "access_url": "https://gateway.test/x402/3"},
        )

        result = await client.paywalls.create(
            wallet_id=7,
            name="Premium API Access",
            amount="0.01",
            resource_url="https://example.com/data.json",
            token_address=USDC_BASE,
        )

        body = _body(httpx_mock.get_requests()[0])
        assert body["amount"] == "10000"
        assert body["token_type"] == "erc20"
        assert body["chain_id"] == 8453
        assert result["price"] == "0.01 USDC"
        assert result["id"] == 3

    async def test_list_and_payments_paginate(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{GATEWAY_URL}/x402/paywalls?page=1&per_page=50", json=[])
        httpx_mock.add_response(url=f"{GATEWAY_URL}/x402/paywalls/3/payments?page=2&per_page=20", json=[])

        await client.paywalls.list()
        await client.paywalls.payments(3, page=2)

    async def test_update_sends_only_given_fields(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{GATEWAY_URL}/x402/paywalls/3", method="PUT", json={"id": 3})

        await client.paywalls.update(3, amount="0.05", is_active=False)

        assert _body(httpx_mock.get_requests()[0]) == {"amount": "50000", "is_active": False}

    async def test_update_amount_with_decimals(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{GATEWAY_URL}/x402/paywalls/3", method="PUT", json={"id": 3})

        await client.paywalls.update(3, amount="0.05", token_decimals=18)

        assert _body(httpx_mock.get_requests()[0]) == {"amount": "50000000000000000"}

    async def test_get_delete_and_revenue(self, client, httpx_mock):
        httpx_mock.add_response(url=f"{GATEWAY_URL}/x402/paywalls/3", method="GET", json={"id": 3})
        httpx_mock.add_response(url=f"{GATEWAY_URL}/x402/paywalls/3", method="DELETE", json={"deleted": True})
        httpx_mock.add_response(url=f"{GATEWAY_URL}/x402/revenue", json={"total_payments": 4})

        assert (await client.paywalls.get(3))["id"] == 3
        assert (await client.paywalls.delete(3))["deleted"] is True
        assert (await client.paywalls.revenue())["total_payments"] == 4


class TestAccount:
    async def test_usage_and_chains(self, client, httpx_mock, mock_responses):
        httpx_mock.add_response(url=f"{GATEWAY_URL}/usage", json=mock_responses["usage"])
        httpx_mock.add_response(url=f"{GATEWAY_URL}/chains", json=[{"chain_id": 8453}])

        assert (await client.account.usage())["tier"] == "free"
        assert (await client.account.chains())[0]["chain_id"] == 8453

    async def test_verification_credit_minimum(self, client):
        with pytest.raises(ValueError):
            await client.account.buy_verification_credits(10)
