"""Tests for agentwallet.x402 challenge parsing, option selection and proofs."""

from __future__ import annotations

import json

import pytest

from agentwallet.abi import encode_transfer
from agentwallet.chains import require_chain
from agentwallet.errors import MalformedChallengeError
from agentwallet.x402 import (
    PaymentProof,
    build_payment_plan,
    parse_challenge,
    parse_gateway_challenge,
    select_option,
)

from conftest import (
    PAY_TO,
    SOLANA_PAY_TO,
    USDC_BASE,
    USDC_SOLANA,
    challenge_body,
    decode_payment_header,
    native_option,
    usdc_option,
)


class TestParseChallenge:
    def test_parses_bytes(self):
        body = json.dumps(challenge_body(usdc_option())).encode()
        challenge = parse_challenge(body)
        assert challenge.x402_version == 1
        assert challenge.error == "Payment required"
        option = challenge.accepts[0]
        assert option.pay_to == PAY_TO
        assert option.token == USDC_BASE
        assert option.token_name == "USDC"
        assert option.asset_name == "USDC"
        assert option.amount == "1.0"

    def test_defaults(self):
        option = parse_challenge({"accepts": [{
            "network": "base",
            "maxAmountRequired": "2500",
            "payTo": PAY_TO,
        }]}).accepts[0]
        assert option.scheme == "exact"
        assert option.required_decimals == 6
        assert option.token is None
        assert option.token_name == "native"
        assert option.asset_name == "native"
        assert option.extra_name is None

    def test_ignores_unknown_fields(self):
        body = challenge_body(native_option(resource="https://api.example.com", mimeType="text/plain"))
        assert parse_challenge(body).accepts[0].network == "base"

    @pytest.mark.parametrize(
        "body",
        [
            b"<html>Payment Required</html>",
            "[]",
            {"x402Version": 1, "error": "pay"},
            {"x402Version": 1, "accepts": []},
            {"x402Version": 1, "accepts": [{"network": "base"}]},
        ],
    )
    def test_malformed(self, body):
        with pytest.raises(MalformedChallengeError) as exc_info:
            parse_challenge(body)
        assert exc_info.value.code == "MALFORMED_CHALLENGE"

    @pytest.mark.parametrize("amount", ["1.5", "-1", "1e6", True])
    def test_required_amount_must_be_raw_integer(self, amount):
        with pytest.raises(MalformedChallengeError):
            parse_challenge(challenge_body(native_option(amount=amount)))

    def test_numeric_required_amount_is_accepted(self):
        challenge = parse_challenge(challenge_body(native_option(amount=5000)))
        assert challenge.accepts[0].max_amount_required == "5000"


class TestParseGatewayChallenge:
    @pytest.mark.parametrize(
        "amount, decimals, raw",
        [("0.01", 6, "10000"), ("10", 6, "10000000"), ("1.00", 6, "1000000"), ("0.0000001", 6, "0")],
    )
    def test_human_amount_is_scaled(self, amount, decimals, raw):
        option = parse_gateway_challenge(challenge_body(native_option(amount=amount, decimals=decimals))).accepts[0]
        assert option.max_amount_required == raw

    def test_missing_decimals_default_to_six(self):
        option = parse_gateway_challenge({"accepts": [{
            "network": "base",
            "maxAmountRequired": "0.25",
            "payTo": PAY_TO,
        }]}).accepts[0]
        assert option.max_amount_required == "250000"
        assert option.amount == "0.25"

    @pytest.mark.parametrize("amount", ["1e3", "-1", "", "ten"])
    def test_bad_amount(self, amount):
        with pytest.raises(MalformedChallengeError, match="invalid payment amount"):
            parse_gateway_challenge(challenge_body(usdc_option(amount=amount)))

    def test_structure_errors_match_resource_challenges(self):
        with pytest.raises(MalformedChallengeError):
            parse_gateway_challenge({"x402Version": 1, "accepts": []})
        with pytest.raises(MalformedChallengeError):
            parse_gateway_challenge({"accepts": [{"network": "base", "maxAmountRequired": "1"}]})


class TestSelectOption:
    def test_first_option_without_preference(self):
        challenge = parse_challenge(challenge_body(native_option("ethereum"), usdc_option()))
        assert select_option(challenge).network == "ethereum"

    def test_preferred_chain_matches_any_notation(self):
        challenge = parse_challenge(challenge_body(
            native_option("ethereum"),
            native_option("polygon"),
            usdc_option("eip155:8453"),
            native_option("8453"),
        ))
        assert select_option(challenge, preferred_chain=8453).network == "eip155:8453"

    def test_falls_back_to_first_on_no_match(self):
        challenge = parse_challenge(challenge_body(native_option("ethereum"), native_option("polygon")))
        assert select_option(challenge, preferred_chain=42161).network == "ethereum"

    def test_unresolvable_options_are_skipped_for_preference(self):
        challenge = parse_challenge(challenge_body(native_option("mars"), native_option("base")))
        assert select_option(challenge, preferred_chain=8453).network == "base"


class TestBuildPaymentPlan:
    def test_evm_native(self):
        option = parse_challenge(challenge_body(native_option())).accepts[0]
        plan = build_payment_plan(option, require_chain(option.network))
        assert plan.to_dict() == {"to": PAY_TO, "value": "10000000000000000", "chain_id": 8453}

    def test_evm_token(self):
        option = parse_challenge(challenge_body(usdc_option())).accepts[0]
        plan = build_payment_plan(option, require_chain(option.network))
        assert plan.to_dict() == {
            "to": USDC_BASE,
            "value": "0",
            "chain_id": 8453,
            "data": encode_transfer(PAY_TO, "1000000"),
        }

    def test_account_based_token(self):
        option = parse_challenge({"accepts": [{
            "network": "solana",
            "maxAmountRequired": "250000",
            "payTo": SOLANA_PAY_TO,
            "requiredDecimals": 6,
            "extra": {"token": USDC_SOLANA, "name": "USDC"},
        }]}).accepts[0]
        plan = build_payment_plan(option, require_chain(option.network))
        assert plan.to_dict() == {
            "to": SOLANA_PAY_TO,
            "value": "250000",
            "chain_id": 900,
            "token_mint": USDC_SOLANA,
            "token_decimals": 6,
        }

    def test_account_based_native(self):
        option = parse_challenge({"accepts": [{
            "network": "solana-devnet",
            "maxAmountRequired": "5000",
            "payTo": SOLANA_PAY_TO,
            "requiredDecimals": 9,
        }]}).accepts[0]
        plan = build_payment_plan(option, require_chain(option.network))
        assert plan.to_dict() == {"to": SOLANA_PAY_TO, "value": "5000", "chain_id": 901}


class TestPaymentProof:
    def test_encode_shape(self):
        option = parse_challenge(challenge_body(usdc_option("eip155:8453"))).accepts[0]
        proof = PaymentProof.for_option(option, "0xdeadbeef", x402_version=1)
        assert decode_payment_header(proof.encode()) == {
            "x402Version": 1,
            "scheme": "exact",
            "network": "eip155:8453",
            "payload": {"txHash": "0xdeadbeef"},
        }

    def test_decode(self):
        proof = PaymentProof(x402_version=2, scheme="exact", network="base", tx_hash="0x01")
        assert PaymentProof.decode(proof.encode()) == proof

    def test_decode_rejects_garbage(self):
        with pytest.raises(ValueError, match="invalid_payment_header"):
            PaymentProof.decode("not-base64!!")
