"""x402 HTTP 402 Payment Required: challenge parsing and payment proofs.

Implements the client side of the x402 exchange:
- Parsing the 402 response body into ranked payment options
- Choosing an option for a preferred chain
- Turning an option into a wallet gateway ``send`` request
- Encoding the ``X-PAYMENT`` retry header

Reference: https://www.x402.org/
"""
from __future__ import annotations

import base64
import json
from typing import Any, Optional, Union

from pydantic import Field, ValidationError, field_validator

from .abi import encode_transfer
from .chains import ChainIdentity, resolve_chain_id
from .errors import InvalidAmountError, MalformedChallengeError
from .models import AgentWalletModel, TransactionRequest
from .units import from_raw_units, to_raw_units

X_PAYMENT_HEADER = "X-PAYMENT"
# Tells the wallet gateway not to put its own 402 in front of a payment.
SKIP_X402_HEADER = "X-AGW-SKIP-X402"

X402_VERSION = 1
DEFAULT_REQUIRED_DECIMALS = 6


class PaymentExtra(AgentWalletModel):
    token: Optional[str] = None
    name: Optional[str] = None


class PaymentOption(AgentWalletModel):
    """One entry of a challenge's ``accepts`` list."""

    scheme: str = "exact"
    network: str
    max_amount_required: str = Field(alias="maxAmountRequired")
    pay_to: str = Field(alias="payTo")
    required_decimals: int = Field(default=DEFAULT_REQUIRED_DECIMALS, alias="requiredDecimals", ge=0)
    description: Optional[str] = None
    extra: Optional[PaymentExtra] = None

    @field_validator("max_amount_required", mode="before")
    @classmethod
    def _raw_integer(cls, value: Any) -> str:
        text = str(value)
        if isinstance(value, bool) or not (text.isascii() and text.isdigit()):
            raise ValueError("maxAmountRequired must be a non-negative integer string")
        return text

    @property
    def token(self) -> Optional[str]:
        """Token contract / mint address; ``None`` means the native asset."""
        return (self.extra.token if self.extra else None) or None

    @property
    def extra_name(self) -> Optional[str]:
        return (self.extra.name if self.extra else None) or None

    @property
    def asset_name(self) -> str:
        """Name from ``extra``, or ``"native"`` when the server gave none."""
        return self.extra_name or "native"

    @property
    def token_name(self) -> str:
        return self.extra_name or ("tokens" if self.token else "native")

    @property
    def amount(self) -> str:
        """Required amount in human-readable units."""
        return from_raw_units(self.max_amount_required, self.required_decimals)


class PaymentChallenge(AgentWalletModel):
    """Parsed body of a 402 response."""

    x402_version: int = Field(default=X402_VERSION, alias="x402Version")
    accepts: list[PaymentOption]
    error: str = ""

    @field_validator("accepts")
    @classmethod
    def _at_least_one(cls, value: list[PaymentOption]) -> list[PaymentOption]:
        if not value:
            raise ValueError("empty accepts")
        return value


class PaymentProof(AgentWalletModel):
    """Settlement proof carried in the ``X-PAYMENT`` header."""

    x402_version: int = Field(default=X402_VERSION, alias="x402Version")
    scheme: str
    network: str
    tx_hash: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "x402Version": self.x402_version,
            "scheme": self.scheme,
            "network": self.network,
            "payload": {"txHash": self.tx_hash},
        }

    def encode(self) -> str:
        """Base64-encoded JSON for the ``X-PAYMENT`` header."""
        return base64.b64encode(json.dumps(self.to_payload()).encode()).decode()

    @classmethod
    def decode(cls, header_value: str) -> "PaymentProof":
        try:
            data = json.loads(base64.b64decode(header_value))
            return cls(
                x402_version=data.get("x402Version", X402_VERSION),
                scheme=data["scheme"],
                network=data["network"],
                tx_hash=data["payload"]["txHash"],
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise ValueError(f"invalid_payment_header: {exc}") from exc

    @classmethod
    def for_option(
        cls,
        option: PaymentOption,
        tx_hash: str,
        x402_version: int = X402_VERSION,
    ) -> "PaymentProof":
        # network is echoed verbatim, never the resolved chain id
        return cls(
            x402_version=x402_version or X402_VERSION,
            scheme=option.scheme,
            network=option.network,
            tx_hash=tx_hash,
        )


def parse_challenge(body: Union[bytes, str, dict[str, Any]]) -> PaymentChallenge:
    """Parse a 402 response body.

    Raises:
        MalformedChallengeError: Body is not JSON, not an object, has no
            ``accepts`` options, or an option is missing required fields.
    """
    return _validate_challenge(_load_challenge(body))


def parse_gateway_challenge(body: Union[bytes, str, dict[str, Any]]) -> PaymentChallenge:
    """Parse a 402 issued by the wallet gateway itself.

    The gateway quotes ``maxAmountRequired`` in human units (``"0.01"``), so
    each amount is scaled by its ``requiredDecimals`` before validation.

    Raises:
        MalformedChallengeError: As :func:`parse_challenge`, or an amount is
            not a plain decimal.
    """
    data = _load_challenge(body)
    accepts = []
    for entry in data["accepts"]:
        if isinstance(entry, dict) and "maxAmountRequired" in entry:
            decimals = entry.get("requiredDecimals") or DEFAULT_REQUIRED_DECIMALS
            try:
                raw = to_raw_units(str(entry["maxAmountRequired"]), int(decimals))
            except (InvalidAmountError, TypeError, ValueError) as exc:
                raise MalformedChallengeError(
                    f"402 response has invalid payment amount: {entry['maxAmountRequired']!r}"
                ) from exc
            entry = {**entry, "maxAmountRequired": raw}
        accepts.append(entry)
    return _validate_challenge({**data, "accepts": accepts})


def _load_challenge(body: Union[bytes, str, dict[str, Any]]) -> dict[str, Any]:
    if isinstance(body, (bytes, str)):
        try:
            data = json.loads(body)
        except ValueError as exc:
            raise MalformedChallengeError(
                "402 response body is not valid JSON. This server may not support x402."
            ) from exc
    else:
        data = body

    if not isinstance(data, dict):
        raise MalformedChallengeError("402 response body must be a JSON object.")
    if not data.get("accepts"):
        raise MalformedChallengeError('402 response has no payment options in "accepts" array.')
    if not isinstance(data["accepts"], list):
        raise MalformedChallengeError('402 response "accepts" must be an array.')
    return data


def _validate_challenge(data: dict[str, Any]) -> PaymentChallenge:
    try:
        return PaymentChallenge.model_validate(data)
    except ValidationError as exc:
        raise MalformedChallengeError(f"402 response has invalid payment options: {exc}") from exc


def select_option(
    challenge: PaymentChallenge,
    preferred_chain: Optional[int] = None,
) -> PaymentOption:
    """First option on ``preferred_chain``, else the first option.

    Servers list options in order of preference, so the fallback is always
    ``accepts[0]`` rather than any "best" option.
    """
    if preferred_chain:
        for option in challenge.accepts:
            if resolve_chain_id(option.network) == preferred_chain:
                return option
    return challenge.accepts[0]


def build_payment_plan(option: PaymentOption, chain: ChainIdentity) -> TransactionRequest:
    """Translate an option into the gateway ``send`` request that pays it.

    - Solana SPL token: transfer to ``payTo`` with mint and decimals; the
      gateway derives token accounts and builds the instruction.
    - EVM ERC-20: zero-value call to the token contract with
      ``transfer(payTo, amount)`` calldata.
    - Native asset (any chain): plain value transfer to ``payTo``.
    """
    amount = option.max_amount_required
    token = option.token
    if token and chain.is_account_based:
        return TransactionRequest(
            to=option.pay_to,
            value=amount,
            chain_id=chain.chain_id,
            token_mint=token,
            token_decimals=option.required_decimals,
        )
    if token:
        return TransactionRequest(
            to=token,
            value="0",
            chain_id=chain.chain_id,
            data=encode_transfer(option.pay_to, amount),
        )
    return TransactionRequest(to=option.pay_to, value=amount, chain_id=chain.chain_id)


__all__ = [
    "DEFAULT_REQUIRED_DECIMALS",
    "SKIP_X402_HEADER",
    "X402_VERSION",
    "X_PAYMENT_HEADER",
    "PaymentChallenge",
    "PaymentExtra",
    "PaymentOption",
    "PaymentProof",
    "build_payment_plan",
    "parse_gateway_challenge",
    "parse_challenge",
    "select_option",
]
