"""
x402 payment orchestrator

Fetches a URL and, when the server answers ``402 Payment Required``, pays
the challenge from a custodial wallet and retries the request once with the
``X-PAYMENT`` proof.

Flow:
    request -> 402? -> parse challenge -> select option -> resolve chain
    -> enforce max_payment -> gateway send -> proof -> settle wait -> retry

Example usage:
    ```python
    async with AgentWalletClient(username="me", password="app-password") as client:
        payer = X402Payer(client.wallets)
        result = await payer.pay("https://api.example.com/report", wallet_id=7,
                                 max_payment="0.50", prefer_chain=8453)
    ```
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional, Protocol, Union

import httpx

from .chains import ChainIdentity, require_chain
from .config import AgentWalletConfig, get_config
from .errors import (
    AgentWalletError,
    NetworkError,
    PaymentExecutionError,
    PaymentTimeoutError,
)
from .guard import guard_url
from .models import TransactionRequest, TransactionResult, X402PaymentResult
from .units import check_amount, to_raw_units
from .x402 import (
    X_PAYMENT_HEADER,
    PaymentChallenge,
    PaymentOption,
    PaymentProof,
    build_payment_plan,
    parse_challenge,
    select_option,
)

logger = logging.getLogger(__name__)


class PaymentGateway(Protocol):
    """Anything that can sign and broadcast a payment from a wallet."""

    async def send(
        self,
        wallet_id: int,
        tx: TransactionRequest,
        skip_x402: bool = False,
    ) -> TransactionResult: ...


def _short(address: Optional[str]) -> str:
    if not address or len(address) <= 12:
        return address or ""
    return f"{address[:6]}...{address[-4:]}"


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class X402Payer:
    """
    Pays x402 challenges through the wallet gateway.

    Args:
        gateway: Object with an async ``send(wallet_id, tx, skip_x402)``,
            normally ``AgentWalletClient.wallets``
        config: Timeout and settlement delays (default: global config)
        transport: Optional httpx transport for the resource-server leg
    """

    def __init__(
        self,
        gateway: PaymentGateway,
        config: Optional[AgentWalletConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._gateway = gateway
        self._config = config or get_config()
        self._transport = transport

    async def pay(
        self,
        url: str,
        wallet_id: int,
        method: str = "GET",
        headers: Optional[dict[str, str]] = None,
        body: Optional[Union[str, bytes]] = None,
        max_payment: Optional[str] = None,
        prefer_chain: Optional[int] = None,
    ) -> X402PaymentResult:
        """Fetch ``url``, paying an x402 challenge if one is returned.

        Args:
            url: Public HTTPS URL of the paid resource
            wallet_id: Gateway wallet to pay from
            method: HTTP method
            headers: Extra request headers
            body: Request body; ignored for GET
            max_payment: Human-readable cap on the payment (e.g. ``"1.00"``)
            prefer_chain: Chain ID to prefer when several options are offered

        Returns:
            X402PaymentResult describing the final response and any payment

        Raises:
            BlockedDestinationError / UnsupportedSchemeError: Unsafe URL
            InvalidAmountError: ``max_payment`` is not a plain decimal
            MalformedChallengeError: 402 body is not a usable challenge
            UnresolvedChainError: Selected option's network is unknown
            PaymentExecutionError: Gateway failed to pay
            PaymentTimeoutError: A network leg ran past ``timeout_seconds``
            NetworkError: The resource server could not be reached
        """
        guard_url(url)
        if max_payment:
            check_amount(max_payment)
        method = method.upper()

        request_headers = {"Accept": "application/json", **(headers or {})}
        content = None
        if body and method != "GET":
            content = body
            if not any(key.lower() == "content-type" for key in request_headers):
                request_headers["Content-Type"] = "application/json"

        async with httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            transport=self._transport,
        ) as http:
            response = await self._fetch(http, method, url, request_headers, content)
            if response.status_code != 402:
                return X402PaymentResult(
                    status=response.status_code,
                    payment_required=False,
                    response=_parse_body(response),
                )

            challenge = parse_challenge(response.content)
            option = select_option(challenge, prefer_chain)
            chain = require_chain(option.network)
            logger.info(
                f"x402 challenge from {url}: {option.amount} {option.token_name} "
                f"on {option.network} (chain {chain.chain_id}) to {_short(option.pay_to)}"
            )

            if max_payment and not self._within_limit(option, max_payment):
                logger.warning(
                    f"x402 payment of {option.amount} {option.token_name} refused: "
                    f"above max_payment {max_payment}"
                )
                return self._limit_exceeded(option, chain, max_payment)

            tx_hash = await self._execute(wallet_id, option, chain, challenge)
            proof = PaymentProof.for_option(option, tx_hash, challenge.x402_version)

            delay = self._config.settlement_delay(chain.chain_id)
            if delay > 0:
                logger.debug(f"Waiting {delay:g}s for {tx_hash} to settle")
                await asyncio.sleep(delay)

            retry_headers = {**request_headers, X_PAYMENT_HEADER: proof.encode()}
            retry = await self._fetch(http, method, url, retry_headers, content)
            logger.info(f"x402 retry for {url} returned {retry.status_code}")

        return X402PaymentResult(
            status=retry.status_code,
            payment_required=True,
            payment_made=True,
            amount=option.amount,
            token=option.asset_name,
            token_address=option.token,
            network=option.network,
            chain_id=chain.chain_id,
            pay_to=option.pay_to,
            tx_hash=tx_hash,
            description=option.description,
            response=_parse_body(retry),
        )

    async def _fetch(
        self,
        http: httpx.AsyncClient,
        method: str,
        url: str,
        headers: dict[str, str],
        content: Optional[Union[str, bytes]],
    ) -> httpx.Response:
        # httpx timeouts bound each read; wait_for bounds the whole leg
        timeout = self._config.timeout_seconds
        try:
            return await asyncio.wait_for(
                http.request(method, url, headers=headers, content=content),
                timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise PaymentTimeoutError("resource server", timeout) from e
        except httpx.RequestError as e:
            raise NetworkError("resource server", str(e) or type(e).__name__) from e

    @staticmethod
    def _within_limit(option: PaymentOption, max_payment: str) -> bool:
        max_raw = to_raw_units(max_payment, option.required_decimals)
        return int(option.max_amount_required) <= int(max_raw)

    @staticmethod
    def _limit_exceeded(
        option: PaymentOption,
        chain: ChainIdentity,
        max_payment: str,
    ) -> X402PaymentResult:
        return X402PaymentResult(
            status=402,
            payment_required=True,
            payment_made=False,
            error=(
                f"Payment of {option.amount} {option.extra_name or 'tokens'} exceeds your "
                f"max_payment limit of {max_payment}"
            ),
            required_amount=option.amount,
            max_allowed=max_payment,
            token=option.asset_name,
            network=option.network,
            chain_id=chain.chain_id,
            pay_to=option.pay_to,
            description=option.description,
        )

    async def _execute(
        self,
        wallet_id: int,
        option: PaymentOption,
        chain: ChainIdentity,
        challenge: PaymentChallenge,
    ) -> str:
        """Send the payment and return its settlement id."""
        plan = build_payment_plan(option, chain)
        timeout = self._config.timeout_seconds
        try:
            result = await asyncio.wait_for(
                self._gateway.send(wallet_id, plan, skip_x402=True),
                timeout,
            )
        except asyncio.TimeoutError as e:
            raise PaymentTimeoutError("wallet gateway", timeout) from e
        except PaymentTimeoutError:
            raise
        except AgentWalletError as e:
            logger.error(f"x402 payment from wallet {wallet_id} failed: {e.message}")
            raise PaymentExecutionError(e.message, challenge.error) from e

        tx_hash = result.settlement_id(chain)
        if not tx_hash:
            raise PaymentExecutionError("no transaction hash returned", challenge.error)
        logger.info(f"x402 payment sent from wallet {wallet_id}: {tx_hash}")
        return tx_hash


def parse_headers(headers: Union[str, dict[str, Any], None]) -> dict[str, str]:
    """Normalise tool-supplied headers: a JSON object string or a dict."""
    if headers is None or headers == "":
        return {}
    if isinstance(headers, str):
        try:
            headers = json.loads(headers)
        except ValueError as exc:
            raise ValueError(
                'Invalid headers JSON. Must be a JSON object (e.g. {"Authorization": "Bearer ..."}).'
            ) from exc
    if not isinstance(headers, dict):
        raise ValueError("headers must be a JSON object")
    return {str(key): str(value) for key, value in headers.items()}


__all__ = ["PaymentGateway", "X402Payer", "parse_headers"]
