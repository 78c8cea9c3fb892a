"""
AgentWallet gateway client

Async client for the custodial AgentWallet REST API. Wallet keys never leave
the gateway: this client only asks it to create wallets, sign and broadcast
transactions, run ``eth_call`` and manage x402 paywalls.

Example usage:
    ```python
    from agentwallet import AgentWalletClient

    async with AgentWalletClient(username="me", password="app-password") as client:
        wallet = await client.wallets.create(label="research-agent", chain_id=8453)
        result = await client.tokens.transfer(wallet["id"], "0xabc...", "0.01", 8453)
    ```
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any, Optional

import httpx

from . import __version__
from .chains import require_chain
from .config import AgentWalletConfig, get_config
from .errors import (
    AgentWalletError,
    APIError,
    AuthenticationError,
    NetworkError,
    PaymentExecutionError,
    PaymentTimeoutError,
)
from .resources.account import AccountResource
from .resources.paywalls import PaywallsResource
from .resources.tokens import TokensResource
from .resources.wallets import WalletsResource
from .x402 import (
    SKIP_X402_HEADER,
    X_PAYMENT_HEADER,
    PaymentProof,
    build_payment_plan,
    parse_gateway_challenge,
)

logger = logging.getLogger(__name__)


class AgentWalletClient:
    """
    AgentWallet API client.

    Provides access to all gateway resources:
    - wallets: Create, inspect, pause, sign and send
    - tokens: Native/ERC-20/SPL transfers, approvals, wrapping, eth_call
    - paywalls: Manage x402 paywalls and their revenue
    - account: Usage, supported chains, verification credits

    If ``x402_wallet_id`` is set and the gateway itself answers ``402``, the
    client pays the challenge from that wallet and retries the call once.

    Args:
        base_url: Gateway base URL
        username: WordPress user name
        password: WordPress application password
        timeout: Request timeout in seconds (default: 30)
        x402_wallet_id: Wallet used to pay the gateway's own 402 challenges
        config: Base configuration; explicit arguments take precedence
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        x402_wallet_id: Optional[int] = None,
        config: Optional[AgentWalletConfig] = None,
    ):
        base = config or AgentWalletConfig()
        self._config = replace(
            base,
            api_url=(base_url or base.api_url).rstrip("/"),
            username=username if username is not None else base.username,
            password=password if password is not None else base.password,
            timeout_seconds=timeout if timeout is not None else base.timeout_seconds,
            x402_wallet_id=x402_wallet_id if x402_wallet_id is not None else base.x402_wallet_id,
        )
        self._client: Optional[httpx.AsyncClient] = None

        self.wallets = WalletsResource(self)
        self.tokens = TokensResource(self)
        self.paywalls = PaywallsResource(self)
        self.account = AccountResource(self)

    @classmethod
    def from_config(cls, config: Optional[AgentWalletConfig] = None) -> "AgentWalletClient":
        """Create a client from ``AGENTWALLET_*`` settings."""
        return cls(config=config or get_config())

    @property
    def config(self) -> AgentWalletConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.api_url

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            auth = None
            if self._config.has_credentials:
                auth = httpx.BasicAuth(self._config.username, self._config.password)
            self._client = httpx.AsyncClient(
                base_url=self._config.api_url,
                auth=auth,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "User-Agent": f"agentwallet-python/{__version__}",
                },
                timeout=self._config.timeout_seconds,
            )
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        skip_x402: bool = False,
    ) -> Any:
        """Make an HTTP request to the gateway and return the decoded body."""
        client = await self._get_client()
        request_headers = dict(headers or {})
        if skip_x402:
            request_headers[SKIP_X402_HEADER] = "true"
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        timeout = self._config.timeout_seconds
        try:
            response = await asyncio.wait_for(
                client.request(
                    method=method,
                    url=path,
                    params=params or None,
                    json=json if method != "GET" else None,
                    headers=request_headers or None,
                ),
                timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise PaymentTimeoutError("wallet gateway", timeout) from e
        except httpx.RequestError as e:
            raise NetworkError("wallet gateway", str(e) or type(e).__name__) from e

        if response.status_code == 402 and self._can_autopay(request_headers):
            return await self._pay_gateway_challenge(
                response, method, path, params, json, request_headers
            )

        if response.status_code == 401:
            raise AuthenticationError()

        if response.status_code >= 400:
            raise APIError.from_response(response.status_code, _decode_body(response))

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {"response": response.text}

    def _can_autopay(self, request_headers: dict[str, str]) -> bool:
        return (
            self._config.x402_wallet_id is not None
            and X_PAYMENT_HEADER not in request_headers
            and SKIP_X402_HEADER not in request_headers
        )

    async def _pay_gateway_challenge(
        self,
        response: httpx.Response,
        method: str,
        path: str,
        params: Optional[dict[str, Any]],
        json: Optional[dict[str, Any]],
        request_headers: dict[str, str],
    ) -> Any:
        """Pay a 402 issued by the gateway itself, then retry the call once.

        The gateway quotes its price in human units, unlike resource servers.
        """
        challenge = parse_gateway_challenge(response.content)
        option = challenge.accepts[0]
        chain = require_chain(option.network)
        wallet_id = self._config.x402_wallet_id
        logger.warning(
            f"Gateway requires payment for {method} {path}: "
            f"{option.amount} {option.token_name} on chain {chain.chain_id}, "
            f"paying from wallet {wallet_id}"
        )

        plan = build_payment_plan(option, chain)
        try:
            result = await self.wallets.send(wallet_id, plan, skip_x402=True)
        except PaymentTimeoutError:
            raise
        except AgentWalletError as e:
            raise PaymentExecutionError(e.message, challenge.error) from e

        tx_hash = result.settlement_id(chain)
        if not tx_hash:
            raise PaymentExecutionError("no transaction hash returned", challenge.error)

        proof = PaymentProof.for_option(option, tx_hash, challenge.x402_version)
        delay = self._config.settlement_delay(chain.chain_id)
        if delay > 0:
            await asyncio.sleep(delay)

        retry_headers = {**request_headers, X_PAYMENT_HEADER: proof.encode()}
        return await self._request(method, path, params=params, json=json, headers=retry_headers)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AgentWalletClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"error": response.text or f"HTTP {response.status_code}"}


__all__ = ["AgentWalletClient"]
