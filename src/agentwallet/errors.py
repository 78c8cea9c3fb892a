"""Error models for the AgentWallet client and x402 payer."""
from __future__ import annotations

from typing import Any, Optional


class AgentWalletError(Exception):
    """Base exception for AgentWallet."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "AGENTWALLET_ERROR"
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class InvalidAmountError(AgentWalletError):
    """Amount string is not a plain non-negative decimal."""

    def __init__(self, amount: str):
        super().__init__(
            f'Invalid amount "{amount}". Must be a positive number (e.g. "0.1" or "100").',
            code="INVALID_AMOUNT",
            details={"amount": amount},
        )
        self.amount = amount


class InvalidAddressError(AgentWalletError):
    """Address is neither 0x-prefixed hex nor Base58."""

    def __init__(self, address: str, field: str = "address"):
        super().__init__(
            f'Invalid {field} "{address}". Use 0x-prefixed hex for EVM or Base58 for Solana.',
            code="INVALID_ADDRESS",
            details={"field": field, "address": address},
        )
        self.address = address
        self.field = field


class UnresolvedChainError(AgentWalletError):
    """Network identifier matches no known chain."""

    def __init__(self, network: str, supported: Optional[list[str]] = None):
        message = f'Unsupported x402 network: "{network}".'
        if supported:
            message += (
                f" Supported: {', '.join(supported)}, or any CAIP-2 / numeric chain ID."
            )
        super().__init__(message, code="UNRESOLVED_CHAIN", details={"network": network})
        self.network = network


class UnsupportedChainOperationError(AgentWalletError):
    """Operation only exists on EVM chains."""

    def __init__(self, operation: str, chain_id: int, hint: str = ""):
        message = f"{operation} is not supported on chain {chain_id}."
        if hint:
            message = f"{message} {hint}"
        super().__init__(
            message,
            code="UNSUPPORTED_CHAIN_OPERATION",
            details={"operation": operation, "chain_id": chain_id},
        )
        self.operation = operation
        self.chain_id = chain_id


class MalformedChallengeError(AgentWalletError):
    """402 body is not a usable x402 challenge."""

    def __init__(self, message: str):
        super().__init__(message, code="MALFORMED_CHALLENGE")


class BlockedDestinationError(AgentWalletError):
    """URL points to a private, loopback or metadata host."""

    def __init__(self, hostname: str):
        super().__init__(
            "URL points to a private/internal address. Only public URLs are allowed.",
            code="BLOCKED_DESTINATION",
            details={"hostname": hostname},
        )
        self.hostname = hostname


class UnsupportedSchemeError(AgentWalletError):
    """URL scheme is not https."""

    def __init__(self, scheme: str):
        super().__init__(
            "Only HTTPS URLs are supported for x402 payments.",
            code="UNSUPPORTED_SCHEME",
            details={"scheme": scheme},
        )
        self.scheme = scheme


class PaymentExecutionError(AgentWalletError):
    """The wallet gateway failed to execute an x402 payment.

    Keeps the gateway failure and the resource server's original challenge
    error apart so callers can report either one.
    """

    def __init__(self, gateway_error: str, challenge_error: Optional[str] = None):
        message = f"x402 auto-pay failed: {gateway_error}."
        if challenge_error:
            message += f" Original error: {challenge_error}"
        super().__init__(
            message,
            code="PAYMENT_EXECUTION_FAILED",
            details={"gateway_error": gateway_error, "challenge_error": challenge_error},
        )
        self.gateway_error = gateway_error
        self.challenge_error = challenge_error


class PaymentTimeoutError(AgentWalletError):
    """A network leg exceeded its time bound."""

    def __init__(self, leg: str, timeout: float):
        super().__init__(
            f"{leg} request timed out after {timeout:g}s",
            code="TIMEOUT",
            details={"leg": leg, "timeout": timeout},
        )
        self.leg = leg
        self.timeout = timeout


class NetworkError(AgentWalletError):
    """A network leg failed before any response arrived (DNS, TLS, refused)."""

    def __init__(self, leg: str, reason: str):
        super().__init__(
            f"{leg} request failed: {reason}",
            code="NETWORK_ERROR",
            details={"leg": leg, "reason": reason},
        )
        self.leg = leg
        self.reason = reason


class ConfigurationError(AgentWalletError):
    """Missing or invalid configuration."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIGURATION_ERROR")


class APIError(AgentWalletError):
    """Error from a wallet gateway response."""

    def __init__(
        self,
        message: str,
        status_code: int,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code or "API_ERROR", details)
        self.status_code = status_code

    @classmethod
    def from_response(cls, status_code: int, body: Any) -> "APIError":
        """Create APIError from an HTTP error body."""
        if not isinstance(body, dict):
            return cls(message=f"HTTP {status_code}", status_code=status_code)
        error_data = body.get("error") or body.get("message") or body.get("detail")
        if isinstance(error_data, str):
            return cls(
                message=error_data,
                status_code=status_code,
                code=str(body.get("code") or "API_ERROR"),
            )
        if isinstance(error_data, dict):
            return cls(
                message=error_data.get("message", f"HTTP {status_code}"),
                status_code=status_code,
                code=error_data.get("code", "API_ERROR"),
                details=error_data.get("details"),
            )
        return cls(message=f"HTTP {status_code}", status_code=status_code)


class AuthenticationError(APIError):
    """Authentication error."""

    def __init__(self, message: str = "Invalid or missing AgentWallet credentials"):
        super().__init__(message, status_code=401, code="AUTHENTICATION_ERROR")


__all__ = [
    "AgentWalletError",
    "APIError",
    "AuthenticationError",
    "BlockedDestinationError",
    "ConfigurationError",
    "InvalidAddressError",
    "InvalidAmountError",
    "MalformedChallengeError",
    "NetworkError",
    "PaymentExecutionError",
    "PaymentTimeoutError",
    "UnresolvedChainError",
    "UnsupportedChainOperationError",
    "UnsupportedSchemeError",
]
