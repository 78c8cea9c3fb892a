"""
Configuration management for agentwallet.

Provides centralized configuration for:
- Wallet gateway endpoint and credentials
- The wallet used to auto-pay the gateway's own x402 challenges
- Network timeouts
- Settlement delays before an x402 retry

Supports loading from environment variables with prefix AGENTWALLET_.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from .chains import is_account_based
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://hifriendbot.com/wp-json/agentwallet/v1"


@dataclass
class AgentWalletConfig:
    """Settings for the gateway client and the x402 payer."""
    api_url: str = DEFAULT_API_URL
    username: str = ""
    password: str = ""  # WordPress application password

    # Wallet ID used to pay 402 challenges issued by the gateway itself
    x402_wallet_id: Optional[int] = None

    # Bound for every network leg (resource server and gateway)
    timeout_seconds: float = 30.0

    # Wait between payment broadcast and the x402 retry
    evm_settlement_delay_seconds: float = 3.0
    account_settlement_delay_seconds: float = 8.0

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    def settlement_delay(self, chain_id: int) -> float:
        """Seconds to let a payment land before the resource server re-checks it."""
        if is_account_based(chain_id):
            return self.account_settlement_delay_seconds
        return self.evm_settlement_delay_seconds

    @classmethod
    def from_env(cls) -> "AgentWalletConfig":
        """Build configuration from ``AGENTWALLET_*`` environment variables."""
        wallet_id = _get_env("WALLET_ID")
        return cls(
            api_url=_get_env("API_URL", DEFAULT_API_URL),
            username=_get_env("USER", ""),
            password=_get_env("PASS", ""),
            x402_wallet_id=_parse_int("WALLET_ID", wallet_id) if wallet_id else None,
            timeout_seconds=_get_env_float("TIMEOUT", 30.0),
            evm_settlement_delay_seconds=_get_env_float("EVM_SETTLEMENT_DELAY", 3.0),
            account_settlement_delay_seconds=_get_env_float("ACCOUNT_SETTLEMENT_DELAY", 8.0),
        )


def _get_env(key: str, default: Any = None, prefix: str = "AGENTWALLET_") -> Any:
    """Get environment variable with prefix."""
    return os.getenv(f"{prefix}{key}", default)


def _get_env_float(key: str, default: float) -> float:
    value = _get_env(key)
    if value is None or value == "":
        return default
    try:
        result = float(value)
    except ValueError as exc:
        raise ConfigurationError(f"AGENTWALLET_{key} must be a number, got {value!r}") from exc
    if result < 0:
        raise ConfigurationError(f"AGENTWALLET_{key} must not be negative")
    return result


def _parse_int(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"AGENTWALLET_{key} must be an integer, got {value!r}") from exc


# Global configuration instance
_global_config: Optional[AgentWalletConfig] = None


def get_config() -> AgentWalletConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = AgentWalletConfig.from_env()
        if not _global_config.has_credentials:
            logger.warning("AGENTWALLET_USER/AGENTWALLET_PASS not set; gateway calls are unauthenticated")
    return _global_config


def set_config(config: Optional[AgentWalletConfig]) -> None:
    """Set (or with ``None``, reset) the global configuration instance."""
    global _global_config
    _global_config = config


__all__ = ["AgentWalletConfig", "DEFAULT_API_URL", "get_config", "set_config"]
