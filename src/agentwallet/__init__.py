"""
AgentWallet Python SDK

Custodial wallets and x402 payments for AI agents: create EVM and Solana
wallets on a remote gateway, move native and token value, and pay
``402 Payment Required`` challenges automatically.
"""

__version__ = "1.7.0"

from .client import AgentWalletClient
from .config import AgentWalletConfig, get_config, set_config
from .errors import (
    AgentWalletError,
    APIError,
    AuthenticationError,
    BlockedDestinationError,
    ConfigurationError,
    InvalidAddressError,
    InvalidAmountError,
    MalformedChallengeError,
    NetworkError,
    PaymentExecutionError,
    PaymentTimeoutError,
    UnresolvedChainError,
    UnsupportedChainOperationError,
    UnsupportedSchemeError,
)
from .chains import ChainFamily, ChainIdentity, require_chain, resolve_chain
from .handlers import AgentWalletToolHandler
from .models import TransactionRequest, TransactionResult, X402PaymentResult
from .payments import X402Payer
from .tools import ALL_TOOLS, READ_ONLY_TOOLS, TOOL_NAMES
from .units import from_raw_units, to_raw_units
from .x402 import PaymentChallenge, PaymentOption, PaymentProof

__all__ = [
    # Client
    "AgentWalletClient",
    "X402Payer",
    # Config
    "AgentWalletConfig",
    "get_config",
    "set_config",
    # Errors
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
    # Chains and amounts
    "ChainFamily",
    "ChainIdentity",
    "require_chain",
    "resolve_chain",
    "from_raw_units",
    "to_raw_units",
    # Models
    "TransactionRequest",
    "TransactionResult",
    "X402PaymentResult",
    "PaymentChallenge",
    "PaymentOption",
    "PaymentProof",
    # Agent tools
    "AgentWalletToolHandler",
    "ALL_TOOLS",
    "READ_ONLY_TOOLS",
    "TOOL_NAMES",
]
