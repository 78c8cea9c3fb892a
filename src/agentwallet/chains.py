"""Chain identification for x402 networks and wallet operations.

Resolves the network strings found in x402 challenges (plain names, CAIP-2
identifiers and bare chain IDs) to the numeric chain IDs the wallet gateway
understands, and classifies chains into EVM and account-based families.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional

from .errors import UnresolvedChainError

logger = logging.getLogger(__name__)


class ChainFamily(str, Enum):
    """How a chain moves value: contract calldata or native instructions."""
    EVM = "evm"
    ACCOUNT_BASED = "account-based"


@dataclass(frozen=True)
class ChainIdentity:
    """A resolved chain: numeric ID plus family."""

    chain_id: int
    family: ChainFamily

    @property
    def is_account_based(self) -> bool:
        return self.family is ChainFamily.ACCOUNT_BASED


class WrappedNative(NamedTuple):
    address: str
    symbol: str


X402_NETWORKS: Mapping[str, int] = MappingProxyType({
    "ethereum": 1,
    "base": 8453,
    "base-sepolia": 84532,
    "polygon": 137,
    "arbitrum": 42161,
    "optimism": 10,
    "bsc": 56,
    "avalanche": 43114,
    "zora": 7777777,
    "pulsechain": 369,
    "solana": 900,
    "solana-devnet": 901,
})

# Solana CAIP-2 references are genesis hash prefixes
SOLANA_GENESIS: Mapping[str, int] = MappingProxyType({
    "5eykt4UsFv8P8NJdTREpY1vzqKqZKvdp": 900,  # mainnet-beta
    "EtWTRABZaYq6iMfeYKouRu166VU2xqa1": 901,  # devnet
})

ACCOUNT_BASED_CHAIN_IDS: frozenset[int] = frozenset({900, 901, 902})

WRAPPED_NATIVE: Mapping[int, WrappedNative] = MappingProxyType({
    1: WrappedNative("0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2", "WETH"),
    8453: WrappedNative("0x4200000000000000000000000000000000000006", "WETH"),
    42161: WrappedNative("0x82aF49447D8a07e3bd95BD0d56f35241523fBab1", "WETH"),
    10: WrappedNative("0x4200000000000000000000000000000000000006", "WETH"),
    137: WrappedNative("0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270", "WPOL"),
    56: WrappedNative("0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c", "WBNB"),
    43114: WrappedNative("0xB31f66AA3C1e785363F0875A1B74E27b85FD66c7", "WAVAX"),
    7777777: WrappedNative("0x4200000000000000000000000000000000000006", "WETH"),
    369: WrappedNative("0xA1077a294dDE1B09bB078844df40758a5D0f9a27", "WPLS"),
})

EVM_NATIVE_DECIMALS = 18
ACCOUNT_NATIVE_DECIMALS = 9

_CAIP2_RE = re.compile(r"^([-a-z0-9]{3,8}):([-_a-zA-Z0-9]{1,64})$")
_EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
_BASE58_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


def _positive_int(text: str) -> Optional[int]:
    if text.isascii() and text.isdigit() and int(text) > 0:
        return int(text)
    return None


def family_of(chain_id: int) -> ChainFamily:
    if chain_id in ACCOUNT_BASED_CHAIN_IDS:
        return ChainFamily.ACCOUNT_BASED
    return ChainFamily.EVM


def is_account_based(chain_id: int) -> bool:
    return chain_id in ACCOUNT_BASED_CHAIN_IDS


def _identity(chain_id: int) -> ChainIdentity:
    return ChainIdentity(chain_id=chain_id, family=family_of(chain_id))


def resolve_chain(identifier: str) -> Optional[ChainIdentity]:
    """Resolve an x402 network identifier.

    Tries, in order: the name table (case-insensitive), CAIP-2
    ``eip155:<id>`` / ``solana:<genesis>``, then a bare positive integer.
    Returns ``None`` for anything else; never raises on malformed input.
    """
    if not isinstance(identifier, str):
        return None
    network = identifier.strip()
    if not network:
        return None

    named = X402_NETWORKS.get(network.lower())
    if named is not None:
        return _identity(named)

    caip = _CAIP2_RE.match(network)
    if caip:
        namespace, reference = caip.groups()
        if namespace == "eip155":
            chain_id = _positive_int(reference)
            return _identity(chain_id) if chain_id is not None else None
        if namespace == "solana":
            genesis_id = SOLANA_GENESIS.get(reference)
            return _identity(genesis_id) if genesis_id is not None else None
        return None

    chain_id = _positive_int(network)
    if chain_id is not None:
        return _identity(chain_id)
    logger.debug(f"Unresolvable network identifier: {network!r}")
    return None


def require_chain(identifier: str) -> ChainIdentity:
    """Like :func:`resolve_chain` but raises ``UnresolvedChainError``."""
    chain = resolve_chain(identifier)
    if chain is None:
        raise UnresolvedChainError(identifier, supported=list(X402_NETWORKS))
    return chain


def resolve_chain_id(identifier: str) -> Optional[int]:
    chain = resolve_chain(identifier)
    return chain.chain_id if chain else None


def native_decimals(chain_id: int) -> int:
    """Decimals of the native asset: lamports for Solana, wei for EVM."""
    return ACCOUNT_NATIVE_DECIMALS if is_account_based(chain_id) else EVM_NATIVE_DECIMALS


def get_wrapped_native(chain_id: int) -> Optional[WrappedNative]:
    return WRAPPED_NATIVE.get(chain_id)


def is_valid_address(address: str) -> bool:
    """Accept EVM (``0x`` + 40 hex) and Solana (Base58, 32-44 chars) addresses."""
    if not isinstance(address, str):
        return False
    return bool(_EVM_ADDRESS_RE.match(address) or _BASE58_ADDRESS_RE.match(address))


def is_evm_address(address: str) -> bool:
    return isinstance(address, str) and bool(_EVM_ADDRESS_RE.match(address))


__all__ = [
    "ACCOUNT_BASED_CHAIN_IDS",
    "ChainFamily",
    "ChainIdentity",
    "SOLANA_GENESIS",
    "WRAPPED_NATIVE",
    "WrappedNative",
    "X402_NETWORKS",
    "family_of",
    "get_wrapped_native",
    "is_account_based",
    "is_evm_address",
    "is_valid_address",
    "native_decimals",
    "require_chain",
    "resolve_chain",
    "resolve_chain_id",
]
