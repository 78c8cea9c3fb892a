"""Exact conversion between human-readable token amounts and raw units.

Amounts travel as strings end to end. Nothing here touches ``float`` or
``Decimal`` arithmetic: the fraction is truncated or padded as text and the
result is handed to ``int`` once, so ``"0.1"`` at 6 decimals is always
``"100000"``.
"""
from __future__ import annotations

import re

from .errors import InvalidAmountError

MAX_UINT256 = 2**256 - 1

_AMOUNT_RE = re.compile(r"^\d+(\.\d+)?$")
_RAW_RE = re.compile(r"^\d+$")


def check_amount(amount: str) -> str:
    """Return ``amount`` if it is a plain non-negative decimal string.

    Raises:
        InvalidAmountError: Same rules as :func:`to_raw_units`.
    """
    if not isinstance(amount, str) or not _AMOUNT_RE.match(amount):
        raise InvalidAmountError(str(amount))
    return amount


def to_raw_units(amount: str, decimals: int) -> str:
    """Convert ``amount`` (e.g. ``"0.1"``) to raw units at ``decimals``.

    Extra fractional digits are truncated, never rounded up, so an agent is
    never charged more than the amount it was shown.

    Raises:
        InvalidAmountError: If ``amount`` is signed, empty, uses exponent
            notation or is otherwise not a plain decimal.
    """
    check_amount(amount)
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    whole, _, frac = amount.partition(".")
    frac_padded = frac[:decimals].ljust(decimals, "0")
    return str(int(whole + frac_padded))


def from_raw_units(raw: str | int, decimals: int) -> str:
    """Format raw units as a human-readable decimal string.

    Trailing fractional zeros are trimmed but one fractional digit is always
    kept: ``from_raw_units("1000000", 6) == "1.0"``.
    """
    raw_str = str(raw)
    if not _RAW_RE.match(raw_str):
        raise InvalidAmountError(raw_str)
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    padded = raw_str.zfill(decimals + 1)
    split = len(padded) - decimals
    whole = padded[:split].lstrip("0") or "0"
    frac = padded[split:].rstrip("0") or "0"
    return f"{whole}.{frac}"


def parse_approval_amount(amount: str, decimals: int) -> str:
    """Raw approval amount; ``"max"`` means unlimited (``2**256 - 1``)."""
    if amount.strip().lower() == "max":
        return str(MAX_UINT256)
    return to_raw_units(amount, decimals)


def is_unlimited(raw: str | int) -> bool:
    return int(raw) == MAX_UINT256


__all__ = [
    "MAX_UINT256",
    "check_amount",
    "from_raw_units",
    "is_unlimited",
    "parse_approval_amount",
    "to_raw_units",
]
