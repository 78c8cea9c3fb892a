"""Fixed-selector ABI calldata for the handful of contract calls we make.

Only static argument layouts are supported: every argument is a 32-byte
word, either an address or a uint256. The output is opaque ``0x`` calldata
for the wallet gateway's ``send``/``sign``/``eth-call`` endpoints.
"""
from __future__ import annotations

from enum import Enum
from typing import Union

from .units import MAX_UINT256


class ArgType(str, Enum):
    ADDRESS = "address"
    UINT256 = "uint256"


class ContractCall(Enum):
    """Closed set of contract calls: ``(selector, argument layout)``."""

    TRANSFER = ("a9059cbb", (ArgType.ADDRESS, ArgType.UINT256))
    APPROVE = ("095ea7b3", (ArgType.ADDRESS, ArgType.UINT256))
    ALLOWANCE = ("dd62ed3e", (ArgType.ADDRESS, ArgType.ADDRESS))
    DEPOSIT = ("d0e30db0", ())
    WITHDRAW = ("2e1a7d4d", (ArgType.UINT256,))
    NAME = ("06fdde03", ())
    SYMBOL = ("95d89b41", ())
    DECIMALS = ("313ce567", ())

    def __init__(self, selector: str, layout: tuple[ArgType, ...]):
        self.selector = selector
        self.layout = layout

    @property
    def signature(self) -> str:
        return f"{self.name.lower()}({','.join(arg.value for arg in self.layout)})"


def pad_address(address: str) -> str:
    """Left-pad a 20-byte address to a 32-byte word (64 hex chars)."""
    return address.lower().removeprefix("0x").zfill(64)


def encode_uint256(value: Union[int, str]) -> str:
    """Encode a non-negative integer as a 32-byte word."""
    number = int(value)
    if number < 0 or number > MAX_UINT256:
        raise ValueError(f"uint256 out of range: {value}")
    return format(number, "x").zfill(64)


def encode_call(call: ContractCall, *args: Union[str, int]) -> str:
    """Build ``0x``-prefixed calldata for ``call`` with positional ``args``."""
    if len(args) != len(call.layout):
        raise ValueError(
            f"{call.signature} takes {len(call.layout)} argument(s), got {len(args)}"
        )
    words = []
    for arg_type, arg in zip(call.layout, args):
        if arg_type is ArgType.ADDRESS:
            words.append(pad_address(str(arg)))
        else:
            words.append(encode_uint256(arg))
    return "0x" + call.selector + "".join(words)


def encode_transfer(to: str, raw_amount: Union[int, str]) -> str:
    return encode_call(ContractCall.TRANSFER, to, raw_amount)


def encode_approve(spender: str, raw_amount: Union[int, str]) -> str:
    return encode_call(ContractCall.APPROVE, spender, raw_amount)


def encode_allowance(owner: str, spender: str) -> str:
    return encode_call(ContractCall.ALLOWANCE, owner, spender)


def encode_deposit() -> str:
    return encode_call(ContractCall.DEPOSIT)


def encode_withdraw(raw_amount: Union[int, str]) -> str:
    return encode_call(ContractCall.WITHDRAW, raw_amount)


def decode_uint256(hex_result: str) -> int:
    """Decode an ``eth_call`` uint256 result; ``"0x"`` decodes to 0."""
    clean = (hex_result or "").removeprefix("0x")
    return int(clean, 16) if clean else 0


def decode_abi_string(hex_result: str) -> str:
    """Decode a dynamic ``string`` return value.

    Token contracts in the wild return all sorts of things for ``name()``
    and ``symbol()``, so any malformed input yields ``""``.
    """
    try:
        clean = (hex_result or "").removeprefix("0x")
        if len(clean) < 128:
            return ""
        offset = int(clean[:64], 16) * 2
        if offset + 64 > len(clean):
            return ""
        length = int(clean[offset:offset + 64], 16)
        if length == 0:
            return ""
        data = clean[offset + 64:offset + 64 + length * 2]
        return bytes.fromhex(data).decode("utf-8", errors="replace")
    except ValueError:
        return ""


__all__ = [
    "ArgType",
    "ContractCall",
    "decode_abi_string",
    "decode_uint256",
    "encode_allowance",
    "encode_approve",
    "encode_call",
    "encode_deposit",
    "encode_transfer",
    "encode_uint256",
    "encode_withdraw",
    "pad_address",
]
