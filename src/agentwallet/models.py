"""Wire models shared by the wallet gateway client, the x402 payer and the tools."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .chains import ChainIdentity, is_account_based


class AgentWalletModel(BaseModel):
    """Base model with common configuration."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary."""
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AgentWalletModel":
        """Create model from dictionary."""
        return cls.model_validate(data)


class TransactionRequest(AgentWalletModel):
    """Body of the gateway's ``/wallets/{id}/sign`` and ``/send`` endpoints.

    EVM transactions carry ``data`` (and optional fee overrides); Solana SPL
    transfers carry ``token_mint``/``token_decimals`` and the gateway builds
    the instructions itself.
    """

    to: str
    value: str = "0"
    chain_id: Optional[int] = None
    data: Optional[str] = None
    gas_limit: Optional[str] = None
    max_fee: Optional[str] = None
    priority_fee: Optional[str] = None
    token_mint: Optional[str] = None
    token_decimals: Optional[int] = None

    @classmethod
    def for_chain(
        cls,
        to: str,
        chain_id: Optional[int] = None,
        value: str = "0",
        data: str = "",
        gas_limit: Optional[str] = None,
        max_fee: Optional[str] = None,
        priority_fee: Optional[str] = None,
        token_mint: Optional[str] = None,
        token_decimals: Optional[int] = None,
    ) -> "TransactionRequest":
        """Keep only the fields the target chain family understands."""
        if chain_id is not None and is_account_based(chain_id):
            return cls(
                to=to,
                value=value,
                chain_id=chain_id,
                token_mint=token_mint or None,
                token_decimals=token_decimals,
            )
        return cls(
            to=to,
            value=value,
            chain_id=chain_id or None,
            data=data,
            gas_limit=gas_limit or None,
            max_fee=max_fee or None,
            priority_fee=priority_fee or None,
        )


class TransactionResult(AgentWalletModel):
    """Gateway response to ``send``/``sign``; unknown fields are kept."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    tx_hash: Optional[str] = None
    signature: Optional[str] = None

    def settlement_id(self, chain: Optional[ChainIdentity] = None) -> Optional[str]:
        """Transaction hash (EVM) or signature (Solana) of a broadcast tx."""
        if chain is not None and chain.is_account_based:
            return self.signature or self.tx_hash
        return self.tx_hash or self.signature


class X402PaymentResult(AgentWalletModel):
    """Outcome of one ``pay_x402`` call.

    ``payment_made`` is False both when no payment was required and when the
    required amount was above the caller's ``max_payment``; ``error`` is set
    only in the latter case.
    """

    status: int
    payment_required: bool
    payment_made: bool = False
    amount: Optional[str] = None
    required_amount: Optional[str] = None
    max_allowed: Optional[str] = None
    token: Optional[str] = None
    token_address: Optional[str] = None
    network: Optional[str] = None
    chain_id: Optional[int] = None
    pay_to: Optional[str] = None
    tx_hash: Optional[str] = None
    description: Optional[str] = None
    error: Optional[str] = None
    response: Any = Field(default=None)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.setdefault("response", None)
        return data


__all__ = [
    "AgentWalletModel",
    "TransactionRequest",
    "TransactionResult",
    "X402PaymentResult",
]
