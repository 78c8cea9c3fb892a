"""Gateway resource classes."""

from .account import AccountResource
from .base import AsyncBaseResource
from .paywalls import PaywallsResource
from .tokens import TokensResource
from .wallets import WalletsResource

__all__ = [
    "AccountResource",
    "AsyncBaseResource",
    "PaywallsResource",
    "TokensResource",
    "WalletsResource",
]
