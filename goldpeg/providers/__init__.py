from .base import (
    ACCOUNTS_CHANGED,
    CHAIN_CHANGED,
    UNRECOGNIZED_CHAIN,
    USER_REJECTED_REQUEST,
    EventEmitterMixin,
    ProviderRpcError,
    WalletProvider,
)
from .http import HttpRpcProvider

__all__ = [
    "ACCOUNTS_CHANGED",
    "CHAIN_CHANGED",
    "UNRECOGNIZED_CHAIN",
    "USER_REJECTED_REQUEST",
    "EventEmitterMixin",
    "ProviderRpcError",
    "WalletProvider",
    "HttpRpcProvider",
]
