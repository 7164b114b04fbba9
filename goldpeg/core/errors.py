"""
Error Taxonomy

Errors raised by the wallet session and price feed layers.
Configuration and provider-absence errors are fatal to the requested
operation; RPC failures are transient and retried by the next poll cycle.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Categories of errors for propagation decisions."""

    PROVIDER = "provider"             # No wallet injected / provider failure
    AUTHORIZATION = "authorization"   # User declined
    CONFIGURATION = "configuration"   # Missing ABI or address
    NETWORK = "network"               # Chain switch / registration
    RPC = "rpc"                       # Remote call failure
    PRICE = "price"                   # No price source answered
    TRANSACTION = "transaction"       # Mined but failed
    STATE = "state"                   # Illegal session transition


@dataclass
class ErrorContext:
    """Additional context about an error."""

    category: ErrorCategory
    recoverable: bool = False
    chain_id: Optional[int] = None
    provider_code: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)


class GoldpegError(Exception):
    """Base class for all client errors."""

    category: ErrorCategory = ErrorCategory.PROVIDER
    recoverable: bool = False

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext(
            category=self.category,
            recoverable=self.recoverable,
        )


class NoProviderError(GoldpegError):
    """No wallet provider is available in the environment."""

    category = ErrorCategory.PROVIDER

    def __init__(self, message: str = "No wallet provider available; install a wallet to continue"):
        super().__init__(message)


class UserRejectedError(GoldpegError):
    """The user declined account access or no account was returned."""

    category = ErrorCategory.AUTHORIZATION

    def __init__(self, message: str = "User rejected the wallet connection request"):
        super().__init__(message)


class ConfigurationError(GoldpegError):
    """A contract is missing its ABI or address."""

    category = ErrorCategory.CONFIGURATION

    def __init__(self, message: str, contract: Optional[str] = None):
        super().__init__(
            message,
            ErrorContext(
                category=self.category,
                details={"contract": contract} if contract else {},
            ),
        )
        self.contract = contract


class ChainSwitchError(GoldpegError):
    """The wallet rejected a chain switch or registration."""

    category = ErrorCategory.NETWORK

    def __init__(
        self,
        message: str,
        chain_id: Optional[int] = None,
        provider_code: Optional[int] = None,
    ):
        super().__init__(
            message,
            ErrorContext(
                category=self.category,
                chain_id=chain_id,
                provider_code=provider_code,
            ),
        )
        self.chain_id = chain_id
        self.provider_code = provider_code


class TransactionFailedError(GoldpegError):
    """A submitted transaction was mined with a failure status."""

    category = ErrorCategory.TRANSACTION

    def __init__(self, message: str = "Transaction failed", tx_hash: Optional[str] = None):
        super().__init__(
            message,
            ErrorContext(category=self.category, details={"tx_hash": tx_hash}),
        )
        self.tx_hash = tx_hash


class RpcFailure(GoldpegError):
    """Generic remote-call failure; retried by the next poll, not immediately."""

    category = ErrorCategory.RPC
    recoverable = True

    def __init__(
        self,
        message: str = "RPC call failed",
        method: Optional[str] = None,
        provider_code: Optional[int] = None,
    ):
        super().__init__(
            message,
            ErrorContext(
                category=self.category,
                recoverable=True,
                provider_code=provider_code,
                details={"method": method} if method else {},
            ),
        )
        self.method = method
        self.provider_code = provider_code


class PriceUnavailableError(GoldpegError):
    """Neither price source produced a quote."""

    category = ErrorCategory.PRICE
    recoverable = True

    def __init__(self, message: str = "Failed to fetch gold price"):
        super().__init__(message)


class InvalidSessionTransition(GoldpegError):
    """A session event is not legal in the current state."""

    category = ErrorCategory.STATE

    def __init__(self, from_status: Any, event: Any):
        super().__init__(f"Cannot apply {event} while session is {from_status}")
        self.from_status = from_status
        self.event = event


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "GoldpegError",
    "NoProviderError",
    "UserRejectedError",
    "ConfigurationError",
    "ChainSwitchError",
    "TransactionFailedError",
    "RpcFailure",
    "PriceUnavailableError",
    "InvalidSessionTransition",
]
