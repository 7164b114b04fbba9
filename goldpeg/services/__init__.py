"""Service layer helpers"""

from .token import DashboardSnapshot, TokenService, TransactionOutcome

__all__ = [
    "DashboardSnapshot",
    "TokenService",
    "TransactionOutcome",
]
