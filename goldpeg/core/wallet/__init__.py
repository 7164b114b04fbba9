"""
Wallet Session Module

- SessionManager: connect/disconnect, wallet event subscriptions
- NetworkReconciler: switch or register the chain in the wallet
- Session / reduce_session: immutable session snapshots and their transitions

Usage:
    from goldpeg.core.wallet import SessionManager

    manager = SessionManager(provider)
    async with manager:
        session = await manager.connect()
        print(manager.get_short_address(session.account))
"""

from .models import (
    Notice,
    NoticeLevel,
    Session,
    SessionEvent,
    SessionEventType,
    SessionStatus,
    TRANSITIONS,
    can_apply,
    get_short_address,
    reduce_session,
)
from .reconciler import NetworkReconciler, ReconcileOutcome
from .session_manager import SessionManager

__all__ = [
    # Models
    "Notice",
    "NoticeLevel",
    "Session",
    "SessionEvent",
    "SessionEventType",
    "SessionStatus",
    "TRANSITIONS",
    "can_apply",
    "get_short_address",
    "reduce_session",
    # Reconciliation
    "NetworkReconciler",
    "ReconcileOutcome",
    # Manager
    "SessionManager",
]
