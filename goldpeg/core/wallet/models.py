"""
Wallet session models and the session state machine.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Set

from ..contracts.context import ChainReader, Signer
from ..errors import InvalidSessionTransition


class SessionStatus(str, Enum):
    """Connection lifecycle status."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class SessionEventType(str, Enum):
    """Everything that can change a session."""
    CONNECT_REQUESTED = "connect_requested"
    CONNECT_SUCCEEDED = "connect_succeeded"
    CONNECT_FAILED = "connect_failed"
    ACCOUNT_SWITCHED = "account_switched"
    ACCOUNTS_CLEARED = "accounts_cleared"
    DISCONNECT_REQUESTED = "disconnect_requested"
    INVALIDATED = "invalidated"


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """User-facing message for whatever renders notifications."""
    level: NoticeLevel
    message: str


@dataclass(frozen=True)
class Session:
    """Snapshot of the wallet session. Replaced on every transition, never mutated."""
    status: SessionStatus = SessionStatus.DISCONNECTED
    account: Optional[str] = None
    chain_id: Optional[int] = None
    provider: Optional[ChainReader] = None
    signer: Optional[Signer] = None
    epoch: int = 0

    def __post_init__(self):
        if self.status == SessionStatus.CONNECTED:
            missing = [
                name for name in ("account", "chain_id", "provider", "signer")
                if getattr(self, name) is None
            ]
            if missing:
                raise ValueError(f"Connected session is missing {', '.join(missing)}")

    @property
    def is_connected(self) -> bool:
        return self.status == SessionStatus.CONNECTED

    @property
    def is_connecting(self) -> bool:
        return self.status == SessionStatus.CONNECTING


@dataclass(frozen=True)
class SessionEvent:
    type: SessionEventType
    account: Optional[str] = None
    chain_id: Optional[int] = None
    provider: Optional[ChainReader] = None
    signer: Optional[Signer] = None


_ANY_STATUS: Set[SessionStatus] = set(SessionStatus)

# Statuses in which each event is accepted
TRANSITIONS: Dict[SessionEventType, Set[SessionStatus]] = {
    SessionEventType.CONNECT_REQUESTED: {SessionStatus.DISCONNECTED, SessionStatus.ERROR},
    SessionEventType.CONNECT_SUCCEEDED: {SessionStatus.CONNECTING},
    SessionEventType.CONNECT_FAILED: {SessionStatus.CONNECTING},
    SessionEventType.ACCOUNT_SWITCHED: {SessionStatus.CONNECTED},
    SessionEventType.ACCOUNTS_CLEARED: {SessionStatus.CONNECTED},
    SessionEventType.DISCONNECT_REQUESTED: _ANY_STATUS,
    SessionEventType.INVALIDATED: _ANY_STATUS,
}


def can_apply(session: Session, event_type: SessionEventType) -> bool:
    return session.status in TRANSITIONS[event_type]


def reduce_session(session: Session, event: SessionEvent) -> Session:
    """Pure transition function: the next session for ``event``.

    Raises:
        InvalidSessionTransition: if the event is not accepted in the current status
    """
    if not can_apply(session, event.type):
        raise InvalidSessionTransition(session.status, event.type)

    if event.type == SessionEventType.CONNECT_REQUESTED:
        return Session(status=SessionStatus.CONNECTING, epoch=session.epoch)

    if event.type == SessionEventType.CONNECT_SUCCEEDED:
        return Session(
            status=SessionStatus.CONNECTED,
            account=event.account,
            chain_id=event.chain_id,
            provider=event.provider,
            signer=event.signer,
            epoch=session.epoch,
        )

    if event.type == SessionEventType.ACCOUNT_SWITCHED:
        return replace(
            session,
            account=event.account,
            signer=event.signer or session.signer,
        )

    if event.type == SessionEventType.INVALIDATED:
        return Session(epoch=session.epoch + 1)

    # CONNECT_FAILED, ACCOUNTS_CLEARED, DISCONNECT_REQUESTED
    return Session(epoch=session.epoch)


def get_short_address(address: Optional[str]) -> str:
    """``0xABCDEF0123456789`` -> ``0xABCD...6789``; empty string for no address."""
    if not address:
        return ""
    return f"{address[:6]}...{address[-4:]}"


__all__ = [
    "SessionStatus",
    "SessionEventType",
    "NoticeLevel",
    "Notice",
    "Session",
    "SessionEvent",
    "TRANSITIONS",
    "can_apply",
    "reduce_session",
    "get_short_address",
]
