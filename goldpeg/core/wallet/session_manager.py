"""
Wallet session manager.

Owns the connection lifecycle against an injected wallet provider:
- connect / disconnect with explicit user action (no silent auto-connect)
- account and chain change events from the provider
- network reconciliation when the wallet sits on an unsupported chain

Every state change goes through ``_dispatch``, which applies the pure
``reduce_session`` transition and then notifies listeners.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional

from .models import (
    Notice,
    NoticeLevel,
    Session,
    SessionEvent,
    SessionEventType,
    SessionStatus,
    can_apply,
    get_short_address,
    reduce_session,
)
from .reconciler import NetworkReconciler, ReconcileOutcome
from ..chains import ChainRegistry, parse_chain_id
from ..contracts.context import ChainReader, Signer
from ..errors import ChainSwitchError, NoProviderError, RpcFailure, UserRejectedError
from ...logging_config import bind_session_context, clear_session_context
from ...providers.base import (
    ACCOUNTS_CHANGED,
    CHAIN_CHANGED,
    USER_REJECTED_REQUEST,
    ProviderRpcError,
    WalletProvider,
)


SessionListener = Callable[[Session], None]
InvalidationListener = Callable[[str], None]
NoticeHandler = Callable[[Notice], None]


def _discard(items: List[Any], item: Any) -> None:
    if item in items:
        items.remove(item)


class SessionManager:
    """
    Manages one wallet session.

    Usage:
        manager = SessionManager(provider, on_notice=show_toast)
        async with manager:               # subscribes to wallet events
            session = await manager.connect()
            ...
    """

    def __init__(
        self,
        provider: Optional[WalletProvider],
        *,
        chains: Optional[ChainRegistry] = None,
        reconciler: Optional[NetworkReconciler] = None,
        on_notice: Optional[NoticeHandler] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.provider = provider
        self.chains = chains or ChainRegistry()
        self.reconciler = reconciler or (NetworkReconciler(provider) if provider else None)
        self.logger = logger or logging.getLogger(__name__)
        self._on_notice = on_notice
        self._session = Session()
        self._listeners: List[SessionListener] = []
        self._invalidation_listeners: List[InvalidationListener] = []
        self._mounted = False
        self._connect_task: Optional[asyncio.Task] = None

    # ---------------------------
    # State
    # ---------------------------
    @property
    def session(self) -> Session:
        return self._session

    @property
    def status(self) -> SessionStatus:
        return self._session.status

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    def add_listener(self, listener: SessionListener) -> Callable[[], None]:
        """Call ``listener`` with every new session; returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: _discard(self._listeners, listener)

    def add_invalidation_listener(self, listener: InvalidationListener) -> Callable[[], None]:
        """Call ``listener(reason)`` whenever session-derived state must be rebuilt."""
        self._invalidation_listeners.append(listener)
        return lambda: _discard(self._invalidation_listeners, listener)

    def _dispatch(self, event_type: SessionEventType, **fields: Any) -> Session:
        previous = self._session
        self._session = reduce_session(previous, SessionEvent(type=event_type, **fields))
        self.logger.debug(
            "Session %s: %s -> %s",
            event_type.value,
            previous.status.value,
            self._session.status.value,
        )
        for listener in list(self._listeners):
            try:
                listener(self._session)
            except Exception as exc:  # noqa: BLE001
                self.logger.warning("Session listener failed: %s", exc, exc_info=True)
        return self._session

    def _notify(self, level: NoticeLevel, message: str) -> None:
        if self._on_notice is None:
            return
        try:
            self._on_notice(Notice(level=level, message=message))
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("Notice handler failed: %s", exc, exc_info=True)

    # ---------------------------
    # Connection lifecycle
    # ---------------------------
    async def connect(self) -> Session:
        """Request account access and establish a connected session.

        Raises:
            NoProviderError: no wallet provider was injected
            UserRejectedError: the user declined or no account was returned
            RpcFailure: the wallet failed for another reason
        """
        if self.provider is None:
            self._notify(NoticeLevel.ERROR, "Please install a wallet to use this application")
            raise NoProviderError()
        if self._session.is_connected:
            return self._session

        # Callers arriving while a request is pending share its outcome
        if self._connect_task is None or self._connect_task.done():
            self._connect_task = asyncio.ensure_future(self._connect())
        return await asyncio.shield(self._connect_task)

    async def _connect(self) -> Session:
        self._dispatch(SessionEventType.CONNECT_REQUESTED)
        epoch = self._session.epoch
        try:
            accounts = await self._request_accounts()
            if not accounts:
                raise UserRejectedError("No accounts found")
            account = accounts[0]
            reader = ChainReader(self.provider)
            chain_id = await reader.get_chain_id()
            if self._session.epoch != epoch or not self._session.is_connecting:
                raise RpcFailure("Connection interrupted by a session reset", method="eth_requestAccounts")
        except Exception as exc:
            if self._session.is_connecting:
                self._dispatch(SessionEventType.CONNECT_FAILED)
            self.logger.error("Error connecting wallet: %s", exc)
            self._notify(NoticeLevel.ERROR, "Failed to connect wallet")
            raise

        self._dispatch(
            SessionEventType.CONNECT_SUCCEEDED,
            account=account,
            chain_id=chain_id,
            provider=reader,
            signer=Signer(self.provider, account),
        )
        bind_session_context(account=get_short_address(account), chain_id=chain_id)
        self.logger.info("Wallet connected: %s on chain %d", get_short_address(account), chain_id)

        if not self.chains.is_allowed(chain_id):
            self.logger.warning(
                "Chain %d is not supported (allowed: %s)",
                chain_id,
                sorted(self.chains.allowed_chain_ids),
            )
            self._notify(NoticeLevel.WARNING, "Please switch to Rootstock network or local network")
            await self._reconcile()

        # A successful switch fires chainChanged, which resets the session
        if not self._session.is_connected or self._session.epoch != epoch:
            self.logger.info("Session was reset while connecting; reconnect to continue")
            return self._session

        self._notify(NoticeLevel.SUCCESS, "Wallet connected successfully!")
        return self._session

    async def _request_accounts(self) -> List[str]:
        try:
            accounts = await self.provider.request("eth_requestAccounts", [])
        except ProviderRpcError as exc:
            if exc.code == USER_REJECTED_REQUEST:
                raise UserRejectedError() from exc
            raise RpcFailure(
                f"eth_requestAccounts failed: {exc.message or exc}",
                method="eth_requestAccounts",
                provider_code=exc.code,
            ) from exc
        return list(accounts or [])

    async def _reconcile(self) -> None:
        """Non-fatal: the session stays connected on the wrong chain if this fails."""
        try:
            outcome = await self.reconciler.ensure_chain(self.chains.target)
        except ChainSwitchError as exc:
            self.logger.warning("Network reconciliation failed: %s", exc)
            self._notify(NoticeLevel.WARNING, f"{exc.message}; switch networks in your wallet")
            return
        if outcome == ReconcileOutcome.REGISTERED:
            self._notify(
                NoticeLevel.INFO,
                f"{self.chains.target.name} was added to your wallet; switch to it to continue",
            )

    async def switch_network(self, chain_id: Optional[int] = None) -> ReconcileOutcome:
        """Ask the wallet to move to ``chain_id`` (default: the configured target chain).

        Raises:
            NoProviderError: no wallet provider was injected
            ChainSwitchError: the wallet refused
        """
        if self.provider is None or self.reconciler is None:
            raise NoProviderError()
        target = self.chains.require(chain_id) if chain_id is not None else self.chains.target
        try:
            return await self.reconciler.ensure_chain(target)
        except ChainSwitchError as exc:
            self._notify(NoticeLevel.ERROR, exc.message)
            raise

    def disconnect(self) -> Session:
        """Reset to a disconnected session. Idempotent; never raises."""
        was_active = self._session.status != SessionStatus.DISCONNECTED
        try:
            self._dispatch(SessionEventType.DISCONNECT_REQUESTED)
        except Exception as exc:  # noqa: BLE001
            self.logger.error("Unexpected error during disconnect: %s", exc, exc_info=True)
            self._session = Session(epoch=self._session.epoch)
        clear_session_context()
        if was_active:
            self.logger.info("Wallet disconnected")
            self._notify(NoticeLevel.SUCCESS, "Wallet disconnected")
        return self._session

    async def restore_if_authorized(self) -> List[str]:
        """Report accounts the wallet has already authorized.

        Never connects: the caller decides whether to call ``connect()``.
        """
        if self.provider is None:
            return []
        try:
            accounts = await self.provider.request("eth_accounts", [])
        except ProviderRpcError as exc:
            self.logger.error("Error checking wallet connection: %s", exc)
            return []
        accounts = list(accounts or [])
        if accounts:
            self.logger.info("Previous wallet connection found, but not auto-connecting")
        return accounts

    def invalidate(self, reason: str) -> Session:
        """Discard all session-derived state and tell dependents to rebuild theirs."""
        self.logger.info("Invalidating session: %s", reason)
        session = self._dispatch(SessionEventType.INVALIDATED)
        clear_session_context()
        for listener in list(self._invalidation_listeners):
            try:
                listener(reason)
            except Exception as exc:  # noqa: BLE001
                self.logger.warning("Invalidation listener failed: %s", exc, exc_info=True)
        return session

    # ---------------------------
    # Provider events
    # ---------------------------
    async def mount(self) -> List[str]:
        """Subscribe to wallet events and report already-authorized accounts."""
        if self.provider is None:
            self.logger.info("No wallet provider; running without wallet events")
            return []
        if self._mounted:
            self.logger.warning("Session manager already mounted; not subscribing again")
            return []
        self.provider.on(ACCOUNTS_CHANGED, self._handle_accounts_changed)
        self.provider.on(CHAIN_CHANGED, self._handle_chain_changed)
        self._mounted = True
        return await self.restore_if_authorized()

    def unmount(self) -> None:
        if not self._mounted or self.provider is None:
            return
        self.provider.remove_listener(ACCOUNTS_CHANGED, self._handle_accounts_changed)
        self.provider.remove_listener(CHAIN_CHANGED, self._handle_chain_changed)
        self._mounted = False

    async def __aenter__(self) -> "SessionManager":
        await self.mount()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.unmount()

    def _handle_accounts_changed(self, accounts: List[str]) -> None:
        accounts = list(accounts or [])
        if not accounts:
            if can_apply(self._session, SessionEventType.ACCOUNTS_CLEARED):
                self._dispatch(SessionEventType.ACCOUNTS_CLEARED)
                clear_session_context()
                self._notify(NoticeLevel.INFO, "Wallet disconnected")
            return

        if not can_apply(self._session, SessionEventType.ACCOUNT_SWITCHED):
            self.logger.debug("Ignoring account change while %s", self._session.status.value)
            return
        account = accounts[0]
        if account == self._session.account:
            return
        self._dispatch(
            SessionEventType.ACCOUNT_SWITCHED,
            account=account,
            signer=Signer(self.provider, account),
        )
        bind_session_context(account=get_short_address(account))
        self.logger.info("Active account changed to %s", get_short_address(account))

    def _handle_chain_changed(self, chain_id: Any) -> None:
        try:
            new_chain = parse_chain_id(chain_id)
        except ValueError:
            new_chain = None
        self.invalidate(f"chain changed to {new_chain if new_chain is not None else chain_id}")

    get_short_address = staticmethod(get_short_address)
