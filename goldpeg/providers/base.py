from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional


# EIP-1193 / wallet error codes
USER_REJECTED_REQUEST = 4001
UNRECOGNIZED_CHAIN = 4902

ACCOUNTS_CHANGED = "accountsChanged"
CHAIN_CHANGED = "chainChanged"

EventHandler = Callable[[Any], None]


class ProviderRpcError(Exception):
    """Error returned by a wallet or JSON-RPC provider."""

    def __init__(self, code: int, message: str = "", data: Any = None):
        super().__init__(f"[{code}] {message}" if message else f"[{code}]")
        self.code = code
        self.message = message
        self.data = data

    @classmethod
    def from_payload(cls, payload: Any) -> "ProviderRpcError":
        if isinstance(payload, dict):
            return cls(
                code=int(payload.get("code", -32603)),
                message=str(payload.get("message", "")),
                data=payload.get("data"),
            )
        return cls(code=-32603, message=str(payload))


class WalletProvider(ABC):
    """Injected wallet provider interface"""

    name: str = "wallet"

    @abstractmethod
    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Send a JSON-RPC style request; raises ProviderRpcError on failure"""
        pass

    @abstractmethod
    def on(self, event: str, handler: EventHandler) -> None:
        """Subscribe to a provider event"""
        pass

    @abstractmethod
    def remove_listener(self, event: str, handler: EventHandler) -> None:
        """Unsubscribe a previously registered handler"""
        pass


class EventEmitterMixin:
    """Synchronous event emitter for providers that push wallet events."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[EventHandler]] = {}

    def on(self, event: str, handler: EventHandler) -> None:
        self._listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: EventHandler) -> None:
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def emit(self, event: str, payload: Any) -> None:
        for handler in list(self._listeners.get(event, [])):
            handler(payload)
