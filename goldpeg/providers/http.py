"""
Read-only JSON-RPC provider over HTTP.

Lets the price feed and token reads run against a public node when no
wallet is injected (CLI, background jobs).
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, List, Optional

import httpx

from .base import EventEmitterMixin, ProviderRpcError, WalletProvider
from ..config import settings


logger = logging.getLogger(__name__)

INTERNAL_ERROR = -32603


class HttpRpcProvider(EventEmitterMixin, WalletProvider):
    name = "http"

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout_s: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__()
        self.rpc_url = rpc_url
        self.timeout_s = timeout_s or settings.request_timeout_seconds
        self._client = client
        self._ids = itertools.count(1)

    @classmethod
    def for_chain(cls, chain_id: int, **kwargs: Any) -> "HttpRpcProvider":
        return cls(settings.rpc_url_for(chain_id), **kwargs)

    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        if not self._client or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout_s)

        payload: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        try:
            response = await self._client.post(self.rpc_url, json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.debug("RPC transport error for %s: %s", method, exc)
            raise ProviderRpcError(INTERNAL_ERROR, f"{method} transport error: {exc}") from exc

        if "error" in data:
            raise ProviderRpcError.from_payload(data["error"])
        return data.get("result")

    async def aclose(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpRpcProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
