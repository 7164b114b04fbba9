"""
Caller contexts for contract calls.

A ``ChainReader`` is the read-only provider handle; a ``Signer`` additionally
authorizes state-changing calls from one account.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..errors import RpcFailure, UserRejectedError
from ..chains import parse_chain_id
from ...providers.base import USER_REJECTED_REQUEST, ProviderRpcError, WalletProvider


logger = logging.getLogger(__name__)


class ChainReader:
    """Read-only access to the chain through a wallet or RPC provider."""

    can_sign = False

    def __init__(self, provider: WalletProvider) -> None:
        self.provider = provider

    async def rpc(self, method: str, params: Optional[List[Any]] = None) -> Any:
        try:
            return await self.provider.request(method, params or [])
        except ProviderRpcError as exc:
            raise RpcFailure(
                f"{method} failed: {exc.message or exc}",
                method=method,
                provider_code=exc.code,
            ) from exc

    async def call(self, to: str, data: str) -> str:
        return await self.rpc("eth_call", [{"to": to, "data": data}, "latest"])

    async def get_chain_id(self) -> int:
        return parse_chain_id(await self.rpc("eth_chainId"))

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        return await self.rpc("eth_getTransactionReceipt", [tx_hash])

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider={getattr(self.provider, 'name', self.provider)!r})"


class Signer(ChainReader):
    """Provider handle bound to an account that can authorize transactions."""

    can_sign = True

    def __init__(self, provider: WalletProvider, address: str) -> None:
        super().__init__(provider)
        self.address = address

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        result = await self.rpc("eth_estimateGas", [{"from": self.address, **tx}])
        return int(result, 16) if isinstance(result, str) else int(result)

    async def send_transaction(self, tx: Dict[str, Any]) -> str:
        try:
            tx_hash = await self.provider.request(
                "eth_sendTransaction", [{"from": self.address, **tx}]
            )
        except ProviderRpcError as exc:
            if exc.code == USER_REJECTED_REQUEST:
                raise UserRejectedError("User rejected the transaction") from exc
            raise RpcFailure(
                f"eth_sendTransaction failed: {exc.message or exc}",
                method="eth_sendTransaction",
                provider_code=exc.code,
            ) from exc
        logger.info("Transaction submitted: %s", tx_hash)
        return tx_hash

    def __repr__(self) -> str:
        return f"Signer(address={self.address!r})"
