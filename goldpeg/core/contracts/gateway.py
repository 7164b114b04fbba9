"""
Contract gateway.

Resolves a logical contract name into a handle bound to a caller context.
Resolution is stateless: descriptors are looked up on every call so a
changed configuration is picked up immediately.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from eth_utils import is_address, to_checksum_address

from .abi import AbiEncodingError, decode_output, encode_call
from .abis import CONTRACT_ABIS
from .context import ChainReader, Signer
from ..errors import ConfigurationError, RpcFailure, TransactionFailedError
from ...config import ZERO_ADDRESS, Settings, settings as default_settings


CallerContext = Union[ChainReader, Signer]


def is_zero_address(address: Optional[str]) -> bool:
    """Missing, empty, or all-zero addresses mean "not configured"."""
    if not address:
        return True
    return address.lower() == ZERO_ADDRESS


@dataclass(frozen=True)
class ContractDescriptor:
    logical_name: str
    abi: Optional[Sequence[Dict[str, Any]]]
    address: Optional[str]


class ContractHandle:
    """A contract bound to a caller context."""

    def __init__(self, descriptor: ContractDescriptor, context: CallerContext) -> None:
        self.descriptor = descriptor
        self.context = context
        self.address = to_checksum_address(descriptor.address)
        self._functions: Dict[str, Dict[str, Any]] = {
            item["name"]: item
            for item in descriptor.abi or []
            if item.get("type", "function") == "function"
        }

    @property
    def name(self) -> str:
        return self.descriptor.logical_name

    def _fragment(self, fn_name: str) -> Dict[str, Any]:
        fragment = self._functions.get(fn_name)
        if fragment is None:
            raise ConfigurationError(
                f"{self.name} ABI has no function '{fn_name}'",
                contract=self.name,
            )
        return fragment

    def encode(self, fn_name: str, *args: Any) -> str:
        return encode_call(self._fragment(fn_name), args)

    async def call(self, fn_name: str, *args: Any) -> Any:
        """Run a read-only call and decode its outputs."""
        fragment = self._fragment(fn_name)
        data = encode_call(fragment, args)
        raw = await self.context.call(self.address, data)
        try:
            return decode_output(fragment, raw)
        except AbiEncodingError as exc:
            # Empty return data usually means nothing is deployed at the address
            raise RpcFailure(f"{self.name}.{fn_name}: {exc}", method="eth_call") from exc

    def _require_signer(self, fn_name: str) -> Signer:
        if not isinstance(self.context, Signer):
            raise ConfigurationError(
                f"{self.name}.{fn_name} needs a signer; handle was resolved read-only",
                contract=self.name,
            )
        return self.context

    async def estimate_gas(self, fn_name: str, *args: Any) -> int:
        signer = self._require_signer(fn_name)
        return await signer.estimate_gas({"to": self.address, "data": self.encode(fn_name, *args)})

    async def transact(self, fn_name: str, *args: Any, gas_limit: Optional[int] = None) -> str:
        """Submit a state-changing call and return the transaction hash."""
        signer = self._require_signer(fn_name)
        tx: Dict[str, Any] = {"to": self.address, "data": self.encode(fn_name, *args)}
        if gas_limit is not None:
            tx["gas"] = hex(gas_limit)
        return await signer.send_transaction(tx)

    async def wait_for_receipt(
        self,
        tx_hash: str,
        *,
        timeout: float = 120.0,
        poll_interval: float = 2.0,
    ) -> Dict[str, Any]:
        deadline = time.monotonic() + timeout
        while True:
            receipt = await self.context.get_transaction_receipt(tx_hash)
            if receipt:
                return receipt
            if time.monotonic() >= deadline:
                raise RpcFailure(
                    f"Timed out waiting for receipt of {tx_hash}",
                    method="eth_getTransactionReceipt",
                )
            await asyncio.sleep(poll_interval)

    async def confirm(
        self,
        tx_hash: str,
        *,
        timeout: float = 120.0,
        poll_interval: float = 2.0,
    ) -> Dict[str, Any]:
        """Wait for the receipt and require a success status.

        Raises:
            TransactionFailedError: the transaction was mined but reverted
        """
        receipt = await self.wait_for_receipt(tx_hash, timeout=timeout, poll_interval=poll_interval)
        status = receipt.get("status")
        if status is None or int(str(status), 0) != 1:
            raise TransactionFailedError(f"{self.name} transaction failed", tx_hash=tx_hash)
        return receipt

    def __repr__(self) -> str:
        return f"ContractHandle({self.name}@{self.address}, {self.context!r})"


class ContractGateway:
    """
    Looks up contract descriptors by logical name and binds them to a context.

    Usage:
        gateway = ContractGateway()
        oracle = gateway.resolve("GOLD_PRICE_ORACLE", reader)
        raw = await oracle.call("getGoldPricePerGram")
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        abis: Optional[Mapping[str, Sequence[Dict[str, Any]]]] = None,
    ) -> None:
        self._settings = config or default_settings
        self._abis = abis if abis is not None else CONTRACT_ABIS

    @property
    def settings(self) -> Settings:
        return self._settings

    def descriptor(self, logical_name: str, address: Optional[str] = None) -> ContractDescriptor:
        addresses = self._settings.contract_addresses
        if logical_name not in addresses and logical_name not in self._abis:
            raise ConfigurationError(
                f"Contract configuration not found for {logical_name}",
                contract=logical_name,
            )
        return ContractDescriptor(
            logical_name=logical_name,
            abi=self._abis.get(logical_name),
            address=address or addresses.get(logical_name),
        )

    def is_configured(self, logical_name: str) -> bool:
        return not is_zero_address(self._settings.contract_addresses.get(logical_name))

    def resolve(
        self,
        logical_name: str,
        context: CallerContext,
        address: Optional[str] = None,
    ) -> ContractHandle:
        """Return a handle for reads (reader) or state-changing calls (signer).

        Raises:
            ConfigurationError: unknown name, missing ABI, or missing/zero/invalid address
        """
        descriptor = self.descriptor(logical_name, address)
        if not descriptor.abi:
            raise ConfigurationError(f"No ABI configured for {logical_name}", contract=logical_name)
        if is_zero_address(descriptor.address):
            raise ConfigurationError(f"No address configured for {logical_name}", contract=logical_name)
        if not is_address(descriptor.address):
            raise ConfigurationError(
                f"Invalid address for {logical_name}: {descriptor.address}",
                contract=logical_name,
            )
        return ContractHandle(descriptor, context)
