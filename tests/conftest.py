"""
Shared test doubles: an in-memory wallet provider that answers JSON-RPC
requests and can play contract return values for ``eth_call``.
"""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from goldpeg.config import Settings
from goldpeg.core.contracts import CONTRACT_ABIS, function_selector
from goldpeg.providers.base import EventEmitterMixin, ProviderRpcError, WalletProvider


READER = "0x" + "1" * 40
ORACLE = "0x" + "2" * 40
TOKEN = "0x" + "3" * 40
MANAGER = "0x" + "4" * 40
ACCOUNT = "0xabcdef0123456789abcdef0123456789abcdef01"
OTHER_ACCOUNT = "0x9876543210fedcba9876543210fedcba98765432"

_SELECTORS: Dict[str, str] = {
    function_selector(fragment): fragment["name"]
    for abi in CONTRACT_ABIS.values()
    for fragment in abi
}


def _encode_result(value: Any) -> str:
    if isinstance(value, bool):
        value = int(value)
    return "0x" + format(value, "064x")


class FakeWalletProvider(EventEmitterMixin, WalletProvider):
    name = "fake"

    def __init__(
        self,
        accounts: Optional[List[str]] = None,
        chain_id: int = 30,
        authorized: Optional[List[str]] = None,
    ) -> None:
        super().__init__()
        self.accounts = [ACCOUNT] if accounts is None else accounts
        self.chain_id = chain_id
        self.authorized = authorized or []
        self.errors: Dict[str, Exception] = {}
        self.contract_results: Dict[Tuple[str, str], Any] = {}
        self.raw_results: Dict[Tuple[str, str], str] = {}
        self.receipt: Optional[Dict[str, Any]] = {"status": "0x1", "blockNumber": "0x10"}
        self.gas_estimate = "0x5208"
        self.requests: List[Tuple[str, List[Any]]] = []
        self.contract_calls: List[Tuple[str, str]] = []

    def calls_for(self, method: str) -> List[List[Any]]:
        return [params for name, params in self.requests if name == method]

    def set_result(self, address: str, fn_name: str, value: Any) -> None:
        self.contract_results[(address.lower(), fn_name)] = value

    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        params = params or []
        self.requests.append((method, params))
        if method in self.errors:
            raise self.errors[method]

        if method == "eth_requestAccounts":
            return list(self.accounts)
        if method == "eth_accounts":
            return list(self.authorized)
        if method == "eth_chainId":
            return hex(self.chain_id)
        if method in ("wallet_switchEthereumChain", "wallet_addEthereumChain"):
            return None
        if method == "eth_call":
            return self._eth_call(params[0])
        if method == "eth_estimateGas":
            return self.gas_estimate
        if method == "eth_sendTransaction":
            return "0x" + "ab" * 32
        if method == "eth_getTransactionReceipt":
            return self.receipt
        raise ProviderRpcError(-32601, f"Method {method} not supported")

    def _eth_call(self, tx: Dict[str, Any]) -> str:
        address = tx["to"].lower()
        fn_name = _SELECTORS.get(tx["data"][:10], tx["data"][:10])
        self.contract_calls.append((address, fn_name))
        key = (address, fn_name)
        if key in self.raw_results:
            return self.raw_results[key]
        if key not in self.contract_results:
            raise ProviderRpcError(3, "execution reverted")
        value = self.contract_results[key]
        if isinstance(value, Exception):
            raise value
        return _encode_result(value)

    def calls_to(self, address: str, fn_name: str) -> int:
        return self.contract_calls.count((address.lower(), fn_name))


@pytest.fixture
def provider() -> FakeWalletProvider:
    return FakeWalletProvider()


@pytest.fixture
def configured_settings() -> Settings:
    return Settings(
        gold_reader_address=READER,
        gold_price_oracle_address=ORACLE,
        poipoi_token_address=TOKEN,
        poipoi_manager_address=MANAGER,
        receipt_poll_interval_seconds=0.01,
        receipt_timeout_seconds=0.1,
    )
