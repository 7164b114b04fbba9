"""Chain descriptors and the allow-list of networks a session may use."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterator, Optional, Tuple

from ..config import Settings, settings as default_settings


@dataclass(frozen=True)
class NativeCurrency:
    name: str
    symbol: str
    decimals: int = 18


@dataclass(frozen=True)
class ChainDescriptor:
    """Static description of a chain, in the shape wallets expect for registration."""

    chain_id: int
    name: str
    rpc_urls: Tuple[str, ...]
    native_currency: NativeCurrency
    explorer_urls: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def hex_chain_id(self) -> str:
        return hex(self.chain_id)

    def to_add_chain_params(self) -> Dict[str, Any]:
        """Parameter object for ``wallet_addEthereumChain``."""
        return {
            "chainId": self.hex_chain_id,
            "chainName": self.name,
            "rpcUrls": list(self.rpc_urls),
            "nativeCurrency": {
                "name": self.native_currency.name,
                "symbol": self.native_currency.symbol,
                "decimals": self.native_currency.decimals,
            },
            "blockExplorerUrls": sorted(self.explorer_urls),
        }


def parse_chain_id(value: Any) -> int:
    """Accept ``0x``-prefixed hex strings, decimal strings, or ints."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid chain id: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip().lower()
    if text.startswith("0x"):
        return int(text, 16)
    return int(text)


class ChainRegistry:
    """Supported chains built from settings.

    Usage:
        registry = ChainRegistry()
        registry.is_allowed(30)        # True
        registry.get(31337).name       # "Local Anvil"
    """

    def __init__(self, config: Optional[Settings] = None) -> None:
        self._settings = config or default_settings
        cfg = self._settings
        self._chains: Dict[int, ChainDescriptor] = {
            cfg.chain_id: ChainDescriptor(
                chain_id=cfg.chain_id,
                name="Rootstock Mainnet",
                rpc_urls=(cfg.rootstock_rpc_url,),
                native_currency=NativeCurrency(name="Rootstock Smart Bitcoin", symbol="RBTC"),
                explorer_urls=frozenset({"https://explorer.rsk.co"}),
            ),
            cfg.testnet_chain_id: ChainDescriptor(
                chain_id=cfg.testnet_chain_id,
                name="Rootstock Testnet",
                rpc_urls=(cfg.rootstock_testnet_rpc_url,),
                native_currency=NativeCurrency(name="Testnet Rootstock Smart Bitcoin", symbol="tRBTC"),
                explorer_urls=frozenset({"https://explorer.testnet.rsk.co"}),
            ),
            cfg.local_chain_id: ChainDescriptor(
                chain_id=cfg.local_chain_id,
                name="Local Anvil",
                rpc_urls=(cfg.local_rpc_url,),
                native_currency=NativeCurrency(name="ETH", symbol="ETH"),
            ),
        }

    @property
    def allowed_chain_ids(self) -> FrozenSet[int]:
        return frozenset(self._chains)

    def is_allowed(self, chain_id: Optional[int]) -> bool:
        return chain_id is not None and chain_id in self._chains

    def get(self, chain_id: int) -> Optional[ChainDescriptor]:
        return self._chains.get(chain_id)

    def require(self, chain_id: int) -> ChainDescriptor:
        chain = self._chains.get(chain_id)
        if chain is None:
            raise KeyError(f"Chain {chain_id} is not configured")
        return chain

    @property
    def target(self) -> ChainDescriptor:
        """Chain a wallet on an unsupported network is asked to switch to."""
        return self.require(self._settings.target_chain_id)

    def __iter__(self) -> Iterator[ChainDescriptor]:
        return iter(self._chains.values())

    def __len__(self) -> int:
        return len(self._chains)


__all__ = [
    "NativeCurrency",
    "ChainDescriptor",
    "ChainRegistry",
    "parse_chain_id",
]
