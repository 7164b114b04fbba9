"""
Tests for chain descriptors and the supported-chain registry.
"""

import pytest

from goldpeg.config import Settings
from goldpeg.core.chains import ChainRegistry, parse_chain_id


@pytest.fixture
def registry() -> ChainRegistry:
    return ChainRegistry(Settings(local_rpc_url="http://localhost:8545"))


class TestChainRegistry:

    def test_allowed_chains(self, registry: ChainRegistry):
        assert registry.allowed_chain_ids == frozenset({30, 31, 31337})
        assert registry.is_allowed(30)
        assert not registry.is_allowed(1)
        assert not registry.is_allowed(None)

    def test_target_defaults_to_local_chain(self, registry: ChainRegistry):
        assert registry.target.chain_id == 31337
        assert registry.target.name == "Local Anvil"

    def test_require_unknown_chain_raises(self, registry: ChainRegistry):
        with pytest.raises(KeyError):
            registry.require(1)
        assert registry.get(1) is None

    def test_add_chain_params_carry_full_descriptor(self, registry: ChainRegistry):
        params = registry.require(31).to_add_chain_params()

        assert params == {
            "chainId": "0x1f",
            "chainName": "Rootstock Testnet",
            "rpcUrls": [registry.require(31).rpc_urls[0]],
            "nativeCurrency": {
                "name": "Testnet Rootstock Smart Bitcoin",
                "symbol": "tRBTC",
                "decimals": 18,
            },
            "blockExplorerUrls": ["https://explorer.testnet.rsk.co"],
        }

    def test_local_chain_has_no_explorer(self, registry: ChainRegistry):
        params = registry.require(31337).to_add_chain_params()
        assert params["chainId"] == "0x7a69"
        assert params["blockExplorerUrls"] == []
        assert params["rpcUrls"] == ["http://localhost:8545"]

    def test_iterates_all_chains(self, registry: ChainRegistry):
        assert len(registry) == 3
        assert {chain.chain_id for chain in registry} == {30, 31, 31337}


@pytest.mark.parametrize(
    "value,expected",
    [
        ("0x1e", 30),
        ("0X7A69", 31337),
        ("31", 31),
        (30, 30),
    ],
)
def test_parse_chain_id(value, expected):
    assert parse_chain_id(value) == expected


def test_parse_chain_id_rejects_garbage():
    with pytest.raises(ValueError):
        parse_chain_id("rootstock")
    with pytest.raises(ValueError):
        parse_chain_id(True)
