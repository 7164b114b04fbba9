"""
Tests for wallet network reconciliation (switch, then register on 4902).
"""

import pytest

from conftest import FakeWalletProvider
from goldpeg.config import Settings
from goldpeg.core.chains import ChainDescriptor, ChainRegistry
from goldpeg.core.errors import ChainSwitchError
from goldpeg.core.wallet import NetworkReconciler, ReconcileOutcome
from goldpeg.providers import UNRECOGNIZED_CHAIN, USER_REJECTED_REQUEST, ProviderRpcError


@pytest.fixture
def target() -> ChainDescriptor:
    return ChainRegistry(Settings()).require(31)


@pytest.fixture
def reconciler(provider: FakeWalletProvider) -> NetworkReconciler:
    return NetworkReconciler(provider)


class TestNetworkReconciler:

    @pytest.mark.asyncio
    async def test_switch_succeeds(self, reconciler, provider, target):
        outcome = await reconciler.ensure_chain(target)

        assert outcome == ReconcileOutcome.SWITCHED
        assert provider.calls_for("wallet_switchEthereumChain") == [[{"chainId": "0x1f"}]]
        assert provider.calls_for("wallet_addEthereumChain") == []

    @pytest.mark.asyncio
    async def test_unrecognized_chain_is_registered_once(self, reconciler, provider, target):
        provider.errors["wallet_switchEthereumChain"] = ProviderRpcError(UNRECOGNIZED_CHAIN, "Unrecognized chain")

        outcome = await reconciler.ensure_chain(target)

        assert outcome == ReconcileOutcome.REGISTERED
        assert provider.calls_for("wallet_addEthereumChain") == [[target.to_add_chain_params()]]
        # No second switch attempt after registering
        assert len(provider.calls_for("wallet_switchEthereumChain")) == 1

    @pytest.mark.asyncio
    async def test_other_switch_errors_do_not_register(self, reconciler, provider, target):
        provider.errors["wallet_switchEthereumChain"] = ProviderRpcError(USER_REJECTED_REQUEST, "User rejected")

        with pytest.raises(ChainSwitchError) as exc_info:
            await reconciler.ensure_chain(target)

        assert exc_info.value.provider_code == USER_REJECTED_REQUEST
        assert exc_info.value.chain_id == 31
        assert provider.calls_for("wallet_addEthereumChain") == []

    @pytest.mark.asyncio
    async def test_registration_failure_raises(self, reconciler, provider, target):
        provider.errors["wallet_switchEthereumChain"] = ProviderRpcError(UNRECOGNIZED_CHAIN)
        provider.errors["wallet_addEthereumChain"] = ProviderRpcError(-32602, "Invalid params")

        with pytest.raises(ChainSwitchError, match="Failed to add"):
            await reconciler.ensure_chain(target)

        assert len(provider.calls_for("wallet_addEthereumChain")) == 1
