"""Switches the wallet to a supported chain, registering it when unknown."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from ..chains import ChainDescriptor
from ..errors import ChainSwitchError
from ...providers.base import UNRECOGNIZED_CHAIN, ProviderRpcError, WalletProvider


class ReconcileOutcome(str, Enum):
    SWITCHED = "switched"
    # Chain was added to the wallet; the switch itself must be requested again
    REGISTERED = "registered"


class NetworkReconciler:
    """Drives ``wallet_switchEthereumChain`` / ``wallet_addEthereumChain``."""

    def __init__(
        self,
        provider: WalletProvider,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.provider = provider
        self.logger = logger or logging.getLogger(__name__)

    async def ensure_chain(self, target: ChainDescriptor) -> ReconcileOutcome:
        """Ask the wallet to switch to ``target``.

        When the wallet does not know the chain (code 4902) the full descriptor
        is registered once and ``REGISTERED`` is returned without retrying the
        switch.

        Raises:
            ChainSwitchError: the switch failed for any other reason, or registration failed
        """
        try:
            await self.provider.request(
                "wallet_switchEthereumChain",
                [{"chainId": target.hex_chain_id}],
            )
        except ProviderRpcError as switch_error:
            if switch_error.code != UNRECOGNIZED_CHAIN:
                self.logger.error("Error switching to %s: %s", target.name, switch_error)
                raise ChainSwitchError(
                    f"Failed to switch to {target.name}",
                    chain_id=target.chain_id,
                    provider_code=switch_error.code,
                ) from switch_error
        else:
            self.logger.info("Switched wallet to %s (%d)", target.name, target.chain_id)
            return ReconcileOutcome.SWITCHED

        self.logger.info("Wallet does not know %s; registering it", target.name)
        try:
            await self.provider.request(
                "wallet_addEthereumChain",
                [target.to_add_chain_params()],
            )
        except ProviderRpcError as add_error:
            self.logger.error("Error adding %s: %s", target.name, add_error)
            raise ChainSwitchError(
                f"Failed to add {target.name}",
                chain_id=target.chain_id,
                provider_code=add_error.code,
            ) from add_error
        return ReconcileOutcome.REGISTERED
