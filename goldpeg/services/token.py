"""POI token reads plus mint/redeem through the manager contract."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from ..core.contracts.context import Signer
from ..core.contracts.gateway import CallerContext, ContractGateway
from ..core.pricing.formatting import (
    PRICE_DECIMALS,
    format_poi,
    format_token_amount,
    format_usd,
    parse_token_amount,
)


logger = logging.getLogger(__name__)

TOKEN = "POIPOI"
ORACLE = "GOLD_PRICE_ORACLE"
MANAGER = "POIPOI_MANAGER"


class DashboardSnapshot(BaseModel):
    account: str = Field(description="Wallet address the balance belongs to")
    poi_balance: Decimal = Field(description="POI balance in token units")
    gold_price: Decimal = Field(description="Gold price from the oracle (USD, 8 decimals)")
    total_supply: Decimal = Field(description="POI total supply reported by the manager")

    @property
    def gold_price_display(self) -> str:
        return format_usd(self.gold_price)

    @property
    def total_supply_display(self) -> str:
        return format_poi(self.total_supply)


class TransactionOutcome(BaseModel):
    tx_hash: str
    gas_limit: int
    block_number: Optional[int] = None


class TokenService:
    """
    Dashboard reads and mint/redeem flows.

    Usage:
        service = TokenService()
        snapshot = await service.get_dashboard(session.account, session.provider)
        poi = await service.quote_mint("100", session.signer)
        outcome = await service.mint("100", session.signer)
    """

    def __init__(self, gateway: Optional[ContractGateway] = None) -> None:
        self.gateway = gateway or ContractGateway()

    async def get_dashboard(self, account: str, context: CallerContext) -> DashboardSnapshot:
        token = self.gateway.resolve(TOKEN, context)
        oracle = self.gateway.resolve(ORACLE, context)
        manager = self.gateway.resolve(MANAGER, context)

        balance, gold_price, total_supply = await asyncio.gather(
            token.call("balanceOf", account),
            oracle.call("getGoldPrice"),
            manager.call("getTotalSupply"),
        )
        return DashboardSnapshot(
            account=account,
            poi_balance=format_token_amount(balance),
            gold_price=format_token_amount(gold_price, PRICE_DECIMALS),
            total_supply=format_token_amount(total_supply),
        )

    async def get_manager_gold_price(self, context: CallerContext) -> Decimal:
        manager = self.gateway.resolve(MANAGER, context)
        return format_token_amount(await manager.call("getGoldPrice"), PRICE_DECIMALS)

    async def quote_mint(self, usd_amount: str, context: CallerContext) -> Decimal:
        """POI received for ``usd_amount`` dollars of collateral."""
        manager = self.gateway.resolve(MANAGER, context)
        poi_wei = await manager.call("calculatePOIAmount", parse_token_amount(usd_amount))
        return format_token_amount(poi_wei)

    async def quote_redeem(self, poi_amount: str, context: CallerContext) -> Decimal:
        """USD collateral released for ``poi_amount`` POI."""
        manager = self.gateway.resolve(MANAGER, context)
        usd_wei = await manager.call("calculateCollateralAmount", parse_token_amount(poi_amount))
        return format_token_amount(usd_wei)

    async def mint(self, usd_amount: str, signer: Signer) -> TransactionOutcome:
        return await self._submit("mint", parse_token_amount(usd_amount), signer)

    async def redeem(self, poi_amount: str, signer: Signer) -> TransactionOutcome:
        """Burn ``poi_amount`` POI for collateral.

        Raises:
            ValueError: amount is not positive or exceeds the signer's POI balance
        """
        amount_wei = parse_token_amount(poi_amount)
        token = self.gateway.resolve(TOKEN, signer)
        balance = await token.call("balanceOf", signer.address)
        if amount_wei > balance:
            raise ValueError(
                f"Insufficient POI balance: {format_token_amount(balance)} available"
            )
        return await self._submit("redeem", amount_wei, signer)

    async def _submit(self, fn_name: str, amount_wei: int, signer: Signer) -> TransactionOutcome:
        if amount_wei <= 0:
            raise ValueError("Amount must be greater than zero")
        cfg = self.gateway.settings
        manager = self.gateway.resolve(MANAGER, signer)

        estimate = await manager.estimate_gas(fn_name, amount_wei)
        gas_limit = estimate * (100 + cfg.gas_buffer_percent) // 100
        tx_hash = await manager.transact(fn_name, amount_wei, gas_limit=gas_limit)
        logger.info("%s submitted: %s (gas limit %d)", fn_name, tx_hash, gas_limit)

        receipt = await manager.confirm(
            tx_hash,
            timeout=cfg.receipt_timeout_seconds,
            poll_interval=cfg.receipt_poll_interval_seconds,
        )
        block = receipt.get("blockNumber")
        return TransactionOutcome(
            tx_hash=tx_hash,
            gas_limit=gas_limit,
            block_number=int(str(block), 0) if block is not None else None,
        )
