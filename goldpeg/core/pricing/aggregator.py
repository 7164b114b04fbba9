"""
Gold price aggregation.

Tries the cross-chain reader first (it reports freshness), then falls back
to the always-configured oracle. A reader that has never been updated
(``lastUpdated == 0``) counts as unavailable, so a zero price is never
reported from it.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional

from .formatting import to_price
from .models import PriceQuote, PriceSource
from ..contracts.context import Signer
from ..contracts.gateway import CallerContext, ContractGateway
from ..errors import ConfigurationError, PriceUnavailableError


READER = "GOLD_READER"
ORACLE = "GOLD_PRICE_ORACLE"
PRICE_FN = "getGoldPricePerGram"


class PrimarySourceUnavailable(Exception):
    """The reader answered but has no usable price."""


class PriceFeedAggregator:
    """
    Fetches the gold price per gram with fallback.

    Usage:
        aggregator = PriceFeedAggregator()
        quote = await aggregator.fetch_price(session.provider)
        print(quote.display_price, quote.source.label)
    """

    def __init__(
        self,
        gateway: Optional[ContractGateway] = None,
        *,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.gateway = gateway or ContractGateway()
        self._clock = clock
        self.logger = logger or logging.getLogger(__name__)

    async def fetch_price(self, context: CallerContext) -> PriceQuote:
        """Return a fresh quote.

        Raises:
            PriceUnavailableError: both sources failed
            ConfigurationError: the fallback oracle is not configured
        """
        if self.gateway.is_configured(READER):
            try:
                return await self._fetch_primary(context)
            except Exception as exc:  # noqa: BLE001
                self.logger.warning("GoldReader failed, falling back to GoldPriceOracle: %s", exc)

        oracle = self.gateway.resolve(ORACLE, context)
        try:
            raw = await oracle.call(PRICE_FN)
        except Exception as exc:
            self.logger.error("Error fetching gold price: %s", exc)
            raise PriceUnavailableError() from exc

        return PriceQuote(
            amount_per_gram=to_price(raw),
            source=PriceSource.SECONDARY_FALLBACK,
            observed_at_millis=int(self._clock() * 1000),
            is_stale=False,
        )

    async def _fetch_primary(self, context: CallerContext) -> PriceQuote:
        reader = self.gateway.resolve(READER, context)
        last_updated, is_stale = await asyncio.gather(
            reader.call("lastUpdated"),
            reader.call("isPriceStale"),
        )
        if int(last_updated) == 0:
            raise PrimarySourceUnavailable("No price set in GoldReader")

        raw = await reader.call(PRICE_FN)
        return PriceQuote(
            amount_per_gram=to_price(raw),
            source=PriceSource.PRIMARY_STALE if is_stale else PriceSource.PRIMARY_LIVE,
            observed_at_millis=int(last_updated) * 1000,
            is_stale=bool(is_stale),
        )

    async def request_refresh(self, signer: Signer) -> Dict[str, Any]:
        """Ask the reader to pull a new price; returns the successful receipt.

        Raises:
            ConfigurationError: the reader is not configured
        """
        if not self.gateway.is_configured(READER):
            raise ConfigurationError("GoldReader not configured", contract=READER)
        reader = self.gateway.resolve(READER, signer)
        tx_hash = await reader.transact("updatePrice")
        cfg = self.gateway.settings
        receipt = await reader.confirm(
            tx_hash,
            timeout=cfg.receipt_timeout_seconds,
            poll_interval=cfg.receipt_poll_interval_seconds,
        )
        self.logger.info("Gold price refresh mined in %s", tx_hash)
        return receipt
