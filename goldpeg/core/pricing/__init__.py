"""
Gold Price Feed

- PriceFeedAggregator: reader-first price fetch with oracle fallback
- PricePoller: fixed-interval refresh of the latest quote
- Formatting helpers for fixed-point amounts and USD display

Usage:
    from goldpeg.core.pricing import PriceFeedAggregator, PricePoller

    aggregator = PriceFeedAggregator()
    poller = PricePoller(aggregator, lambda: manager.session.provider)
    manager.add_invalidation_listener(poller.reset)
    async with poller:
        ...
"""

from .aggregator import PriceFeedAggregator, PrimarySourceUnavailable
from .formatting import (
    PRICE_DECIMALS,
    TOKEN_DECIMALS,
    format_poi,
    format_token_amount,
    format_usd,
    parse_token_amount,
    to_price,
)
from .models import PriceQuote, PriceSource
from .poller import PricePoller, ResponseOrdering

__all__ = [
    "PriceFeedAggregator",
    "PrimarySourceUnavailable",
    "PRICE_DECIMALS",
    "TOKEN_DECIMALS",
    "format_poi",
    "format_token_amount",
    "format_usd",
    "parse_token_amount",
    "to_price",
    "PriceQuote",
    "PriceSource",
    "PricePoller",
    "ResponseOrdering",
]
