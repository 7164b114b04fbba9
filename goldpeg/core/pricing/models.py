"""
Price quote models.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .formatting import PRICE_DECIMALS, format_usd


class PriceSource(str, Enum):
    """Where a quote came from."""
    PRIMARY_LIVE = "primary_live"              # Reader, fresh
    PRIMARY_STALE = "primary_stale"            # Reader, reports stale
    SECONDARY_FALLBACK = "secondary_fallback"  # Oracle, no timestamp
    ERROR = "error"

    @property
    def label(self) -> str:
        return _SOURCE_LABELS[self]


_SOURCE_LABELS = {
    PriceSource.PRIMARY_LIVE: "GoldReader (Live)",
    PriceSource.PRIMARY_STALE: "GoldReader (stale)",
    PriceSource.SECONDARY_FALLBACK: "GoldPriceOracle",
    PriceSource.ERROR: "Unavailable",
}

_PRICE_QUANTUM = Decimal(1).scaleb(-PRICE_DECIMALS)


@dataclass(frozen=True)
class PriceQuote:
    """Gold price per gram in USD. Each fetch creates a new quote."""
    amount_per_gram: Decimal
    source: PriceSource
    observed_at_millis: int
    is_stale: bool = False

    def __post_init__(self):
        # Always carry exactly 8 decimal places
        object.__setattr__(
            self,
            "amount_per_gram",
            Decimal(self.amount_per_gram).quantize(_PRICE_QUANTUM),
        )

    @property
    def display_price(self) -> str:
        return format_usd(self.amount_per_gram)

    def to_dict(self) -> dict:
        return {
            "price": f"{self.amount_per_gram:f}",
            "source": self.source.label,
            "timestamp": self.observed_at_millis,
            "isStale": self.is_stale,
        }
