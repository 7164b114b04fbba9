"""Fixed-point conversion and presentation helpers."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

PRICE_DECIMALS = 8
TOKEN_DECIMALS = 18

Number = Union[Decimal, int, str]


def format_token_amount(amount: int, decimals: int = TOKEN_DECIMALS) -> Decimal:
    """Scale an on-chain integer down by ``10**decimals`` without rounding."""
    quantum = Decimal(1).scaleb(-decimals)
    return Decimal(int(amount)).scaleb(-decimals).quantize(quantum)


def parse_token_amount(amount: Number, decimals: int = TOKEN_DECIMALS) -> int:
    """``"1.5"`` -> ``1500000000000000000`` for 18 decimals.

    Raises:
        ValueError: not a number, negative, or more precision than ``decimals``
    """
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {amount!r}") from exc
    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid amount: {amount!r}")
    scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"{amount} has more than {decimals} decimal places")
    return int(scaled)


def to_price(raw: int) -> Decimal:
    """Normalize a raw oracle value to the 8-decimal price representation."""
    return format_token_amount(raw, PRICE_DECIMALS)


def format_usd(amount: Number) -> str:
    """``Decimal("2500.456")`` -> ``"$2,500.46"``. Presentation only."""
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_poi(amount: Number) -> str:
    value = Decimal(str(amount)).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
    return f"{value:.4f} POI"
