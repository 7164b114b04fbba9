from decimal import Decimal

import pytest

from goldpeg.core.pricing import (
    PriceQuote,
    PriceSource,
    format_poi,
    format_token_amount,
    format_usd,
    parse_token_amount,
    to_price,
)


def test_to_price_keeps_eight_decimals() -> None:
    assert to_price(2500000000) == Decimal("25.00000000")
    assert format(to_price(1), "f") == "0.00000001"


def test_format_token_amount_does_not_round() -> None:
    assert format_token_amount(1234567890123456789) == Decimal("1.234567890123456789")


def test_parse_token_amount() -> None:
    assert parse_token_amount("1.5") == 1500000000000000000
    assert parse_token_amount(2, decimals=8) == 200000000


@pytest.mark.parametrize("amount", ["abc", "-1", "0.0000000000000000001", "NaN"])
def test_parse_token_amount_rejects(amount) -> None:
    with pytest.raises(ValueError):
        parse_token_amount(amount)


def test_format_usd() -> None:
    assert format_usd(Decimal("2500.456")) == "$2,500.46"
    assert format_usd(Decimal("0.005")) == "$0.01"
    assert format_usd("-12.5") == "-$12.50"


def test_format_poi() -> None:
    assert format_poi(Decimal("1000000.123456")) == "1000000.1235 POI"


def test_tiny_quote_serializes_without_exponent() -> None:
    quote = PriceQuote(to_price(1), PriceSource.SECONDARY_FALLBACK, 1700000000000)

    assert quote.to_dict()["price"] == "0.00000001"


def test_quote_is_quantized_and_serializable() -> None:
    quote = PriceQuote(Decimal("25.5"), PriceSource.PRIMARY_LIVE, 1700000000000)

    assert str(quote.amount_per_gram) == "25.50000000"
    assert quote.to_dict() == {
        "price": "25.50000000",
        "source": "GoldReader (Live)",
        "timestamp": 1700000000000,
        "isStale": False,
    }
