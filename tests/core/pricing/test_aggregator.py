"""
Tests for the gold Price Feed Aggregator (reader first, oracle fallback).
"""

from decimal import Decimal

import pytest

from conftest import ACCOUNT, ORACLE, READER, FakeWalletProvider
from goldpeg.config import ZERO_ADDRESS, Settings
from goldpeg.core.contracts import ChainReader, ContractGateway, Signer
from goldpeg.core.errors import ConfigurationError, PriceUnavailableError, RpcFailure
from goldpeg.core.pricing import PriceFeedAggregator, PriceSource
from goldpeg.providers import ProviderRpcError

LAST_UPDATED = 1_700_000_000
NOW = 1_700_000_123.456


@pytest.fixture
def reader(provider: FakeWalletProvider) -> ChainReader:
    return ChainReader(provider)


@pytest.fixture
def aggregator(configured_settings: Settings) -> PriceFeedAggregator:
    return PriceFeedAggregator(ContractGateway(configured_settings), clock=lambda: NOW)


def _reader_answers(provider: FakeWalletProvider, *, price=2500000000, last_updated=LAST_UPDATED, stale=False):
    provider.set_result(READER, "getGoldPricePerGram", price)
    provider.set_result(READER, "lastUpdated", last_updated)
    provider.set_result(READER, "isPriceStale", stale)


# =============================================================================
# Primary source
# =============================================================================

class TestPrimarySource:

    @pytest.mark.asyncio
    async def test_live_reader_price(self, aggregator, reader, provider):
        _reader_answers(provider)

        quote = await aggregator.fetch_price(reader)

        assert quote.amount_per_gram == Decimal("25.00000000")
        assert str(quote.amount_per_gram) == "25.00000000"
        assert quote.source == PriceSource.PRIMARY_LIVE
        assert quote.is_stale is False
        assert quote.observed_at_millis == LAST_UPDATED * 1000
        assert quote.display_price == "$25.00"
        assert provider.calls_to(ORACLE, "getGoldPricePerGram") == 0

    @pytest.mark.asyncio
    async def test_stale_reader_price_is_tagged(self, aggregator, reader, provider):
        _reader_answers(provider, stale=True)

        quote = await aggregator.fetch_price(reader)

        assert quote.source == PriceSource.PRIMARY_STALE
        assert quote.is_stale is True
        assert quote.source.label == "GoldReader (stale)"

    @pytest.mark.asyncio
    async def test_never_updated_reader_falls_back(self, aggregator, reader, provider):
        _reader_answers(provider, price=0, last_updated=0)
        provider.set_result(ORACLE, "getGoldPricePerGram", 6543210000)

        quote = await aggregator.fetch_price(reader)

        assert quote.source == PriceSource.SECONDARY_FALLBACK
        assert quote.amount_per_gram == Decimal("65.43210000")
        assert provider.calls_to(ORACLE, "getGoldPricePerGram") == 1
        # The zero price is never read
        assert provider.calls_to(READER, "getGoldPricePerGram") == 0


# =============================================================================
# Fallback source
# =============================================================================

class TestFallback:

    @pytest.mark.asyncio
    async def test_reader_error_falls_back_once(self, aggregator, reader, provider):
        _reader_answers(provider)
        provider.set_result(READER, "isPriceStale", ProviderRpcError(-32000, "header not found"))
        provider.set_result(ORACLE, "getGoldPricePerGram", 2500000000)

        quote = await aggregator.fetch_price(reader)

        assert quote.source == PriceSource.SECONDARY_FALLBACK
        assert quote.is_stale is False
        assert quote.observed_at_millis == int(NOW * 1000)
        assert provider.calls_to(ORACLE, "getGoldPricePerGram") == 1

    @pytest.mark.asyncio
    async def test_unconfigured_reader_goes_straight_to_oracle(self, reader, provider):
        settings = Settings(gold_reader_address=ZERO_ADDRESS, gold_price_oracle_address=ORACLE)
        provider.set_result(ORACLE, "getGoldPricePerGram", 2500000000)

        quote = await PriceFeedAggregator(ContractGateway(settings)).fetch_price(reader)

        assert quote.source == PriceSource.SECONDARY_FALLBACK
        assert provider.contract_calls == [(ORACLE, "getGoldPricePerGram")]

    @pytest.mark.asyncio
    async def test_both_sources_failing(self, aggregator, reader, provider):
        provider.set_result(READER, "lastUpdated", ProviderRpcError(-32000, "down"))
        provider.set_result(READER, "isPriceStale", False)
        provider.set_result(ORACLE, "getGoldPricePerGram", ProviderRpcError(-32000, "down"))

        with pytest.raises(PriceUnavailableError, match="Failed to fetch gold price") as exc_info:
            await aggregator.fetch_price(reader)

        assert isinstance(exc_info.value.__cause__, RpcFailure)
        assert provider.calls_to(ORACLE, "getGoldPricePerGram") == 1

    @pytest.mark.asyncio
    async def test_unconfigured_oracle_is_configuration_error(self, reader):
        settings = Settings(gold_reader_address=ZERO_ADDRESS, gold_price_oracle_address=ZERO_ADDRESS)

        with pytest.raises(ConfigurationError):
            await PriceFeedAggregator(ContractGateway(settings)).fetch_price(reader)


# =============================================================================
# Refresh
# =============================================================================

class TestRequestRefresh:

    @pytest.mark.asyncio
    async def test_refresh_sends_update_price(self, aggregator, provider):
        receipt = await aggregator.request_refresh(Signer(provider, ACCOUNT))

        assert receipt["status"] == "0x1"
        tx = provider.calls_for("eth_sendTransaction")[0][0]
        assert tx["to"].lower() == READER

    @pytest.mark.asyncio
    async def test_refresh_requires_reader(self, provider):
        aggregator = PriceFeedAggregator(ContractGateway(Settings(gold_reader_address=ZERO_ADDRESS)))

        with pytest.raises(ConfigurationError):
            await aggregator.request_refresh(Signer(provider, ACCOUNT))
        assert provider.calls_for("eth_sendTransaction") == []
