"""Tests for MarketCatalog asset-list normalization."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from swyftx.config import FeeSettings
from swyftx.exceptions import NormalizationError
from swyftx.market_data.catalog import MarketCatalog


@pytest.fixture
def catalog_request(assets) -> AsyncMock:
    return AsyncMock(return_value=assets)


@pytest.fixture
def catalog(catalog_request: AsyncMock) -> MarketCatalog:
    return MarketCatalog(catalog_request, FeeSettings())


class TestFetchMarkets:
    @pytest.mark.asyncio
    async def test_one_public_call(self, catalog: MarketCatalog, catalog_request: AsyncMock) -> None:
        await catalog.fetch_markets()
        catalog_request.assert_awaited_once_with("markets/assets/", "public", "GET")

    @pytest.mark.asyncio
    async def test_settlement_currency_is_skipped(self, catalog: MarketCatalog) -> None:
        markets = await catalog.fetch_markets()
        assert [m.symbol for m in markets] == ["BTC/AUD", "ETH/AUD", "XRP/AUD"]
        assert all(m.base != "AUD" for m in markets)

    @pytest.mark.asyncio
    async def test_every_market_quotes_aud(self, catalog: MarketCatalog) -> None:
        markets = await catalog.fetch_markets()
        assert all(m.quote == "AUD" and m.quote_id == "AUD" for m in markets)

    @pytest.mark.asyncio
    async def test_non_list_response_raises(self, catalog_request: AsyncMock) -> None:
        catalog_request.return_value = {"error": "maintenance"}
        catalog = MarketCatalog(catalog_request, FeeSettings())
        with pytest.raises(NormalizationError, match="JSON array"):
            await catalog.fetch_markets()


class TestParseMarket:
    def test_btc_fields(self, catalog: MarketCatalog, assets) -> None:
        market = catalog.parse_market(assets[1])
        assert market.id == "3"
        assert market.symbol == "BTC/AUD"
        assert market.base_id == "BTC"
        assert market.price_precision == 2
        assert market.amount_precision == 6
        assert market.maker == Decimal("0.006")
        assert market.taker == Decimal("0.006")
        assert market.active is True
        assert market.info is assets[1]

    def test_numeric_increment(self, catalog: MarketCatalog, assets) -> None:
        assert catalog.parse_market(assets[2]).amount_precision == 3

    def test_not_tradable_asset_is_inactive(self, catalog: MarketCatalog, assets) -> None:
        market = catalog.parse_market(assets[3])
        assert market.active is False
        assert market.amount_precision == 1

    def test_lowercase_code_is_upper_cased(self, catalog: MarketCatalog) -> None:
        market = catalog.parse_market(
            {"id": 9, "code": "doge", "price_scale": 6, "minimum_order_increment": "1"}
        )
        assert market.symbol == "DOGE/AUD"
        assert market.base_id == "doge"
        assert market.amount_precision == 0

    def test_missing_increment_raises(self, catalog: MarketCatalog) -> None:
        with pytest.raises(NormalizationError, match="minimum_order_increment"):
            catalog.parse_market({"id": 9, "code": "DOGE", "price_scale": 6})

    def test_missing_code_raises(self, catalog: MarketCatalog) -> None:
        with pytest.raises(NormalizationError, match="id or code"):
            catalog.parse_market({"id": 9, "minimum_order_increment": "1"})

    def test_quote_fee_override(self, catalog_request: AsyncMock, assets) -> None:
        fees = FeeSettings(quote_overrides={"AUD": {"taker": Decimal("0.004")}})
        market = MarketCatalog(catalog_request, fees).parse_market(assets[1])
        assert market.taker == Decimal("0.004")
        assert market.maker == Decimal("0.006")


class TestAssetCodes:
    def test_includes_settlement_currency(self, assets) -> None:
        codes = MarketCatalog.asset_codes(assets)
        assert codes == {"1": "AUD", "3": "BTC", "5": "ETH", "12": "XRP"}
