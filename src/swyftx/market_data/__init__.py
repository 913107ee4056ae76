"""Market data normalization -- asset catalog and candle parsing."""

from swyftx.market_data.catalog import SETTLEMENT_CURRENCY, MarketCatalog
from swyftx.market_data.ohlcv import OHLCVParser

__all__ = ["MarketCatalog", "OHLCVParser", "SETTLEMENT_CURRENCY"]
