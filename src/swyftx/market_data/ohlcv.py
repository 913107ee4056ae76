"""Candle normalization.

Upstream bar (numbers may arrive as strings):
    {
        "time": 1501545600000,
        "open": "4261.48000000",
        "high": "4745.42000000",
        "low": "3400.00000000",
        "close": "4724.89000000",
        "volume": 10015
    }
"""

from swyftx.exceptions import NormalizationError
from swyftx.models import OHLCV
from swyftx.precision import safe_decimal, safe_integer

FIELDS = ("open", "high", "low", "close", "volume")


class OHLCVParser:
    """Projects raw bars onto OHLCV tuples. No resampling."""

    def parse(self, candle: dict) -> OHLCV:
        """Parse one bar.

        Raises:
            NormalizationError: If the bar lacks a timestamp or any price/volume field.
        """
        if not isinstance(candle, dict):
            raise NormalizationError(f"candle must be an object: {candle!r}")
        timestamp = safe_integer(candle, "time")
        if timestamp is None:
            raise NormalizationError(f"candle has no time: {candle!r}")
        values = []
        for name in FIELDS:
            value = safe_decimal(candle, name)
            if value is None:
                raise NormalizationError(f"candle missing {name}: {candle!r}")
            values.append(value)
        return OHLCV(timestamp, *values)

    def parse_many(self, candles: list[dict], since: int | None = None) -> list[OHLCV]:
        """Parse bars in timestamp order, dropping any before since."""
        bars = sorted((self.parse(c) for c in candles), key=lambda bar: bar.timestamp)
        if since is not None:
            bars = [bar for bar in bars if bar.timestamp >= since]
        return bars
