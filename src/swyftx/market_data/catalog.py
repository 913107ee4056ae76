"""Normalizes the Swyftx asset list into tradable markets.

Swyftx quotes every asset against AUD only, so each upstream asset record
except AUD itself becomes one BASE/AUD market. Upstream response order is
preserved.

Upstream asset record (abridged):
    {
        "id": 3,
        "code": "BTC",
        "name": "Bitcoin",
        "price_scale": 2,
        "minimum_order_increment": "0.000001",
        "tradable": 1
    }
"""

from collections.abc import Awaitable, Callable
from typing import Any

from ccxt.base.exchange import Exchange

from swyftx.config import FeeSettings
from swyftx.exceptions import NormalizationError
from swyftx.logging import get_logger
from swyftx.models import Market
from swyftx.precision import precision_from_increment, safe_integer, safe_string

logger = get_logger(__name__)

SETTLEMENT_CURRENCY = "AUD"
ASSETS_PATH = "markets/assets/"


class MarketCatalog:
    """Fetches the asset list and builds Market records from it.

    Args:
        request: Coroutine performing (path, access, method) calls.
        fees: Default fee schedule and per-quote overrides.
    """

    def __init__(
        self,
        request: Callable[..., Awaitable[Any]],
        fees: FeeSettings,
    ) -> None:
        self._request = request
        self._fees = fees

    async def fetch_assets(self) -> list[dict]:
        """Fetch the raw asset list (public, unauthenticated)."""
        response = await self._request(ASSETS_PATH, "public", "GET")
        if not isinstance(response, list):
            raise NormalizationError(
                f"asset list must be a JSON array, got {type(response).__name__}"
            )
        return response

    async def fetch_markets(self) -> list[Market]:
        """Fetch the asset list and return one Market per tradable asset."""
        return self.parse_markets(await self.fetch_assets())

    def parse_markets(self, assets: list[dict]) -> list[Market]:
        markets = []
        for asset in assets:
            base_id = safe_string(asset, "code")
            if base_id == SETTLEMENT_CURRENCY:
                continue
            markets.append(self.parse_market(asset))
        logger.debug("markets_parsed", assets=len(assets), markets=len(markets))
        return markets

    def parse_market(self, asset: dict) -> Market:
        """Build a Market from one upstream asset record.

        Raises:
            NormalizationError: If id, code or minimum_order_increment is
                missing or unusable.
        """
        if not isinstance(asset, dict):
            raise NormalizationError(f"asset record must be an object: {asset!r}")
        market_id = safe_string(asset, "id")
        base_id = safe_string(asset, "code")
        increment = safe_string(asset, "minimum_order_increment")
        if market_id is None or base_id is None:
            raise NormalizationError(f"asset record missing id or code: {asset!r}")
        if increment is None:
            raise NormalizationError(
                f"asset {base_id} has no minimum_order_increment"
            )

        base = base_id.upper()
        quote = SETTLEMENT_CURRENCY
        maker, taker = self._fees.for_quote(quote)
        tradable = Exchange.safe_value(asset, "tradable", True)

        return Market(
            id=market_id,
            symbol=f"{base}/{quote}",
            base=base,
            quote=quote,
            base_id=base_id,
            quote_id=SETTLEMENT_CURRENCY,
            price_precision=safe_integer(asset, "price_scale"),
            amount_precision=precision_from_increment(increment),
            maker=maker,
            taker=taker,
            active=bool(tradable),
            info=asset,
        )

    @staticmethod
    def asset_codes(assets: list[dict]) -> dict[str, str]:
        """Map upstream asset id -> asset code, settlement currency included."""
        codes = {}
        for asset in assets:
            asset_id = safe_string(asset, "id")
            code = safe_string(asset, "code")
            if asset_id is not None and code is not None:
                codes[asset_id] = code.upper()
        return codes
