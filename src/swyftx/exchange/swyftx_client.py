"""Swyftx exchange client.

Wires CredentialManager, RequestSigner and the HTTP transport together and
exposes the exchange-agnostic ExchangeClient operations on top of the
market, candle and order normalizers.

Swyftx trades every asset against AUD only; markets are BASE/AUD and
orders always use AUD as the primary asset.
"""

from decimal import Decimal
from typing import Any

import ccxt

from swyftx.config import AppSettings
from swyftx.exceptions import NormalizationError
from swyftx.exchange.client import ExchangeClient
from swyftx.exchange.session import LOGOUT_PATH, CredentialManager, milliseconds
from swyftx.exchange.signer import AccessLevel, RequestSigner
from swyftx.exchange.transport import HttpTransport, Transport
from swyftx.logging import get_logger, request_context
from swyftx.market_data import SETTLEMENT_CURRENCY, MarketCatalog, OHLCVParser
from swyftx.models import (
    OHLCV,
    Balance,
    BalanceEntry,
    Market,
    Order,
    OrderRequest,
    OrderSide,
    OrderType,
)
from swyftx.orders import OrderTranslator
from swyftx.precision import safe_decimal, safe_string

logger = get_logger(__name__)

TIMEFRAMES = {
    "1m": "1m",
    "5m": "5m",
    "1h": "1h",
    "4h": "4h",
    "1d": "1d",
}

TIMEFRAME_MS = {
    "1m": 60_000,
    "5m": 300_000,
    "1h": 3_600_000,
    "4h": 14_400_000,
    "1d": 86_400_000,
}

CANDLE_SIDES = ("ask", "bid")

BARS_PATH = "charts/getBars/{primary}/{secondary}/{side}/"
LIVE_RATES_PATH = "live-rates/{asset}/"
BALANCE_PATH = "user/balance/"
ORDERS_PATH = "orders/"
ORDER_PATH = "orders/{order_id}/"
ORDER_BY_ID_PATH = "orders/byId/{order_id}"
ORDERS_BY_ASSET_PATH = "orders/{asset}"


class SwyftxClient(ExchangeClient):
    """Concrete Swyftx client.

    Args:
        settings: Application settings (credentials, fees, order status table).
        transport: HTTP executor; an aiohttp HttpTransport when omitted.

    Usage:
        async with SwyftxClient(AppSettings()) as client:
            markets = await client.fetch_markets()
            order = await client.create_order("BTC/AUD", "limit", "buy", Decimal("0.01"), Decimal("52000"))
    """

    def __init__(self, settings: AppSettings, transport: Transport | None = None) -> None:
        self._settings = settings
        exchange = settings.exchange
        self._transport = transport or HttpTransport(exchange.request_timeout_seconds)
        self._owns_transport = transport is None

        urls = exchange.api_urls
        self.credentials = CredentialManager(
            api_key=exchange.api_key.get_secret_value(),
            transport=self._transport,
            base_url=urls["private"],
            ttl_ms=exchange.session_ttl_seconds * 1000,
        )
        self.signer = RequestSigner(self.credentials, urls)
        self.catalog = MarketCatalog(self._request, settings.fees)
        self.ohlcv_parser = OHLCVParser()
        self.translator = OrderTranslator(SETTLEMENT_CURRENCY, settings.orders)

        self._markets: dict[str, Market] = {}
        self._markets_by_id: dict[str, Market] = {}
        self._asset_codes: dict[str, str] = {}

    async def __aenter__(self) -> "SwyftxClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def connect(self) -> None:
        """Open the transport and load markets."""
        logger.info("connecting_to_swyftx", demo=self._settings.exchange.demo_trading)
        if isinstance(self._transport, HttpTransport):
            await self._transport.open()
        await self.load_markets()
        logger.info("swyftx_connected", market_count=len(self._markets))

    async def close(self) -> None:
        if self._owns_transport and isinstance(self._transport, HttpTransport):
            await self._transport.close()
        logger.info("swyftx_connection_closed")

    async def _request(
        self,
        path: str,
        access: AccessLevel = "public",
        method: str = "GET",
        params: dict | None = None,
        query: dict | None = None,
    ) -> Any:
        with request_context(path=path, access=access):
            signed = await self.signer.sign(path, access, method, params, query)
            return await self._transport.request(
                signed.url, signed.method, headers=signed.headers, body=signed.body
            )

    # ──────────────────────────────────────────────
    # Markets
    # ──────────────────────────────────────────────

    async def fetch_markets(self) -> list[Market]:
        return await self.catalog.fetch_markets()

    async def load_markets(self, reload: bool = False) -> dict[str, Market]:
        """Load and cache markets keyed by symbol (and asset codes by id)."""
        if self._markets and not reload:
            return self._markets
        assets = await self.catalog.fetch_assets()
        markets = self.catalog.parse_markets(assets)
        self._markets = {market.symbol: market for market in markets}
        self._markets_by_id = {market.id: market for market in markets}
        self._asset_codes = self.catalog.asset_codes(assets)
        logger.debug("markets_loaded", count=len(self._markets))
        return self._markets

    def market(self, symbol: str) -> Market:
        """Return a loaded market.

        Raises:
            ccxt.BadSymbol: If the symbol is not in the loaded catalog.
        """
        market = self._markets.get(symbol)
        if market is None:
            raise ccxt.BadSymbol(f"swyftx does not have market symbol {symbol}")
        return market

    async def fetch_trading_fee(self, symbol: str) -> dict:
        await self.load_markets()
        market = self.market(symbol)
        return {"symbol": symbol, "maker": market.maker, "taker": market.taker}

    # ──────────────────────────────────────────────
    # Market data
    # ──────────────────────────────────────────────

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: int | None = None,
        limit: int | None = None,
        side: str = "ask",
    ) -> list[OHLCV]:
        """Fetch candles for the ask (default) or bid side of a market.

        Raises:
            ccxt.BadRequest: For a timeframe or side Swyftx does not serve,
                or a limit below one.
        """
        if timeframe not in TIMEFRAMES:
            raise ccxt.BadRequest(f"swyftx does not support timeframe {timeframe}")
        if side not in CANDLE_SIDES:
            raise ccxt.BadRequest(f"swyftx candle side must be ask or bid, got {side!r}")
        if limit is not None and limit < 1:
            raise ccxt.BadRequest(f"swyftx fetchOHLCV() limit must be at least 1, got {limit}")
        await self.load_markets()
        market = self.market(symbol)

        query: dict = {"resolution": TIMEFRAMES[timeframe]}
        if since is not None:
            query["timeStart"] = since
            if limit is not None:
                query["timeEnd"] = since + limit * TIMEFRAME_MS[timeframe]
            else:
                query["timeEnd"] = milliseconds()
        if limit is not None:
            query["limit"] = limit
        path = BARS_PATH.format(primary=market.quote_id, secondary=market.base_id, side=side)

        response = await self._request(path, "public", "GET", query)
        candles = response.get("candles") if isinstance(response, dict) else response
        if not isinstance(candles, list):
            raise NormalizationError(f"unexpected candle response for {symbol}: {response!r}")
        bars = self.ohlcv_parser.parse_many(candles, since)
        return bars[-limit:] if limit is not None else bars

    async def fetch_live_rates(self, asset_id: str | int) -> Any:
        """Return the raw live-rate payload for an asset id."""
        return await self._request(LIVE_RATES_PATH.format(asset=asset_id), "public", "GET")

    # ──────────────────────────────────────────────
    # Account
    # ──────────────────────────────────────────────

    async def fetch_balance(self) -> Balance:
        """Fetch balances, keyed by asset code where the asset is known."""
        await self.load_markets()
        response = await self._request(BALANCE_PATH, "private", "GET")
        if not isinstance(response, list):
            raise NormalizationError(f"balance response must be a list: {response!r}")

        entries = {}
        for row in response:
            asset_id = safe_string(row, "assetId")
            if asset_id is None:
                raise NormalizationError(f"balance entry has no assetId: {row!r}")
            code = self._asset_codes.get(asset_id, asset_id)
            entries[code] = BalanceEntry(
                currency=code,
                free=safe_decimal(row, "availableBalance", Decimal("0")),
                staked=safe_decimal(row, "stakingBalance", Decimal("0")),
            )
        return Balance(entries=entries, info=response)

    async def logout(self) -> None:
        """End the server-side session and forget the local token.

        An already expired token is only dropped locally; minting a fresh
        one just to log it out would be wasted.
        """
        if self.credentials.has_valid_session():
            await self._request(LOGOUT_PATH, "private", "POST")
        self.credentials.invalidate()

    # ──────────────────────────────────────────────
    # Orders
    # ──────────────────────────────────────────────

    async def create_order(
        self,
        symbol: str,
        order_type: OrderType | str,
        side: OrderSide | str,
        amount: Decimal,
        price: Decimal | None = None,
        params: dict | None = None,
    ) -> Order:
        """Place an order.

        params may carry "triggerPrice" (required for stop-limit); any other
        keys are forwarded to the exchange unchanged.
        """
        await self.load_markets()
        market = self.market(symbol)
        extra = dict(params or {})
        trigger_price = extra.pop("triggerPrice", None)

        request = OrderRequest(
            symbol=symbol,
            side=side,  # type: ignore[arg-type]
            order_type=order_type,  # type: ignore[arg-type]
            amount=Decimal(str(amount)),
            price=Decimal(str(price)) if price is not None else None,
            trigger_price=Decimal(str(trigger_price)) if trigger_price is not None else None,
        )
        body = self.translator.build_create_order_request(request, market)
        body.update(extra)

        logger.info(
            "creating_order",
            symbol=symbol,
            quantity=body["quantity"],
            order_type_code=body["orderType"],
        )
        response = await self._request(ORDERS_PATH, "private", "POST", body)
        order = self.translator.parse_order(response, market)
        logger.info("order_created", order_id=order.id, symbol=symbol)
        return order

    async def cancel_order(self, order_id: str, symbol: str | None = None) -> dict:
        logger.info("cancelling_order", order_id=order_id, symbol=symbol)
        response = await self._request(ORDER_PATH.format(order_id=order_id), "private", "DELETE")
        return {"id": order_id, "symbol": symbol, "info": response}

    async def fetch_order(self, order_id: str, symbol: str | None = None) -> Order:
        await self.load_markets()
        response = await self._request(
            ORDER_BY_ID_PATH.format(order_id=order_id), "private", "GET"
        )
        return self.translator.parse_order(response, self._order_market(response, symbol))

    async def fetch_orders(
        self,
        symbol: str,
        limit: int | None = None,
        page: int | None = None,
    ) -> list[Order]:
        """Fetch orders for one market, newest first as returned upstream."""
        await self.load_markets()
        market = self.market(symbol)
        path = ORDERS_BY_ASSET_PATH.format(asset=market.base_id)
        query = {k: v for k, v in (("limit", limit), ("page", page)) if v is not None}
        response = await self._request(path, "private", "GET", query=query)
        rows = response.get("orders") if isinstance(response, dict) else response
        if not isinstance(rows, list):
            raise NormalizationError(f"unexpected order list for {symbol}: {response!r}")
        return [self.translator.parse_order(row, market) for row in rows]

    def _order_market(self, response: Any, symbol: str | None) -> Market | None:
        if symbol is not None:
            return self.market(symbol)
        order = response.get("order", response) if isinstance(response, dict) else None
        if not isinstance(order, dict):
            return None
        secondary = safe_string(order, "secondary_asset")
        return self._markets_by_id.get(secondary) if secondary is not None else None
