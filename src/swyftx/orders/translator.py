"""Maps canonical orders to the Swyftx order encoding and back.

Swyftx folds type and side into one numeric orderType. Every order is
primary=AUD / secondary=<asset id>, with the quantity expressed in the
secondary asset.

Trigger direction follows the exchange: for buys the trigger is primary
per secondary (52000 AUD/BTC -> 52000); for sells it is secondary per
primary (1 BTC / 52000 AUD -> 0.0000192307). Callers pass it in the
exchange's direction and it is only rounded here.

Upstream order (abridged):
    {
        "orderUuid": "ord_4TgCaoJc7pY...",
        "order": {
            "order_type": 1,
            "primary_asset": 1,
            "secondary_asset": 3,
            "quantity_asset": 3,
            "quantity": 0.05,
            "trigger": 52000,
            "status": 1,
            "created_time": 1623296438209,
            "updated_time": 1623296438200,
            "amount": 0.05,
            "total": 2600,
            "rate": 52000,
            "aud_value": 2600
        },
        "processed": false
    }
"""

from decimal import Decimal

import ccxt

from swyftx.config import OrderSettings
from swyftx.exceptions import NormalizationError
from swyftx.logging import get_logger
from swyftx.models import Market, Order, OrderRequest, OrderSide, OrderStatus, OrderType
from swyftx.precision import (
    amount_to_precision,
    price_to_precision,
    safe_decimal,
    safe_integer,
    safe_string,
)

logger = get_logger(__name__)

ORDER_TYPE_CODES: dict[tuple[OrderType, OrderSide], int] = {
    (OrderType.MARKET, OrderSide.BUY): 1,
    (OrderType.MARKET, OrderSide.SELL): 2,
    (OrderType.LIMIT, OrderSide.BUY): 3,
    (OrderType.LIMIT, OrderSide.SELL): 4,
    (OrderType.STOP_LIMIT, OrderSide.BUY): 5,
    (OrderType.STOP_LIMIT, OrderSide.SELL): 6,
}

ORDER_TYPES_BY_CODE = {code: key for key, code in ORDER_TYPE_CODES.items()}

# Spellings accepted for stop-limit besides the enum value
_TYPE_ALIASES = {"stop limit": OrderType.STOP_LIMIT, "stop_limit": OrderType.STOP_LIMIT}


def resolve_order_type(order_type: OrderType | str) -> OrderType:
    """Parse an order type, rejecting anything outside market/limit/stop-limit."""
    if isinstance(order_type, OrderType):
        return order_type
    key = str(order_type).lower()
    if key in _TYPE_ALIASES:
        return _TYPE_ALIASES[key]
    try:
        return OrderType(key)
    except ValueError:
        raise ccxt.InvalidOrder(f"swyftx does not support order type {order_type!r}") from None


def resolve_side(side: OrderSide | str) -> OrderSide:
    if isinstance(side, OrderSide):
        return side
    try:
        return OrderSide(str(side).lower())
    except ValueError:
        raise ccxt.InvalidOrder(f"swyftx does not support order side {side!r}") from None


class OrderTranslator:
    """Builds create-order bodies and parses order responses.

    Args:
        settlement_currency: Primary asset code every order trades against.
        settings: Status code table used when parsing orders.
    """

    def __init__(self, settlement_currency: str, settings: OrderSettings | None = None) -> None:
        self._settlement = settlement_currency
        self._settings = settings or OrderSettings()

    def build_create_order_request(self, request: OrderRequest, market: Market) -> dict:
        """Encode an OrderRequest as the POST orders/ body.

        Validation happens before anything is returned, so nothing
        invalid ever reaches the exchange.

        Raises:
            ccxt.ArgumentsRequired: Limit/stop-limit without price, or
                stop-limit without trigger_price.
            ccxt.InvalidOrder: Unknown type or side.
            ccxt.BadSymbol: The request names a different market than the one given.
        """
        if request.symbol != market.symbol:
            raise ccxt.BadSymbol(
                f"swyftx order for {request.symbol} cannot be placed on market {market.symbol}"
            )
        order_type = resolve_order_type(request.order_type)
        side = resolve_side(request.side)

        body: dict = {
            "primary": self._settlement,
            "secondary": market.id,
            "quantity": amount_to_precision(request.amount, market.amount_precision),
            "assetQuantity": market.id,
        }

        if order_type in (OrderType.LIMIT, OrderType.STOP_LIMIT):
            if request.price is None:
                raise ccxt.ArgumentsRequired(
                    f"swyftx createOrder() requires a price argument for a {order_type.value} order"
                )
            body["trigger"] = price_to_precision(request.price, market.price_precision)

        if order_type is OrderType.STOP_LIMIT:
            if request.trigger_price is None:
                raise ccxt.ArgumentsRequired(
                    f"swyftx createOrder() requires a triggerPrice parameter for a {order_type.value} order"
                )
            body["triggerPrice"] = price_to_precision(
                request.trigger_price, market.price_precision
            )

        body["orderType"] = ORDER_TYPE_CODES[(order_type, side)]
        return body

    def parse_order(self, response: dict, market: Market | None = None) -> Order:
        """Decode an order response (create, byId or list entry).

        Accepts both the wrapped {"orderUuid", "order", "processed"} shape
        and a bare order object carrying its own orderUuid.

        Raises:
            NormalizationError: If the id or order_type is missing, or the
                order_type code is not one of the six known codes.
        """
        if not isinstance(response, dict):
            raise NormalizationError(f"order response must be an object: {response!r}")
        order = response.get("order", response)
        if not isinstance(order, dict):
            raise NormalizationError(f"order payload must be an object: {order!r}")

        order_id = safe_string(response, "orderUuid") or safe_string(order, "orderUuid")
        if order_id is None:
            raise NormalizationError(f"order response has no orderUuid: {response!r}")

        type_code = safe_integer(order, "order_type")
        if type_code not in ORDER_TYPES_BY_CODE:
            raise NormalizationError(f"unknown swyftx order_type {type_code!r} on {order_id}")
        order_type, side = ORDER_TYPES_BY_CODE[type_code]

        status_code = safe_integer(order, "status")
        status = self._parse_status(status_code)

        secondary = safe_string(order, "secondary_asset")
        quantity_asset = safe_string(order, "quantity_asset")
        quantity = safe_decimal(order, "quantity")
        in_secondary = quantity_asset is not None and quantity_asset == secondary

        if market is not None and secondary is not None and secondary != market.id:
            logger.warning(
                "order_market_mismatch",
                order_id=order_id,
                secondary_asset=secondary,
                market_id=market.id,
            )

        processed = response.get("processed")
        return Order(
            id=order_id,
            symbol=market.symbol if market is not None else None,
            side=side,
            order_type=order_type,
            status=status,
            amount=quantity if in_secondary else None,
            price=self._nonzero(safe_decimal(order, "rate")),
            trigger_price=self._nonzero(safe_decimal(order, "trigger")),
            filled=safe_decimal(order, "amount"),
            cost=quantity if quantity_asset is not None and not in_secondary else None,
            value=safe_decimal(order, "aud_value"),
            timestamp=safe_integer(order, "created_time"),
            last_update_timestamp=safe_integer(order, "updated_time"),
            status_code=status_code,
            processed=processed if isinstance(processed, bool) else None,
            info=response,
        )

    def _parse_status(self, code: int | None) -> OrderStatus:
        name = self._settings.status_codes.get(code) if code is not None else None
        if name is None:
            return OrderStatus.UNKNOWN
        try:
            return OrderStatus(name)
        except ValueError:
            raise NormalizationError(f"status code {code} maps to unknown status {name!r}") from None

    @staticmethod
    def _nonzero(value: Decimal | None) -> Decimal | None:
        return value if value else None
