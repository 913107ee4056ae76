"""Canonical data models exposed by the connector.

All monetary values use Decimal. Never use float for prices, quantities, or fees.
"""

import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, NamedTuple


class OrderSide(str, Enum):
    """Order direction."""

    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    """Order type."""

    MARKET = "market"
    LIMIT = "limit"
    STOP_LIMIT = "stop-limit"


class OrderStatus(str, Enum):
    """Canonical order lifecycle state."""

    OPEN = "open"
    CLOSED = "closed"
    CANCELED = "canceled"
    EXPIRED = "expired"
    REJECTED = "rejected"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Session:
    """Bearer-token session. Replaced wholesale on every refresh.

    version increases by one on each commit so a refresh can detect that
    another one already landed while it was in flight.
    """

    token: str | None = None
    expires_at: int | None = None  # Unix milliseconds
    version: int = 0

    def is_valid(self, now_ms: int) -> bool:
        return self.token is not None and self.expires_at is not None and now_ms <= self.expires_at


@dataclass
class Market:
    """A tradable BASE/QUOTE pair."""

    id: str  # exchange asset id of the base asset
    symbol: str
    base: str
    quote: str
    base_id: str
    quote_id: str
    price_precision: int | None
    amount_precision: int
    maker: Decimal
    taker: Decimal
    active: bool = True
    info: dict = field(default_factory=dict, repr=False)


class OHLCV(NamedTuple):
    """One candle: (timestamp_ms, open, high, low, close, volume)."""

    timestamp: int
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal


@dataclass
class OrderRequest:
    """Request to place an order."""

    symbol: str
    side: OrderSide
    order_type: OrderType
    amount: Decimal
    price: Decimal | None = None
    trigger_price: Decimal | None = None


@dataclass
class Order:
    """Normalized exchange order."""

    id: str
    symbol: str | None
    side: OrderSide
    order_type: OrderType
    status: OrderStatus
    amount: Decimal | None
    price: Decimal | None
    trigger_price: Decimal | None
    filled: Decimal | None
    cost: Decimal | None
    value: Decimal | None
    timestamp: int | None
    last_update_timestamp: int | None
    status_code: int | None = None
    processed: bool | None = None
    info: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class BalanceEntry:
    """Holdings of a single asset."""

    currency: str
    free: Decimal
    staked: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.free + self.staked


@dataclass
class Balance:
    """Account balances keyed by currency code."""

    entries: dict[str, BalanceEntry]
    fetched_at: float = field(default_factory=time.time)
    info: list = field(default_factory=list, repr=False)

    def __getitem__(self, currency: str) -> BalanceEntry:
        return self.entries[currency]
