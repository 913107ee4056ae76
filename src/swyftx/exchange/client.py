"""Abstract exchange client interface.

Defines the exchange-agnostic contract trading code depends on, keeping
Swyftx-specific details isolated in the concrete implementation.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from swyftx.models import OHLCV, Balance, Market, Order, OrderSide, OrderType


class ExchangeClient(ABC):
    """Abstract base class for exchange API clients."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the transport and load markets."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the transport."""
        ...

    @abstractmethod
    async def load_markets(self, reload: bool = False) -> dict[str, Market]:
        """Load and cache markets keyed by canonical symbol."""
        ...

    @abstractmethod
    async def fetch_markets(self) -> list[Market]:
        """Fetch tradable markets in upstream order."""
        ...

    @abstractmethod
    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: int | None = None,
        limit: int | None = None,
    ) -> list[OHLCV]:
        """Fetch candles as (timestamp_ms, open, high, low, close, volume)."""
        ...

    @abstractmethod
    async def fetch_balance(self) -> Balance:
        """Fetch account balances."""
        ...

    @abstractmethod
    async def create_order(
        self,
        symbol: str,
        order_type: OrderType | str,
        side: OrderSide | str,
        amount: Decimal,
        price: Decimal | None = None,
        params: dict | None = None,
    ) -> Order:
        """Place an order on the exchange."""
        ...

    @abstractmethod
    async def cancel_order(self, order_id: str, symbol: str | None = None) -> dict:
        """Cancel an open order."""
        ...

    @abstractmethod
    async def fetch_order(self, order_id: str, symbol: str | None = None) -> Order:
        """Fetch a single order by id."""
        ...
