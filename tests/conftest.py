"""Shared test fixtures for the Swyftx connector."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from swyftx.config import AppSettings, ExchangeSettings, FeeSettings, OrderSettings
from swyftx.models import Market

API_ROOT = "https://api.swyftx.com.au/"

ASSETS = [
    {"id": 1, "code": "AUD", "name": "Australian Dollar", "price_scale": 2, "minimum_order_increment": "0.01"},
    {"id": 3, "code": "BTC", "name": "Bitcoin", "price_scale": 2, "minimum_order_increment": "0.000001"},
    {"id": 5, "code": "ETH", "name": "Ethereum", "price_scale": 2, "minimum_order_increment": 0.001},
    {"id": 12, "code": "XRP", "name": "Ripple", "price_scale": 5, "minimum_order_increment": "0.1", "tradable": 0},
]


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def route_transport(routes: dict[tuple[str, str], object]) -> AsyncMock:
    """AsyncMock transport answering (method, path) from a routing table.

    Paths are relative to the API root with any query string removed.
    A route value that is an exception instance is raised instead.
    """

    async def handler(url, method="GET", headers=None, body=None):
        path = url.removeprefix(API_ROOT).split("?", 1)[0]
        response = routes[(method, path)]
        if isinstance(response, Exception):
            raise response
        return response

    transport = AsyncMock()
    transport.request.side_effect = handler
    return transport


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with a dummy API key and a known status table."""
    return AppSettings(
        log_level="DEBUG",
        exchange=ExchangeSettings(
            api_key="test-api-key",  # type: ignore[arg-type]
            demo_trading=False,
        ),
        fees=FeeSettings(),
        orders=OrderSettings(status_codes={1: "open", 4: "closed", 5: "canceled"}),
    )


@pytest.fixture
def btc_market() -> Market:
    return Market(
        id="3",
        symbol="BTC/AUD",
        base="BTC",
        quote="AUD",
        base_id="BTC",
        quote_id="AUD",
        price_precision=2,
        amount_precision=6,
        maker=Decimal("0.006"),
        taker=Decimal("0.006"),
    )


@pytest.fixture
def assets() -> list[dict]:
    return [dict(asset) for asset in ASSETS]


@pytest.fixture
def make_transport():
    """Factory fixture for routed AsyncMock transports."""
    return route_transport
