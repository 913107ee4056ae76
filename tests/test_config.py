"""Tests for settings defaults and derived values."""

from decimal import Decimal

from swyftx.config import DEMO_API_URL, LIVE_API_URL, ExchangeSettings, FeeSettings, OrderSettings


def test_live_urls_by_default() -> None:
    settings = ExchangeSettings(demo_trading=False)
    assert settings.api_urls == {"public": LIVE_API_URL, "private": LIVE_API_URL}


def test_demo_trading_switches_urls() -> None:
    settings = ExchangeSettings(demo_trading=True)
    assert settings.api_urls["private"] == DEMO_API_URL
    assert "api.demo.swyftx.com.au" in settings.api_urls["public"]


def test_session_window_is_one_day() -> None:
    assert ExchangeSettings().session_ttl_seconds == 86400


def test_default_fee_schedule() -> None:
    assert FeeSettings().for_quote("AUD") == (Decimal("0.006"), Decimal("0.006"))


def test_partial_quote_override() -> None:
    fees = FeeSettings(quote_overrides={"AUD": {"maker": Decimal("0.001")}})
    assert fees.for_quote("AUD") == (Decimal("0.001"), Decimal("0.006"))
    assert fees.for_quote("USD") == (Decimal("0.006"), Decimal("0.006"))


def test_status_codes_from_env(monkeypatch) -> None:
    monkeypatch.setenv("ORDERS_STATUS_CODES", '{"1": "open", "4": "closed"}')
    assert OrderSettings().status_codes == {1: "open", 4: "closed"}
