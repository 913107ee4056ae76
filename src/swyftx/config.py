"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

LIVE_API_URL = "https://api.swyftx.com.au"
DEMO_API_URL = "https://api.demo.swyftx.com.au"


class ExchangeSettings(BaseSettings):
    """Swyftx connection and credential settings."""

    model_config = SettingsConfigDict(env_prefix="SWYFTX_")

    api_key: SecretStr = SecretStr("")
    demo_trading: bool = False
    session_ttl_seconds: int = 86400  # exchange tokens last 7 days, refresh daily
    request_timeout_seconds: float = 10.0

    @property
    def api_urls(self) -> dict[str, str]:
        """Base URL per access level ("public" / "private")."""
        base = DEMO_API_URL if self.demo_trading else LIVE_API_URL
        return {"public": base, "private": base}


class FeeSettings(BaseSettings):
    """Swyftx fee schedule (flat, not tier based).

    quote_overrides maps a quote currency code to a partial fee schedule,
    e.g. {"AUD": {"taker": "0.004"}}; missing keys fall back to the defaults.
    """

    model_config = SettingsConfigDict(env_prefix="FEES_")

    taker: Decimal = Decimal("0.006")  # 0.6%
    maker: Decimal = Decimal("0.006")  # 0.6%
    quote_overrides: dict[str, dict[str, Decimal]] = {}

    def for_quote(self, quote: str) -> tuple[Decimal, Decimal]:
        """Return (maker, taker) for markets settling in the given quote currency."""
        override = self.quote_overrides.get(quote, {})
        return override.get("maker", self.maker), override.get("taker", self.taker)


class OrderSettings(BaseSettings):
    """Order normalization settings.

    status_codes maps the numeric upstream order status to a canonical
    status name ("open", "closed", "canceled", "expired", "rejected").
    Codes not listed normalize to "unknown".
    """

    model_config = SettingsConfigDict(env_prefix="ORDERS_")

    status_codes: dict[int, str] = {}


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    exchange: ExchangeSettings = ExchangeSettings()
    fees: FeeSettings = FeeSettings()
    orders: OrderSettings = OrderSettings()
