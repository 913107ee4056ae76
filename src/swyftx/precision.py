"""Numeric field extraction and precision helpers.

All monetary values use Decimal. Rounding is delegated to ccxt's
decimal_to_precision so results match every other ccxt-style connector.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from ccxt.base.decimal_to_precision import (
    DECIMAL_PLACES,
    NO_PADDING,
    ROUND,
    TRUNCATE,
    decimal_to_precision,
)
from ccxt.base.exchange import Exchange

from swyftx.exceptions import NormalizationError


def safe_string(record: Any, key: str, default: str | None = None) -> str | None:
    """Return record[key] as a string, or default when absent or empty."""
    return Exchange.safe_string(record, key, default)


def safe_integer(record: Any, key: str, default: int | None = None) -> int | None:
    """Return record[key] as an int, accepting numeric strings."""
    return Exchange.safe_integer(record, key, default)


def safe_decimal(record: Any, key: str, default: Decimal | None = None) -> Decimal | None:
    """Return record[key] as a Decimal, accepting numbers or numeric strings.

    Raises:
        NormalizationError: If the field is present but not numeric.
    """
    value = safe_string(record, key)
    if value is None:
        return default
    try:
        result = Decimal(value)
    except InvalidOperation as exc:
        raise NormalizationError(f"field {key!r} is not numeric: {value!r}") from exc
    if not result.is_finite():
        raise NormalizationError(f"field {key!r} is not finite: {value!r}")
    return result


def precision_from_increment(increment: Decimal | str | int | float) -> int:
    """Number of decimal places implied by a minimum order increment.

    Equivalent to floor(-log10(increment)) computed on the decimal digits:
    an exact power of ten 10**e gives -e, anything else between 10**e and
    10**(e+1) gives -e - 1. So 0.001 -> 3, 0.0009999 -> 3, 0.1 -> 1, 1 -> 0.

    Raises:
        NormalizationError: If the increment is not a positive number.
    """
    try:
        value = Decimal(str(increment))
    except InvalidOperation as exc:
        raise NormalizationError(f"invalid order increment: {increment!r}") from exc
    if not value.is_finite() or value <= 0:
        raise NormalizationError(f"order increment must be positive: {increment!r}")

    exponent = value.adjusted()
    is_power_of_ten = value.normalize().as_tuple().digits == (1,)
    return -exponent if is_power_of_ten else -exponent - 1


def amount_to_precision(amount: Decimal | str | float, precision: int) -> str:
    """Truncate an order amount to the market's decimal places."""
    return decimal_to_precision(str(amount), TRUNCATE, precision, DECIMAL_PLACES, NO_PADDING)


def price_to_precision(price: Decimal | str | float, precision: int | None) -> str:
    """Round a price to the market's decimal places.

    Markets that publish no price scale are passed through unrounded.
    """
    if precision is None:
        return str(price)
    return decimal_to_precision(str(price), ROUND, precision, DECIMAL_PLACES, NO_PADDING)
