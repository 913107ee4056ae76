"""Connector exceptions and the HTTP status to error category table.

Canonical error types are ccxt's, so callers written against any ccxt
exchange can catch them unchanged. Only the cases ccxt has no name for
are subclassed here.
"""

import ccxt


class CredentialError(ccxt.AuthenticationError):
    """Raised when the API key is missing or the session mint is rejected."""


class NormalizationError(ccxt.BadResponse):
    """Raised when an upstream payload does not have the expected shape."""


# Stable contract: HTTP status -> error category
HTTP_EXCEPTIONS: dict[int, type[ccxt.BaseError]] = {
    400: ccxt.BadRequest,
    401: ccxt.AuthenticationError,
    402: ccxt.InsufficientFunds,
    403: ccxt.AuthenticationError,
    404: ccxt.OrderNotFound,
    408: ccxt.RequestTimeout,
    409: ccxt.ExchangeNotAvailable,
    410: ccxt.ExchangeNotAvailable,
    418: ccxt.DDoSProtection,
    422: ccxt.BadRequest,
    429: ccxt.RateLimitExceeded,
    500: ccxt.ExchangeNotAvailable,
    501: ccxt.ExchangeNotAvailable,
    502: ccxt.ExchangeNotAvailable,
    503: ccxt.ExchangeNotAvailable,
    504: ccxt.RequestTimeout,
    511: ccxt.AuthenticationError,
    520: ccxt.ExchangeNotAvailable,
    521: ccxt.ExchangeNotAvailable,
    522: ccxt.ExchangeNotAvailable,
    525: ccxt.ExchangeNotAvailable,
    526: ccxt.ExchangeNotAvailable,
    530: ccxt.ExchangeNotAvailable,
}

# Upstream error codes (body["error"]["error"]) that refine the status category
EXACT_EXCEPTIONS: dict[str, type[ccxt.BaseError]] = {
    "InsufficientFunds": ccxt.InsufficientFunds,
    "OrderNotFound": ccxt.OrderNotFound,
    "RateLimit": ccxt.RateLimitExceeded,
}


def error_for_response(status: int, body: object) -> type[ccxt.BaseError]:
    """Pick the error category for a non-2xx response."""
    if isinstance(body, dict):
        error = body.get("error")
        code = error.get("error") if isinstance(error, dict) else None
        if isinstance(code, str) and code in EXACT_EXCEPTIONS:
            return EXACT_EXCEPTIONS[code]
    return HTTP_EXCEPTIONS.get(status, ccxt.ExchangeError)
