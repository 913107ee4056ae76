"""Async HTTP transport for signed request descriptors.

Executes a SignedRequest with aiohttp and turns any non-2xx answer into
the ccxt error category from swyftx.exceptions.HTTP_EXCEPTIONS. There is
no retry or rate limiting here: callers decide whether to try again.

Usage:
    async with HttpTransport(timeout_seconds=10) as transport:
        data = await transport.request(url, "GET")
"""

import asyncio
import json
from typing import Any, Protocol

import aiohttp
import ccxt

from swyftx.exceptions import error_for_response
from swyftx.logging import get_logger

logger = get_logger(__name__)


class Transport(Protocol):
    """What the connector needs from an HTTP executor."""

    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: str | None = None,
    ) -> Any: ...


class HttpTransport:
    """aiohttp-backed Transport.

    Attributes:
        timeout_seconds: Total timeout applied to each request.
    """

    def __init__(self, timeout_seconds: float = 10.0) -> None:
        self.timeout_seconds = timeout_seconds
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpTransport":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def open(self) -> None:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds)
            )
            logger.debug("http_session_opened")

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("http_session_closed")
        self._session = None

    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: str | None = None,
    ) -> Any:
        """Perform one HTTP call and return the decoded JSON body.

        Raises:
            ccxt.RequestTimeout: If the call exceeds timeout_seconds.
            ccxt.NetworkError: On connection-level failures.
            ccxt.BaseError: The mapped category for any non-2xx status.
        """
        if self._session is None:
            await self.open()
        assert self._session is not None

        try:
            async with self._session.request(
                method, url, headers=headers, data=body
            ) as resp:
                text = await resp.text()
                status = resp.status
        except asyncio.TimeoutError as exc:
            raise ccxt.RequestTimeout(f"{method} {url} timed out") from exc
        except aiohttp.ClientError as exc:
            raise ccxt.NetworkError(f"{method} {url} failed: {exc}") from exc

        payload = decode_body(text)
        if 200 <= status < 300:
            logger.debug("http_request_ok", method=method, url=url, status=status)
            return payload

        error_class = error_for_response(status, payload)
        logger.warning(
            "http_request_failed",
            method=method,
            url=url,
            status=status,
            error=error_class.__name__,
        )
        raise error_class(f"{method} {url} returned HTTP {status}: {text}")


def decode_body(text: str) -> Any:
    """Decode a JSON body; empty bodies decode to None, non-JSON stays text."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text
