"""Bearer-token session lifecycle.

Swyftx authenticates private calls with a short-lived JWT minted from the
API key at POST auth/refresh/. CredentialManager owns the one Session of a
client instance and guarantees it holds an unexpired token before any
private request is signed.

Concurrency: the Session is an immutable value replaced in a single
assignment. Callers that find it expired share one in-flight refresh task
instead of minting their own token, and a refresh only commits if no
other commit happened since it started.
"""

import asyncio
import json
import time
from collections.abc import Callable

import ccxt

from swyftx.exceptions import CredentialError
from swyftx.exchange.transport import Transport
from swyftx.logging import get_logger
from swyftx.models import Session

logger = get_logger(__name__)

MINT_PATH = "auth/refresh/"
LOGOUT_PATH = "auth/logout/"


def milliseconds() -> int:
    return int(time.time() * 1000)


def _retrieve_exception(task: asyncio.Task) -> None:
    # Every waiter may have been cancelled; mark the failure as seen so the
    # loop does not report it as never retrieved.
    if not task.cancelled():
        task.exception()


class CredentialManager:
    """Mints, refreshes and discards the bearer-token Session.

    Args:
        api_key: Swyftx API key; empty means no credential is configured.
        transport: HTTP executor used for the mint call.
        base_url: Base URL the session endpoints live under.
        ttl_ms: Validity window applied to each minted token, measured
            from the moment the mint response arrives.
        clock: Returns the current time in Unix milliseconds.
    """

    def __init__(
        self,
        api_key: str,
        transport: Transport,
        base_url: str,
        ttl_ms: int = 86_400_000,
        clock: Callable[[], int] = milliseconds,
    ) -> None:
        self._api_key = api_key
        self._transport = transport
        self._base_url = base_url.rstrip("/")
        self._ttl_ms = ttl_ms
        self._clock = clock
        self._session = Session()
        self._pending: asyncio.Task[Session] | None = None

    @property
    def session(self) -> Session:
        return self._session

    def has_valid_session(self) -> bool:
        return self._session.is_valid(self._clock())

    def require_credentials(self) -> None:
        if not self._api_key:
            raise CredentialError("swyftx requires apiKey for all private requests")

    async def ensure_valid_session(self) -> Session:
        """Return a Session holding an unexpired token, minting one if needed.

        Concurrent callers that arrive while a refresh is running wait on
        that same refresh. Cancelling one waiter does not cancel the
        refresh the others are waiting on.

        Raises:
            CredentialError: If no API key is configured or the mint is rejected
                (401/403 or a 4xx complaint about the key).
            ccxt.NetworkError: If the mint call cannot reach the exchange.
        """
        self.require_credentials()

        session = self._session
        if session.is_valid(self._clock()):
            return session

        if self._pending is None:
            logger.info(
                "session_refresh_started",
                reason="absent" if session.token is None else "expired",
            )
            self._pending = asyncio.ensure_future(self._refresh(session.version))
            self._pending.add_done_callback(_retrieve_exception)
        return await asyncio.shield(self._pending)

    async def _refresh(self, base_version: int) -> Session:
        try:
            response = await self._transport.request(
                f"{self._base_url}/{MINT_PATH}",
                "POST",
                headers={"Content-Type": "application/json"},
                body=json.dumps({"apiKey": self._api_key}),
            )
        except (ccxt.AuthenticationError, ccxt.BadRequest) as exc:
            logger.error("session_refresh_rejected", error=str(exc))
            raise CredentialError(f"swyftx rejected the API key: {exc}") from exc
        finally:
            self._pending = None

        token = response.get("accessToken") if isinstance(response, dict) else None
        if not token:
            raise CredentialError("swyftx session endpoint returned no accessToken")

        if self._session.version != base_version:
            # Someone committed while this mint was in flight; keep theirs.
            logger.debug("session_refresh_superseded", version=self._session.version)
            if not self._session.is_valid(self._clock()):
                raise CredentialError("swyftx session was invalidated during refresh")
            return self._session

        self._session = Session(
            token=token,
            expires_at=self._clock() + self._ttl_ms,
            version=base_version + 1,
        )
        logger.info(
            "session_refreshed",
            version=self._session.version,
            expires_at=self._session.expires_at,
        )
        return self._session

    def invalidate(self) -> None:
        """Drop the current token so the next private call mints a new one."""
        self._session = Session(version=self._session.version + 1)
        logger.info("session_invalidated", version=self._session.version)
