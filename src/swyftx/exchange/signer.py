"""Turns a logical request into a transport-ready descriptor.

Public calls go out as plain URLs with their params in the query string.
Private calls always validate the session first, then carry a JSON body
with a strictly increasing nonce and an Authorization: Bearer header.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal
from urllib.parse import urlencode

from swyftx.exchange.session import CredentialManager, milliseconds

AccessLevel = Literal["public", "private"]


@dataclass(frozen=True)
class SignedRequest:
    """Everything the transport needs to perform one call."""

    url: str
    method: str
    body: str | None = None
    headers: dict[str, str] = field(default_factory=dict)


class RequestSigner:
    """Builds SignedRequest descriptors for public and private endpoints.

    Args:
        credentials: Session owner consulted before every private request.
        urls: Base URL per access level.
        clock: Nonce source in Unix milliseconds.
    """

    def __init__(
        self,
        credentials: CredentialManager,
        urls: dict[str, str],
        clock: Callable[[], int] = milliseconds,
    ) -> None:
        self._credentials = credentials
        self._urls = {level: url.rstrip("/") for level, url in urls.items()}
        self._clock = clock
        self._last_nonce = 0

    def nonce(self) -> int:
        """Millisecond nonce, bumped when two calls land in the same millisecond."""
        self._last_nonce = max(self._last_nonce + 1, self._clock())
        return self._last_nonce

    async def sign(
        self,
        path: str,
        access: AccessLevel = "public",
        method: str = "GET",
        params: dict | None = None,
        query: dict | None = None,
    ) -> SignedRequest:
        """Produce the descriptor for one call.

        query always lands in the URL. params go to the query string for
        public calls and to the JSON body (next to the nonce) for private ones.

        Raises:
            CredentialError: For private calls without a usable API key.
            ValueError: For an unknown access level.
        """
        if access not in self._urls:
            raise ValueError(f"unknown access level: {access!r}")
        params = params or {}
        url = f"{self._urls[access]}/{path.lstrip('/')}"
        url_query = {**(query or {}), **(params if access == "public" else {})}
        if url_query:
            url = f"{url}?{urlencode(url_query)}"

        if access == "public":
            return SignedRequest(url=url, method=method)

        session = await self._credentials.ensure_valid_session()
        body = json.dumps({"nonce": self.nonce(), **params})
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {session.token}",
        }
        return SignedRequest(url=url, method=method, body=body, headers=headers)
