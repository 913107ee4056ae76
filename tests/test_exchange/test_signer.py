"""Tests for RequestSigner public/private descriptor construction."""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from swyftx.exceptions import CredentialError
from swyftx.exchange.session import CredentialManager
from swyftx.exchange.signer import RequestSigner

BASE_URL = "https://api.swyftx.com.au"
URLS = {"public": BASE_URL, "private": BASE_URL}


@pytest.fixture
def transport() -> AsyncMock:
    transport = AsyncMock()
    transport.request.return_value = {"accessToken": "jwt-1"}
    return transport


@pytest.fixture
def signer(transport: AsyncMock, clock) -> RequestSigner:
    credentials = CredentialManager("test-api-key", transport, BASE_URL, clock=clock)
    return RequestSigner(credentials, URLS, clock=clock)


class TestPublicSigning:
    @pytest.mark.asyncio
    async def test_no_authorization_header(self, signer: RequestSigner, transport: AsyncMock) -> None:
        signed = await signer.sign("markets/assets/")
        assert signed.url == f"{BASE_URL}/markets/assets/"
        assert signed.method == "GET"
        assert "Authorization" not in signed.headers
        assert signed.body is None
        transport.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_params_go_to_query_string(self, signer: RequestSigner) -> None:
        signed = await signer.sign(
            "charts/getBars/AUD/BTC/ask/", "public", "GET", {"resolution": "1h", "limit": 10}
        )
        assert signed.url == f"{BASE_URL}/charts/getBars/AUD/BTC/ask/?resolution=1h&limit=10"

    @pytest.mark.asyncio
    async def test_public_works_without_api_key(self, clock) -> None:
        credentials = CredentialManager("", AsyncMock(), BASE_URL, clock=clock)
        signer = RequestSigner(credentials, URLS, clock=clock)
        signed = await signer.sign("live-rates/3/")
        assert "Authorization" not in signed.headers


class TestPrivateSigning:
    @pytest.mark.asyncio
    async def test_bearer_header_and_nonce(self, signer: RequestSigner) -> None:
        signed = await signer.sign("orders/", "private", "POST", {"orderType": 3})
        assert signed.headers["Authorization"] == "Bearer jwt-1"
        assert signed.headers["Content-Type"] == "application/json"
        body = json.loads(signed.body)
        assert body["orderType"] == 3
        assert "nonce" in body

    @pytest.mark.asyncio
    async def test_query_goes_to_url_not_body(self, signer: RequestSigner) -> None:
        signed = await signer.sign(
            "orders/BTC", "private", "GET", query={"limit": 10, "page": 2}
        )
        assert signed.url == f"{BASE_URL}/orders/BTC?limit=10&page=2"
        body = json.loads(signed.body)
        assert set(body) == {"nonce"}
        assert signed.headers["Authorization"] == "Bearer jwt-1"

    @pytest.mark.asyncio
    async def test_nonce_strictly_increases(self, signer: RequestSigner) -> None:
        nonces = []
        for _ in range(3):
            signed = await signer.sign("user/balance/", "private", "GET")
            nonces.append(json.loads(signed.body)["nonce"])
        assert nonces[0] < nonces[1] < nonces[2]

    @pytest.mark.asyncio
    async def test_nonce_follows_clock(self, signer: RequestSigner, clock) -> None:
        first = json.loads((await signer.sign("user/balance/", "private")).body)["nonce"]
        clock.advance(5_000)
        second = json.loads((await signer.sign("user/balance/", "private")).body)["nonce"]
        assert second == clock.now
        assert second > first

    @pytest.mark.asyncio
    async def test_missing_api_key_raises(self, clock) -> None:
        credentials = CredentialManager("", AsyncMock(), BASE_URL, clock=clock)
        signer = RequestSigner(credentials, URLS, clock=clock)
        with pytest.raises(CredentialError):
            await signer.sign("user/balance/", "private")

    @pytest.mark.asyncio
    async def test_every_private_call_validates_session(
        self, signer: RequestSigner, transport: AsyncMock, clock
    ) -> None:
        await signer.sign("user/balance/", "private")
        clock.advance(86_400_001)
        transport.request.return_value = {"accessToken": "jwt-2"}

        signed = await signer.sign("user/balance/", "private")

        assert signed.headers["Authorization"] == "Bearer jwt-2"
        assert transport.request.await_count == 2

    @pytest.mark.asyncio
    async def test_concurrent_private_calls_refresh_once(self, clock) -> None:
        async def slow_mint(*args, **kwargs):
            await asyncio.sleep(0)
            return {"accessToken": "jwt-shared"}

        transport = AsyncMock()
        transport.request.side_effect = slow_mint
        credentials = CredentialManager("test-api-key", transport, BASE_URL, clock=clock)
        signer = RequestSigner(credentials, URLS, clock=clock)

        first, second = await asyncio.gather(
            signer.sign("user/balance/", "private"),
            signer.sign("orders/", "private", "POST"),
        )

        assert transport.request.await_count == 1
        assert first.headers["Authorization"] == second.headers["Authorization"]
        assert json.loads(first.body)["nonce"] != json.loads(second.body)["nonce"]

    @pytest.mark.asyncio
    async def test_unknown_access_level(self, signer: RequestSigner) -> None:
        with pytest.raises(ValueError, match="access level"):
            await signer.sign("user/balance/", "admin")  # type: ignore[arg-type]
