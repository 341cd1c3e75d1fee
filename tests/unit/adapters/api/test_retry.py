"""
Tests unitaires pour le mecanisme de retry avec backoff exponentiel.

Ces tests verifient:
- RateLimitError capture le header Retry-After
- with_retry relance sur RateLimitError et TransientServerError
- request_with_retry relance les 429 et 5xx, propage les 4xx immediatement
"""

import httpx
import pytest
import respx

from src.adapters.api.retry import (
    RateLimitError,
    TransientServerError,
    request_with_retry,
    with_retry,
)

FEED_URL = "https://mikanani.me/RSS/Bangumi?bangumiId=3141"


class TestErrors:
    """Tests pour les exceptions relancables."""

    def test_rate_limit_error_stores_retry_after(self) -> None:
        error = RateLimitError(retry_after=60)
        assert error.retry_after == 60
        assert "60" in str(error)

    def test_rate_limit_error_without_retry_after(self) -> None:
        assert RateLimitError(retry_after=None).retry_after is None

    def test_transient_server_error_fields(self) -> None:
        error = TransientServerError(503, FEED_URL)
        assert error.status_code == 503
        assert FEED_URL in str(error)


class TestWithRetryDecorator:
    """Tests pour le decorateur with_retry."""

    @pytest.mark.asyncio
    async def test_retries_on_transient_errors(self) -> None:
        call_count = 0

        @with_retry(max_attempts=3, max_wait=1)
        async def flaky() -> str:
            nonlocal call_count
            call_count += 1
            if call_count == 1:
                raise RateLimitError(retry_after=1)
            if call_count == 2:
                raise TransientServerError(502, FEED_URL)
            return "success"

        assert await flaky() == "success"
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_stops_after_max_attempts(self) -> None:
        call_count = 0

        @with_retry(max_attempts=2, max_wait=1)
        async def always_fails() -> str:
            nonlocal call_count
            call_count += 1
            raise RateLimitError(retry_after=1)

        with pytest.raises(RateLimitError):
            await always_fails()
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_does_not_retry_other_exceptions(self) -> None:
        call_count = 0

        @with_retry(max_attempts=3, max_wait=1)
        async def raises_value_error() -> str:
            nonlocal call_count
            call_count += 1
            raise ValueError("pas une erreur transitoire")

        with pytest.raises(ValueError):
            await raises_value_error()
        assert call_count == 1


class TestRequestWithRetry:
    """Tests pour request_with_retry avec httpx."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_passes_on_success(self, respx_mock: respx.Router) -> None:
        route = respx_mock.get(FEED_URL).mock(return_value=httpx.Response(200, text="<rss/>"))

        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", FEED_URL)

        assert response.text == "<rss/>"
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_retries_429_then_succeeds(self, respx_mock: respx.Router) -> None:
        route = respx_mock.get(FEED_URL).mock(
            side_effect=[
                httpx.Response(429, headers={"Retry-After": "1"}),
                httpx.Response(200, text="ok"),
            ]
        )

        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", FEED_URL, max_attempts=3)

        assert response.status_code == 200
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_retries_5xx_then_succeeds(self, respx_mock: respx.Router) -> None:
        route = respx_mock.get(FEED_URL).mock(
            side_effect=[
                httpx.Response(503),
                httpx.Response(200, text="ok"),
            ]
        )

        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", FEED_URL, max_attempts=3)

        assert response.status_code == 200
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_5xx_exhausted_raises_transient_error(self, respx_mock: respx.Router) -> None:
        route = respx_mock.get(FEED_URL).mock(return_value=httpx.Response(500))

        async with httpx.AsyncClient() as client:
            with pytest.raises(TransientServerError) as exc_info:
                await request_with_retry(client, "GET", FEED_URL, max_attempts=2)

        assert exc_info.value.status_code == 500
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_4xx_raised_without_retry(self, respx_mock: respx.Router) -> None:
        route = respx_mock.get(FEED_URL).mock(return_value=httpx.Response(404))

        async with httpx.AsyncClient() as client:
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await request_with_retry(client, "GET", FEED_URL)

        assert exc_info.value.response.status_code == 404
        assert route.call_count == 1
