"""
Relance des requetes HTTP vers Mikan, TMDB et les flux RSS.

Seules les reponses 429 (limite de debit) et 5xx (serveur indisponible)
sont relancees, avec backoff exponentiel et jitter. Un 4xx leve
httpx.HTTPStatusError au premier essai.

Usage:
    response = await request_with_retry(client, "GET", url)
"""

from typing import Optional

import httpx
from loguru import logger
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)


class RateLimitError(Exception):
    """Reponse 429. retry_after vient du header Retry-After (None si absent)."""

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


class TransientServerError(Exception):
    """Reponse 5xx, relancee tant qu'il reste des tentatives."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"Server error {status_code} for {url}")


RETRYABLE_ERRORS = (RateLimitError, TransientServerError)


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.debug(
        "Nouvelle tentative HTTP",
        attempt=retry_state.attempt_number,
        error=str(exc),
    )


def with_retry(max_attempts: int = 5, max_wait: int = 60):
    """Decorateur tenacity pour une coroutine qui leve RETRYABLE_ERRORS.

    La derniere erreur est relevee telle quelle apres max_attempts essais ;
    l'attente entre deux essais ne depasse pas max_wait secondes.
    """
    return retry(
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        wait=wait_random_exponential(multiplier=1, min=1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        before_sleep=_log_retry,
        reraise=True,
    )


def _raise_for_response(response: httpx.Response) -> None:
    if response.status_code == 429:
        retry_after = response.headers.get("Retry-After")
        raise RateLimitError(int(retry_after) if retry_after else None)
    if response.status_code >= 500:
        raise TransientServerError(response.status_code, str(response.url))
    response.raise_for_status()


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 5,
    **kwargs,
) -> httpx.Response:
    """
    Envoie la requete via client.request(method, url, **kwargs), relancee sur 429/5xx.

    Raises:
        RateLimitError, TransientServerError: Tentatives epuisees
        httpx.HTTPStatusError: Autre code d'erreur (404 compris)
    """

    @with_retry(max_attempts=max_attempts)
    async def _send() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        _raise_for_response(response)
        return response

    return await _send()
