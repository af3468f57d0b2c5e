"""Solana RPC session setup for the host side.

Public RPC endpoints rate limit aggressively, so the session installed here
retries 429 responses with a linear backoff, or with the server's
``Retry-After`` hint when it sends one. The builders never import this module.
"""

import logging
import time
from typing import Optional

import httpx
from solana.rpc.api import Client as SolanaHTTPClient  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 5
DEFAULT_BACKOFF = 2.0
MAX_RETRY_AFTER = 30.0


def _retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    if seconds < 0:
        return None
    return min(seconds, MAX_RETRY_AFTER)


class RateLimitTransport(httpx.BaseTransport):
    """Wraps another transport and replays requests rejected with 429."""

    def __init__(
        self,
        wrapped: Optional[httpx.BaseTransport] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff: float = DEFAULT_BACKOFF,
        sleep=time.sleep,
    ) -> None:
        self._wrapped = wrapped or httpx.HTTPTransport()
        self._max_retries = max_retries
        self._backoff = backoff
        self._sleep = sleep

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        retries = 0
        while True:
            response = self._wrapped.handle_request(request)
            if response.status_code != httpx.codes.TOO_MANY_REQUESTS:
                return response
            if retries >= self._max_retries:
                logger.warning(
                    "still rate limited by %s after %d retries", request.url.host, retries
                )
                return response

            retries += 1
            delay = _retry_after(response)
            if delay is None:
                delay = retries * self._backoff
            response.close()
            logger.debug(
                "rate limited by %s, retry %d/%d in %.1fs",
                request.url.host,
                retries,
                self._max_retries,
                delay,
            )
            self._sleep(delay)

    def close(self) -> None:
        self._wrapped.close()


def new_rpc_client(
    url: str,
    timeout: float = 30,
    max_retries: int = DEFAULT_MAX_RETRIES,
    transport: Optional[httpx.BaseTransport] = None,
) -> SolanaHTTPClient:
    """Solana RPC client whose HTTP session retries rate-limited calls."""
    client = SolanaHTTPClient(url, timeout=timeout)
    client._provider.session = httpx.Client(
        timeout=timeout,
        transport=RateLimitTransport(transport, max_retries=max_retries),
    )
    return client
