"""httpx async transport wrapper with retry, backoff, and rate-limit handling."""

from __future__ import annotations

import asyncio
import logging
import random
import time

import httpx

_LOG = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})
_IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE", "PATCH"})


class RetryingTransport(httpx.AsyncBaseTransport):
    """Retries transient failures of the ReSim API.

    - Exponential backoff with jitter, up to *max_retries* extra attempts.
    - HTTP 429 pauses **all** requests sharing this transport until
      ``Retry-After`` has elapsed.
    - 502/503/504 and transport errors are retried for idempotent methods.
      A POST is only retried when the connection was never established, so
      creations are never sent twice.
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 3,
        backoff_base: float = 0.5,
        backoff_max: float = 8.0,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._backoff_max = backoff_max

        self._rate_limit_lock = asyncio.Lock()
        self._rate_limit_clear = asyncio.Event()
        self._rate_limit_clear.set()
        self._rate_limit_pause_until = 0.0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        idempotent = request.method in _IDEMPOTENT_METHODS
        attempt = 0
        while True:
            await self._rate_limit_clear.wait()
            can_retry = attempt < self._max_retries

            try:
                response = await self._transport.handle_async_request(request)
            except httpx.ConnectError:
                if not can_retry:
                    raise
                await self._sleep_backoff(request, attempt, "connection failed")
                attempt += 1
                continue
            except httpx.TransportError:
                if not (can_retry and idempotent):
                    raise
                await self._sleep_backoff(request, attempt, "transport error")
                attempt += 1
                continue

            if response.status_code == 429 and can_retry:
                await response.aclose()
                await self._apply_rate_limit_pause(self._parse_retry_after(response))
                attempt += 1
                continue

            if response.status_code in _RETRYABLE_STATUS_CODES and can_retry and idempotent:
                await response.aclose()
                await self._sleep_backoff(request, attempt, f"HTTP {response.status_code}")
                attempt += 1
                continue

            return response

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def _apply_rate_limit_pause(self, retry_after: float) -> None:
        _LOG.warning("Rate limited by the API; pausing requests for %.1fs", retry_after)
        now = time.monotonic()
        async with self._rate_limit_lock:
            until = now + max(0.0, retry_after)
            if until <= self._rate_limit_pause_until:
                return
            self._rate_limit_pause_until = until
            self._rate_limit_clear.clear()

        await asyncio.sleep(max(0.0, self._rate_limit_pause_until - time.monotonic()))

        async with self._rate_limit_lock:
            if time.monotonic() >= self._rate_limit_pause_until:
                self._rate_limit_clear.set()

    @staticmethod
    def _parse_retry_after(response: httpx.Response) -> float:
        raw = response.headers.get("Retry-After")
        if raw is None:
            return 1.0
        try:
            return max(0.0, float(raw))
        except ValueError:
            return 1.0

    async def _sleep_backoff(self, request: httpx.Request, attempt: int, reason: str) -> None:
        seconds = min(self._backoff_max, self._backoff_base * 2**attempt)
        seconds += random.uniform(0.0, seconds / 4)
        _LOG.warning(
            "Retrying %s %s after %s (attempt %d of %d)",
            request.method,
            request.url.path,
            reason,
            attempt + 1,
            self._max_retries,
        )
        await asyncio.sleep(seconds)
