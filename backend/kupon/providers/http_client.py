"""
backend/kupon/providers/http_client.py

Purpose:
    Outbound HTTP for match/result feeds: bounded retries with exponential
    backoff on 429/5xx and network errors, and a per-feed circuit breaker so
    a dead feed fails fast instead of stalling every catalog request.

Dependencies:
    - httpx
"""

import asyncio
import logging
import time
from typing import Optional
from urllib.parse import urlparse

import httpx

logger = logging.getLogger("kupon.http_client")

_RETRYABLE_STATUSES = {429, 500, 502, 503, 504}


class CircuitBreaker:
    """Opens after `failure_threshold` consecutive failed calls.

    While open, calls are refused until `recovery_timeout` seconds have passed
    since the last failure; the next call is then let through (half-open) and
    its outcome closes or re-opens the circuit.
    """

    def __init__(self, name: str, failure_threshold: int = 3, recovery_timeout: float = 300.0):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.opened_at: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return self.opened_at is not None

    def record_success(self) -> None:
        if self.is_open:
            logger.info("[%s] Circuit closed", self.name)
        self.failure_count = 0
        self.opened_at = None

    def record_failure(self) -> None:
        self.failure_count += 1
        if self.failure_count >= self.failure_threshold:
            self.opened_at = time.monotonic()
            logger.warning("[%s] Circuit open after %d failures", self.name, self.failure_count)

    def can_attempt(self) -> bool:
        if self.opened_at is None:
            return True
        return time.monotonic() - self.opened_at >= self.recovery_timeout


def _parse_retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def _safe_url(url: str) -> str:
    """Strip query params for logging."""
    parsed = urlparse(str(url))
    return f"{parsed.scheme}://{parsed.netloc}{parsed.path}"


class CircuitOpenError(RuntimeError):
    pass


class ResilientClient:
    """httpx.AsyncClient wrapper with retry, exponential backoff, and circuit breaker."""

    def __init__(
        self,
        name: str,
        timeout: float = 15.0,
        max_retries: int = 2,
        base_delay: float = 2.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._name = name
        self._max_retries = max_retries
        self._base_delay = base_delay
        self.circuit = CircuitBreaker(name)

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with retry/backoff on transient failures.

        Raises CircuitOpenError without touching the network while the circuit
        is open, and httpx.HTTPStatusError once retries are exhausted.
        """
        if not self.circuit.can_attempt():
            raise CircuitOpenError(f"{self._name}: circuit open")

        last_exc: Optional[Exception] = None

        for attempt in range(self._max_retries + 1):
            try:
                resp = await self._client.request(method, url, **kwargs)
            except (httpx.TimeoutException, httpx.ConnectError, httpx.RemoteProtocolError) as exc:
                last_exc = exc
                logger.warning(
                    "[%s] Network error on %s %s (attempt %d/%d): %s",
                    self._name, method, _safe_url(url),
                    attempt + 1, self._max_retries + 1, exc,
                )
                if attempt < self._max_retries:
                    await asyncio.sleep(self._base_delay * (2 ** attempt))
                continue

            if resp.status_code not in _RETRYABLE_STATUSES:
                if resp.is_success:
                    self.circuit.record_success()
                else:
                    self.circuit.record_failure()
                resp.raise_for_status()
                return resp

            logger.warning(
                "[%s] Retryable status %d on %s %s (attempt %d/%d)",
                self._name, resp.status_code, method, _safe_url(url),
                attempt + 1, self._max_retries + 1,
            )
            last_exc = httpx.HTTPStatusError(
                f"{resp.status_code} from {_safe_url(url)}", request=resp.request, response=resp,
            )
            if attempt < self._max_retries:
                delay = _parse_retry_after(resp)
                if delay is None:
                    delay = self._base_delay * (2 ** attempt)
                await asyncio.sleep(min(delay, 60.0))

        self.circuit.record_failure()
        logger.error(
            "[%s] All %d attempts failed for %s %s: %s",
            self._name, self._max_retries + 1, method, _safe_url(url), last_exc,
        )
        raise last_exc  # type: ignore[misc]

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()
