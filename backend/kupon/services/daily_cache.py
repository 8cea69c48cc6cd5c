"""
backend/kupon/services/daily_cache.py

Purpose:
    Write-once per-day cache with a mutex per day key. The first caller for a
    day runs the fetch; concurrent callers wait on the lock and then read the
    stored value, so a provider is invoked at most once per day on success.

Dependencies:
    - asyncio
    - kupon.errors
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Generic, TypeVar

from kupon.errors import KuponError, ProviderUnavailable

logger = logging.getLogger("kupon.daily_cache")

T = TypeVar("T")


class DailyCache(Generic[T]):
    """Day-keyed cache. Values are never overwritten once stored."""

    def __init__(self, name: str):
        self._name = name
        self._data: dict[str, T] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, day: str) -> T | None:
        return self._data.get(day)

    def has(self, day: str) -> bool:
        return day in self._data

    def _get_lock(self, day: str) -> asyncio.Lock:
        if day not in self._locks:
            self._locks[day] = asyncio.Lock()
        return self._locks[day]

    async def get_or_fetch(self, day: str, fetch: Callable[[], Awaitable[T]]) -> T:
        if day in self._data:
            return self._data[day]

        async with self._get_lock(day):
            # Double-check after acquiring lock
            if day in self._data:
                return self._data[day]

            try:
                value = await fetch()
            except KuponError:
                raise
            except Exception as exc:
                # Failed fetches are not cached; the next caller retries.
                logger.error("%s fetch failed for %s: %s", self._name, day, exc)
                raise ProviderUnavailable() from exc

            self._data[day] = value
            # Later callers take the lock-free path; waiters keep their reference.
            self._locks.pop(day, None)
            logger.info("%s materialized for %s", self._name, day)
            return value
