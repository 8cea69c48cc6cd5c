"""
backend/kupon/services/catalog_service.py

Purpose:
    The per-day odds catalog. Published once per day from a CatalogProvider
    and immutable afterwards.

Dependencies:
    - kupon.services.daily_cache
    - kupon.providers.base
"""

from __future__ import annotations

import logging

from kupon.models.match import Match
from kupon.providers.base import CatalogProvider
from kupon.services.daily_cache import DailyCache

logger = logging.getLogger("kupon.catalog_service")


class OddsCatalog:
    def __init__(self, provider: CatalogProvider):
        self._provider = provider
        self._cache: DailyCache[tuple[Match, ...]] = DailyCache("odds catalog")

    def get(self, day: str) -> tuple[Match, ...] | None:
        """Return the published catalog, or None if the day is not published yet."""
        return self._cache.get(day)

    def is_published(self, day: str) -> bool:
        return self._cache.has(day)

    async def get_or_fetch(self, day: str) -> tuple[Match, ...]:
        async def _fetch() -> tuple[Match, ...]:
            matches = await self._provider.fetch_matches(day)
            ids = [m.id for m in matches]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Duplicate match ids in catalog for {day}")
            return tuple(matches)

        return await self._cache.get_or_fetch(day, _fetch)
