"""Per-day result set, materialized once from a ResultProvider and then frozen."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from kupon.errors import NoMatchesPublished
from kupon.models.match import Outcome
from kupon.providers.base import ResultProvider
from kupon.services.catalog_service import OddsCatalog
from kupon.services.daily_cache import DailyCache


class ResultBook:
    def __init__(self, provider: ResultProvider, catalog: OddsCatalog):
        self._provider = provider
        self._catalog = catalog
        self._cache: DailyCache[Mapping[int, Outcome]] = DailyCache("result set")

    def get(self, day: str) -> Mapping[int, Outcome] | None:
        return self._cache.get(day)

    async def get_or_fetch(self, day: str) -> Mapping[int, Outcome]:
        matches = self._catalog.get(day)
        if matches is None:
            raise NoMatchesPublished()

        async def _fetch() -> Mapping[int, Outcome]:
            raw = await self._provider.fetch_results(day, matches)
            known = {m.id for m in matches}
            return MappingProxyType({
                match_id: Outcome(label)
                for match_id, label in raw.items()
                if match_id in known
            })

        return await self._cache.get_or_fetch(day, _fetch)
