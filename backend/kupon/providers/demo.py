"""
backend/kupon/providers/demo.py

Purpose:
    Random match and result generator used when no real feed is configured.
    Picks a handful of classic fixtures per day with plausible 1X2 odds and
    draws a uniform random outcome per match once results are requested.

Dependencies:
    - random
    - kupon.providers.base
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from kupon.models.match import Match, Outcome
from kupon.providers.base import MatchDataProvider

logger = logging.getLogger("kupon.demo_provider")

FIXTURE_POOL = [
    {"league": "Süper Lig", "home": "Galatasaray", "away": "Fenerbahçe"},
    {"league": "Süper Lig", "home": "Beşiktaş", "away": "Trabzonspor"},
    {"league": "La Liga", "home": "Real Madrid", "away": "Barcelona"},
    {"league": "Premier League", "home": "Liverpool", "away": "Manchester City"},
    {"league": "Serie A", "home": "Milan", "away": "Inter"},
    {"league": "Bundesliga", "home": "Bayern Münih", "away": "Dortmund"},
    {"league": "Ligue 1", "home": "PSG", "away": "Lyon"},
    {"league": "Eredivisie", "home": "Ajax", "away": "PSV"},
]

# (min, max) per outcome
ODD_RANGES = {
    Outcome.HOME: (1.5, 2.6),
    Outcome.DRAW: (2.7, 3.8),
    Outcome.AWAY: (1.8, 3.1),
}


class DemoProvider(MatchDataProvider):
    """Random fixtures and results. Pass a seeded `rng` for reproducible runs."""

    def __init__(self, matches_per_day: int = 5, rng: Optional[random.Random] = None):
        self._matches_per_day = max(1, min(matches_per_day, len(FIXTURE_POOL)))
        self._rng = rng or random.Random()

    def _rand_odd(self, outcome: Outcome) -> float:
        low, high = ODD_RANGES[outcome]
        return round(low + self._rng.random() * (high - low), 2)

    async def fetch_matches(self, day: str) -> list[Match]:
        pool = list(FIXTURE_POOL)
        self._rng.shuffle(pool)
        matches = [
            Match(
                id=idx,
                league=fx["league"],
                home=fx["home"],
                away=fx["away"],
                odd_1=self._rand_odd(Outcome.HOME),
                odd_x=self._rand_odd(Outcome.DRAW),
                odd_2=self._rand_odd(Outcome.AWAY),
            )
            for idx, fx in enumerate(pool[: self._matches_per_day], start=1)
        ]
        logger.info("Demo catalog generated for %s: %d matches", day, len(matches))
        return matches

    async def fetch_results(self, day: str, matches: Sequence[Match]) -> dict[int, Outcome]:
        outcomes = list(Outcome)
        results = {m.id: self._rng.choice(outcomes) for m in matches}
        logger.info("Demo results generated for %s: %d matches", day, len(results))
        return results
