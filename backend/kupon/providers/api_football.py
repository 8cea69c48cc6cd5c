"""
backend/kupon/providers/api_football.py

Purpose:
    Adapter for API-Football (api-sports.io v3): daily fixtures with 1X2
    "Match Winner" odds from a single bookmaker, and full-time results mapped
    to outcome labels.

Dependencies:
    - kupon.providers.http_client
    - kupon.providers.base
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Sequence

import httpx

from kupon.models.match import Match, Outcome
from kupon.providers.base import MatchDataProvider
from kupon.providers.http_client import ResilientClient

logger = logging.getLogger("kupon.api_football")

MATCH_WINNER_BET_ID = 1
FINISHED_STATUSES = {"FT", "AET", "PEN"}

_ODD_LABELS = {
    "Home": Outcome.HOME,
    "Draw": Outcome.DRAW,
    "Away": Outcome.AWAY,
}


def parse_match_winner_odds(payload: dict[str, Any]) -> Optional[dict[Outcome, float]]:
    """Extract Home/Draw/Away odds from an /odds response.

    Returns None unless all three outcomes carry a positive decimal odd.
    """
    for entry in payload.get("response", []):
        for bookmaker in entry.get("bookmakers", []):
            for bet in bookmaker.get("bets", []):
                if bet.get("id") != MATCH_WINNER_BET_ID and bet.get("name") != "Match Winner":
                    continue
                odds: dict[Outcome, float] = {}
                for value in bet.get("values", []):
                    outcome = _ODD_LABELS.get(value.get("value"))
                    if outcome is None:
                        continue
                    try:
                        odd = float(value.get("odd"))
                    except (TypeError, ValueError):
                        continue
                    if math.isfinite(odd) and odd > 0:
                        odds[outcome] = odd
                if len(odds) == 3:
                    return odds
    return None


def result_from_fixture(fixture: dict[str, Any]) -> Optional[Outcome]:
    """Map a finished fixture's full-time goals to 1/X/2. None if not final."""
    status = (fixture.get("fixture", {}).get("status") or {}).get("short")
    if status not in FINISHED_STATUSES:
        return None

    # Extra time / penalties do not change the 90-minute outcome.
    fulltime = (fixture.get("score") or {}).get("fulltime") or {}
    home = fulltime.get("home")
    away = fulltime.get("away")
    if home is None or away is None:
        goals = fixture.get("goals") or {}
        home, away = goals.get("home"), goals.get("away")
    if home is None or away is None:
        return None

    if home > away:
        return Outcome.HOME
    if home == away:
        return Outcome.DRAW
    return Outcome.AWAY


class ApiFootballProvider(MatchDataProvider):
    """API-Football feed for both the odds catalog and the result set."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://v3.football.api-sports.io",
        bookmaker_id: int = 8,
        max_fixtures: int = 10,
        timeout: float = 15.0,
        max_retries: int = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        base_delay: float = 2.0,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._bookmaker_id = bookmaker_id
        self._max_fixtures = max_fixtures
        self._client = ResilientClient(
            "api_football",
            timeout=timeout,
            max_retries=max_retries,
            base_delay=base_delay,
            transport=transport,
        )

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        resp = await self._client.get(
            f"{self._base_url}{path}",
            params=params,
            headers={"x-apisports-key": self._api_key},
        )
        data = resp.json()
        errors = data.get("errors")
        if errors:
            # API-Football reports auth/quota problems with HTTP 200 + errors
            raise RuntimeError(f"API-Football error on {path}: {errors}")
        return data

    async def _fixtures(self, day: str) -> list[dict[str, Any]]:
        data = await self._get("/fixtures", {"date": day})
        return data.get("response", [])

    async def fetch_matches(self, day: str) -> list[Match]:
        fixtures = await self._fixtures(day)
        matches: list[Match] = []

        for fx in fixtures:
            if len(matches) >= self._max_fixtures:
                break
            fixture_id = fx.get("fixture", {}).get("id")
            if fixture_id is None:
                continue

            odds_payload = await self._get(
                "/odds", {"fixture": fixture_id, "bookmaker": self._bookmaker_id},
            )
            odds = parse_match_winner_odds(odds_payload)
            if odds is None:
                logger.debug("Fixture %s has no complete 1X2 odds, skipping", fixture_id)
                continue

            teams = fx.get("teams", {})
            matches.append(Match(
                id=int(fixture_id),
                league=fx.get("league", {}).get("name", ""),
                home=teams.get("home", {}).get("name", ""),
                away=teams.get("away", {}).get("name", ""),
                odd_1=odds[Outcome.HOME],
                odd_x=odds[Outcome.DRAW],
                odd_2=odds[Outcome.AWAY],
            ))

        logger.info(
            "API-Football catalog for %s: %d fixtures, %d with odds",
            day, len(fixtures), len(matches),
        )
        return matches

    async def fetch_results(self, day: str, matches: Sequence[Match]) -> dict[int, Outcome]:
        wanted = {m.id for m in matches}
        results: dict[int, Outcome] = {}
        for fx in await self._fixtures(day):
            fixture_id = fx.get("fixture", {}).get("id")
            if fixture_id not in wanted:
                continue
            outcome = result_from_fixture(fx)
            if outcome is not None:
                results[int(fixture_id)] = outcome

        logger.info("API-Football results for %s: %d/%d resolved", day, len(results), len(wanted))
        return results

    async def aclose(self) -> None:
        await self._client.aclose()
