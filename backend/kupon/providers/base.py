from abc import ABC, abstractmethod
from typing import Sequence

from kupon.models.match import Match, Outcome


class CatalogProvider(ABC):
    """Abstract source of the day's matches and 1X2 odds."""

    @abstractmethod
    async def fetch_matches(self, day: str) -> list[Match]:
        """Fetch the fixtures for a day (YYYY-MM-DD).

        Match ids must be unique within the day and every match must carry
        positive odds for all three outcomes. Called at most once per day on
        success; the result is cached and never refreshed.
        """
        ...


class ResultProvider(ABC):
    """Abstract source of realized outcomes."""

    @abstractmethod
    async def fetch_results(self, day: str, matches: Sequence[Match]) -> dict[int, Outcome]:
        """Fetch the realized outcome per match id for a day.

        May omit matches that are not finished yet; callers treat a missing
        entry as unresolved.
        """
        ...


class MatchDataProvider(CatalogProvider, ResultProvider):
    """A feed serving both the catalog and the results of a day."""

    async def aclose(self) -> None:
        return None
