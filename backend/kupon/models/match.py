"""
backend/kupon/models/match.py

Purpose:
    Daily match catalog entries with their 1X2 decimal odds, plus the outcome
    label domain shared by picks and result sets.

Dependencies:
    - pydantic
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Outcome(str, Enum):
    HOME = "1"
    DRAW = "X"
    AWAY = "2"

    @classmethod
    def parse(cls, value: object) -> Outcome | None:
        """Map a raw prediction label to an Outcome, or None if unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class Match(BaseModel):
    """One published fixture. Frozen: a day's catalog never changes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    league: str = ""
    home: str = ""
    away: str = ""
    odd_1: float = Field(gt=0, allow_inf_nan=False, alias="odd1")
    odd_x: float = Field(gt=0, allow_inf_nan=False, alias="oddX")
    odd_2: float = Field(gt=0, allow_inf_nan=False, alias="odd2")

    def odd_for(self, outcome: Outcome) -> float | None:
        if outcome is Outcome.HOME:
            return self.odd_1
        if outcome is Outcome.DRAW:
            return self.odd_x
        if outcome is Outcome.AWAY:
            return self.odd_2
        return None


class MatchesResponse(BaseModel):
    date: str
    matches: list[Match]
