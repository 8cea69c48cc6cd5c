"""
backend/tests/test_demo_provider.py

Purpose:
    Demo feed: catalog shape, odd ranges and seeded reproducibility.
"""

import random

import pytest

from kupon.models.match import Outcome
from kupon.providers.demo import FIXTURE_POOL, ODD_RANGES, DemoProvider


@pytest.mark.asyncio
async def test_demo_catalog_shape():
    provider = DemoProvider(matches_per_day=5, rng=random.Random(1))
    matches = await provider.fetch_matches("2026-03-14")

    assert [m.id for m in matches] == [1, 2, 3, 4, 5]
    assert len({(m.home, m.away) for m in matches}) == 5
    for m in matches:
        for outcome in Outcome:
            low, high = ODD_RANGES[outcome]
            assert low <= m.odd_for(outcome) <= high


@pytest.mark.asyncio
async def test_demo_size_is_clamped_to_pool():
    provider = DemoProvider(matches_per_day=50, rng=random.Random(1))
    assert len(await provider.fetch_matches("2026-03-14")) == len(FIXTURE_POOL)
    provider = DemoProvider(matches_per_day=0, rng=random.Random(1))
    assert len(await provider.fetch_matches("2026-03-14")) == 1


@pytest.mark.asyncio
async def test_demo_seeded_runs_are_reproducible():
    a = DemoProvider(rng=random.Random(7))
    b = DemoProvider(rng=random.Random(7))

    matches_a = await a.fetch_matches("2026-03-14")
    matches_b = await b.fetch_matches("2026-03-14")
    assert matches_a == matches_b
    assert await a.fetch_results("2026-03-14", matches_a) == await b.fetch_results("2026-03-14", matches_b)


@pytest.mark.asyncio
async def test_demo_results_cover_every_match():
    provider = DemoProvider(rng=random.Random(3))
    matches = await provider.fetch_matches("2026-03-14")
    results = await provider.fetch_results("2026-03-14", matches)

    assert set(results) == {m.id for m in matches}
    assert all(isinstance(o, Outcome) for o in results.values())
