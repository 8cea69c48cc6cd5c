"""
backend/tests/test_scoring_engine.py

Purpose:
    Evaluation of locked coupons: award credited exactly once, result sets
    materialized once per day, and provider failures surfaced without caching.
"""

from __future__ import annotations

import asyncio

import pytest

from kupon.errors import NoCoupon, NoMatchesPublished, NotLocked, ProviderUnavailable
from kupon.models.coupon import CouponItemIn, CouponStatus
from kupon.models.match import Match, Outcome
from kupon.providers.base import MatchDataProvider
from kupon.services.catalog_service import OddsCatalog
from kupon.services.coupon_repository import CouponRepository
from kupon.services.coupon_service import CouponStore
from kupon.services.result_service import ResultBook
from kupon.services.scoring_service import ScoringEngine
from kupon.services.user_repository import UserRepository

DAY = "2026-03-14"


class _FixedProvider(MatchDataProvider):
    def __init__(self, results=None, fail_results=0):
        self.results = results if results is not None else {1: Outcome.HOME}
        self.fail_results = fail_results
        self.result_calls = 0

    async def fetch_matches(self, day):
        return [
            Match(id=1, league="Süper Lig", home="Galatasaray", away="Fenerbahçe", odd_1=2.0, odd_x=3.0, odd_2=3.5),
            Match(id=2, league="Serie A", home="Milan", away="Inter", odd_1=2.4, odd_x=3.1, odd_2=2.9),
        ]

    async def fetch_results(self, day, matches):
        self.result_calls += 1
        await asyncio.sleep(0)
        if self.result_calls <= self.fail_results:
            raise RuntimeError("feed down")
        return dict(self.results)


class _Game:
    def __init__(self, provider: _FixedProvider):
        self.provider = provider
        self.users = UserRepository()
        self.coupons = CouponRepository()
        self.catalog = OddsCatalog(provider)
        self.results = ResultBook(provider, self.catalog)
        self.store = CouponStore(self.coupons, self.catalog)
        self.scoring = ScoringEngine(self.coupons, self.users, self.results)

    async def locked_coupon(self, items):
        user = self.users.register("ayse")
        await self.catalog.get_or_fetch(DAY)
        await self.store.submit(user.id, DAY, [CouponItemIn(match_id=m, prediction=p) for m, p in items])
        await self.store.lock(user.id, DAY)
        return user


@pytest.mark.asyncio
async def test_winning_single_pick_awards_once():
    game = _Game(_FixedProvider({1: Outcome.HOME}))
    user = await game.locked_coupon([(1, "1")])

    first = await game.scoring.evaluate(user.id, DAY)

    assert first.gained_points == 20
    assert first.total_points == 20
    assert first.coupon.status == CouponStatus.evaluated
    assert first.coupon.results == {1: Outcome.HOME}
    assert not first.already_evaluated

    second = await game.scoring.evaluate(user.id, DAY)

    assert second.already_evaluated
    assert second.gained_points == 20
    assert dict(second.results) == dict(first.results) == {1: Outcome.HOME}
    assert second.coupon == first.coupon
    assert second.total_points == 20
    assert game.users.get(user.id).points == 20


@pytest.mark.asyncio
async def test_losing_coupon_gains_nothing():
    game = _Game(_FixedProvider({1: Outcome.AWAY, 2: Outcome.HOME}))
    user = await game.locked_coupon([(1, "1"), (2, "1")])

    outcome = await game.scoring.evaluate(user.id, DAY)

    assert outcome.gained_points == 0
    assert outcome.coupon.status == CouponStatus.evaluated
    assert game.users.get(user.id).points == 0


@pytest.mark.asyncio
async def test_unresolved_pick_is_a_miss():
    game = _Game(_FixedProvider({1: Outcome.HOME}))
    user = await game.locked_coupon([(1, "1"), (2, "X")])

    outcome = await game.scoring.evaluate(user.id, DAY)

    assert outcome.gained_points == 0
    assert 2 not in outcome.results


@pytest.mark.asyncio
async def test_evaluate_requires_locked_coupon():
    game = _Game(_FixedProvider())
    user = game.users.register("mehmet")
    await game.catalog.get_or_fetch(DAY)

    with pytest.raises(NoCoupon):
        await game.scoring.evaluate(user.id, DAY)

    await game.store.submit(user.id, DAY, [CouponItemIn(match_id=1, prediction="1")])
    with pytest.raises(NotLocked):
        await game.scoring.evaluate(user.id, DAY)
    assert game.provider.result_calls == 0


@pytest.mark.asyncio
async def test_concurrent_evaluations_credit_once():
    game = _Game(_FixedProvider({1: Outcome.HOME}))
    user = await game.locked_coupon([(1, "1")])

    outcomes = await asyncio.gather(*[game.scoring.evaluate(user.id, DAY) for _ in range(8)])

    assert game.users.get(user.id).points == 20
    assert {o.gained_points for o in outcomes} == {20}
    assert sum(1 for o in outcomes if not o.already_evaluated) == 1
    assert game.provider.result_calls == 1


@pytest.mark.asyncio
async def test_result_set_is_shared_across_users():
    game = _Game(_FixedProvider({1: Outcome.HOME, 2: Outcome.DRAW}))
    first = await game.locked_coupon([(1, "1")])
    second = game.users.register("zeynep")
    await game.store.submit(second.id, DAY, [CouponItemIn(match_id=2, prediction="X")])
    await game.store.lock(second.id, DAY)

    a = await game.scoring.evaluate(first.id, DAY)
    b = await game.scoring.evaluate(second.id, DAY)

    assert dict(a.results) == dict(b.results)
    assert b.gained_points == 31
    assert game.provider.result_calls == 1


@pytest.mark.asyncio
async def test_provider_failure_is_not_cached():
    game = _Game(_FixedProvider({1: Outcome.HOME}, fail_results=1))
    user = await game.locked_coupon([(1, "1")])

    with pytest.raises(ProviderUnavailable):
        await game.scoring.evaluate(user.id, DAY)

    assert game.coupons.get(user.id, DAY).status == CouponStatus.locked
    assert game.users.get(user.id).points == 0
    assert game.results.get(DAY) is None

    outcome = await game.scoring.evaluate(user.id, DAY)
    assert outcome.gained_points == 20
    assert game.provider.result_calls == 2


@pytest.mark.asyncio
async def test_results_require_published_catalog():
    game = _Game(_FixedProvider())
    with pytest.raises(NoMatchesPublished):
        await game.results.get_or_fetch(DAY)


@pytest.mark.asyncio
async def test_results_ignore_matches_outside_catalog():
    game = _Game(_FixedProvider({1: Outcome.HOME, 77: Outcome.AWAY}))
    await game.catalog.get_or_fetch(DAY)

    results = await game.results.get_or_fetch(DAY)

    assert dict(results) == {1: Outcome.HOME}
    with pytest.raises(TypeError):
        results[2] = Outcome.DRAW
