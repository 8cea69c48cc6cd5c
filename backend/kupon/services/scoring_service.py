"""
backend/kupon/services/scoring_service.py

Purpose:
    Scores a locked coupon against the day's result set and credits the award
    to the owner exactly once. A coupon pays only when every pick is correct:
    award = round(multiplier * product of captured odds), otherwise 0.

Dependencies:
    - kupon.services.coupon_repository
    - kupon.services.user_repository
    - kupon.services.result_service
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Sequence

from kupon.errors import NoCoupon, NotLocked, UserNotFound
from kupon.models.coupon import Coupon, CouponStatus, Pick
from kupon.models.match import Outcome
from kupon.services.coupon_repository import CouponRepository
from kupon.services.result_service import ResultBook
from kupon.services.user_repository import UserRepository
from kupon.utils import utcnow

logger = logging.getLogger("kupon.scoring_service")

DEFAULT_POINTS_MULTIPLIER = 10


def is_all_correct(items: Sequence[Pick], results: Mapping[int, Outcome]) -> bool:
    """True iff every pick has a result entry equal to its prediction.

    A match missing from `results` is unresolved and counts as a miss.
    """
    return all(results.get(item.match_id) == item.prediction for item in items)


def total_odds(items: Sequence[Pick]) -> Decimal:
    """Product of captured odds, computed on their decimal representation."""
    product = Decimal(1)
    for item in items:
        product *= Decimal(str(item.odd))
    return product


def round_points(value: Decimal) -> int:
    """Round to the nearest integer, ties away from zero."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_award(
    items: Sequence[Pick],
    results: Mapping[int, Outcome],
    multiplier: int = DEFAULT_POINTS_MULTIPLIER,
) -> int:
    if not items or not is_all_correct(items, results):
        return 0
    return round_points(total_odds(items) * multiplier)


@dataclass
class EvaluationOutcome:
    coupon: Coupon
    results: Mapping[int, Outcome]
    gained_points: int
    total_points: int
    already_evaluated: bool = False


class ScoringEngine:
    def __init__(
        self,
        coupons: CouponRepository,
        users: UserRepository,
        results: ResultBook,
        multiplier: int = DEFAULT_POINTS_MULTIPLIER,
    ):
        self._coupons = coupons
        self._users = users
        self._results = results
        self._multiplier = multiplier

    def _stored(self, coupon: Coupon) -> EvaluationOutcome:
        user = self._users.get(coupon.user_id)
        if user is None:
            raise UserNotFound()
        return EvaluationOutcome(
            coupon=coupon,
            results=coupon.results or {},
            gained_points=coupon.gained_points,
            total_points=user.points,
            already_evaluated=True,
        )

    async def evaluate(self, user_id: int, day: str) -> EvaluationOutcome:
        coupon = self._coupons.get(user_id, day)
        if coupon is None:
            raise NoCoupon()
        if coupon.status == CouponStatus.evaluated:
            return self._stored(coupon)
        if coupon.status != CouponStatus.locked:
            raise NotLocked()

        # Materialized once per day and shared by every evaluation of that day.
        results = await self._results.get_or_fetch(day)

        async with self._coupons.lock_for(user_id, day):
            coupon = self._coupons.get(user_id, day)
            if coupon.status == CouponStatus.evaluated:
                return self._stored(coupon)
            if self._users.get(user_id) is None:
                raise UserNotFound()

            gained = compute_award(coupon.items, results, self._multiplier)
            now = utcnow()
            evaluated = coupon.model_copy(update={
                "status": CouponStatus.evaluated,
                "gained_points": gained,
                "results": dict(results),
                "evaluated_at": now,
                "updated_at": now,
            })
            # No await between these two writes: state and balance commit together.
            user = self._users.add_points(user_id, gained)
            self._coupons.save(evaluated)

        logger.info(
            "Coupon evaluated: user=%d day=%s id=%d picks=%d gained=%d total=%d",
            user_id, day, evaluated.id, len(evaluated.items), gained, user.points,
        )
        return EvaluationOutcome(
            coupon=evaluated,
            results=results,
            gained_points=gained,
            total_points=user.points,
        )
