"""In-memory coupon store keyed by (user_id, day), with one mutex per key."""

from __future__ import annotations

import asyncio

from kupon.models.coupon import Coupon

CouponKey = tuple[int, str]


class CouponRepository:
    """Holds at most one coupon per (user, day).

    Writers must hold `lock_for(key)` around their read-check-write sequence.
    Idle locks of earlier days are dropped the first time a later day is seen.
    """

    def __init__(self) -> None:
        self._coupons: dict[CouponKey, Coupon] = {}
        self._locks: dict[CouponKey, asyncio.Lock] = {}
        self._latest_day = ""
        self._next_id = 1

    def lock_for(self, user_id: int, day: str) -> asyncio.Lock:
        if day > self._latest_day:
            self._prune_locks(before=day)
            self._latest_day = day
        key = (user_id, day)
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    def _prune_locks(self, before: str) -> None:
        # A held lock may have waiters; keep it.
        stale = [
            key for key, lock in self._locks.items()
            if key[1] < before and not lock.locked()
        ]
        for key in stale:
            del self._locks[key]

    def lock_count(self) -> int:
        return len(self._locks)

    def get(self, user_id: int, day: str) -> Coupon | None:
        return self._coupons.get((user_id, day))

    def next_id(self) -> int:
        coupon_id = self._next_id
        self._next_id += 1
        return coupon_id

    def save(self, coupon: Coupon) -> Coupon:
        self._coupons[(coupon.user_id, coupon.day)] = coupon
        return coupon

    def count(self) -> int:
        return len(self._coupons)
