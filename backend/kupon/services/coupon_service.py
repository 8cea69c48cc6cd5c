"""
backend/kupon/services/coupon_service.py

Purpose:
    Coupon lifecycle: create or replace the day's coupon for a user, lock it,
    and read it back. Enforces the open -> locked -> evaluated boundary and
    freezes each pick's odd at submission time.

Dependencies:
    - kupon.services.coupon_repository
    - kupon.services.catalog_service
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from kupon.errors import AlreadyLocked, CouponLocked, NoCoupon, NoMatchesPublished, NoValidItems
from kupon.models.coupon import Coupon, CouponItemIn, CouponStatus, DroppedItem, Pick
from kupon.models.match import Match, Outcome
from kupon.services.catalog_service import OddsCatalog
from kupon.services.coupon_repository import CouponRepository
from kupon.utils import utcnow

logger = logging.getLogger("kupon.coupon_service")


@dataclass
class SubmitOutcome:
    coupon: Coupon
    dropped: list[DroppedItem] = field(default_factory=list)


_ASCII_DIGITS = re.compile(r"[0-9]+")


def _coerce_match_id(raw: Any) -> int | None:
    # bool is an int subclass; reject it along with non-integral floats like 1.5
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str) and _ASCII_DIGITS.fullmatch(raw.strip()):
        return int(raw.strip())
    return None


def normalize_items(
    raw_items: Iterable[CouponItemIn], matches: Sequence[Match],
) -> tuple[list[Pick], list[DroppedItem]]:
    """Resolve raw picks against the day's catalog.

    Invalid entries are dropped, not fatal: unknown match, unrecognized
    prediction label, or a second pick on an already picked match (first
    pick wins). Each kept pick captures the catalog odd as of now.
    """
    by_id = {m.id: m for m in matches}
    picks: list[Pick] = []
    dropped: list[DroppedItem] = []
    seen: set[int] = set()

    for index, raw in enumerate(raw_items):
        match_id = _coerce_match_id(raw.match_id)
        match = by_id.get(match_id) if match_id is not None else None
        reason = None
        outcome = None
        odd = None

        if match is None:
            reason = "unknown_match"
        else:
            outcome = Outcome.parse(raw.prediction)
            odd = match.odd_for(outcome) if outcome is not None else None
            if odd is None:
                reason = "unknown_prediction"
            elif match.id in seen:
                reason = "duplicate_match"

        if reason is not None:
            dropped.append(DroppedItem(
                index=index, match_id=raw.match_id, prediction=raw.prediction, reason=reason,
            ))
            continue

        seen.add(match.id)
        picks.append(Pick(match_id=match.id, prediction=outcome, odd=odd))

    return picks, dropped


class CouponStore:
    def __init__(self, repository: CouponRepository, catalog: OddsCatalog):
        self._repo = repository
        self._catalog = catalog

    async def submit(
        self, user_id: int, day: str, raw_items: Iterable[CouponItemIn],
    ) -> SubmitOutcome:
        """Create the day's coupon or replace the items of the open one."""
        matches = self._catalog.get(day)
        if matches is None:
            raise NoMatchesPublished()

        async with self._repo.lock_for(user_id, day):
            existing = self._repo.get(user_id, day)
            if existing is not None and not existing.is_editable:
                raise CouponLocked()

            picks, dropped = normalize_items(raw_items, matches)
            if not picks:
                raise NoValidItems()

            now = utcnow()
            if existing is None:
                coupon = Coupon(
                    id=self._repo.next_id(),
                    user_id=user_id,
                    day=day,
                    items=picks,
                    status=CouponStatus.open,
                    created_at=now,
                    updated_at=now,
                )
            else:
                coupon = existing.model_copy(update={"items": picks, "updated_at": now})
            self._repo.save(coupon)

        logger.info(
            "Coupon saved: user=%d day=%s id=%d picks=%d dropped=%d",
            user_id, day, coupon.id, len(picks), len(dropped),
        )
        return SubmitOutcome(coupon=coupon, dropped=dropped)

    async def lock(self, user_id: int, day: str) -> Coupon:
        async with self._repo.lock_for(user_id, day):
            coupon = self._repo.get(user_id, day)
            if coupon is None:
                raise NoCoupon()
            if coupon.status != CouponStatus.open:
                raise AlreadyLocked()

            now = utcnow()
            coupon = self._repo.save(coupon.model_copy(update={
                "status": CouponStatus.locked,
                "locked_at": now,
                "updated_at": now,
            }))

        logger.info("Coupon locked: user=%d day=%s id=%d", user_id, day, coupon.id)
        return coupon

    def get_today(self, user_id: int, day: str) -> Coupon | None:
        return self._repo.get(user_id, day)
