from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from kupon.models.match import Outcome


class CouponStatus(str, Enum):
    open = "open"            # Items may be replaced wholesale
    locked = "locked"        # Items frozen, awaiting evaluation
    evaluated = "evaluated"  # Terminal, gained_points fixed


class Pick(BaseModel):
    """One leg of a coupon. `odd` is captured at submit time and never refreshed."""
    model_config = ConfigDict(frozen=True)

    match_id: int
    prediction: Outcome
    odd: float


class Coupon(BaseModel):
    """A user's prediction slip for one game day.

    Records are replaced, never mutated in place: every transition stores a
    `model_copy` so readers only ever see a complete state.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    day: str                                      # YYYY-MM-DD
    items: List[Pick]
    status: CouponStatus = CouponStatus.open
    gained_points: int = 0                        # Meaningful once evaluated
    results: Optional[Dict[int, Outcome]] = None  # Result snapshot used at evaluation
    created_at: datetime
    updated_at: datetime
    locked_at: Optional[datetime] = None
    evaluated_at: Optional[datetime] = None

    @property
    def is_editable(self) -> bool:
        return self.status == CouponStatus.open


# ---------- Request / Response models ----------

class CouponItemIn(BaseModel):
    """Raw pick as sent by the client. Validation happens in the coupon service."""
    model_config = ConfigDict(populate_by_name=True)

    match_id: Any = Field(default=None, alias="matchId")
    prediction: Any = None


class SubmitCouponRequest(BaseModel):
    items: Optional[List[CouponItemIn]] = None


class DroppedItem(BaseModel):
    """A submitted pick that did not survive normalization."""
    model_config = ConfigDict(populate_by_name=True)

    index: int
    match_id: Any = Field(default=None, alias="matchId")
    prediction: Any = None
    reason: str                                   # unknown_match | unknown_prediction | duplicate_match


def coupon_to_response(coupon: Coupon) -> dict:
    """Serialize a coupon in the camelCase shape the web client reads."""
    return {
        "id": coupon.id,
        "userId": coupon.user_id,
        "date": coupon.day,
        "items": [
            {
                "matchId": item.match_id,
                "prediction": item.prediction.value,
                "odd": item.odd,
            }
            for item in coupon.items
        ],
        "status": coupon.status.value,
        "locked": coupon.status != CouponStatus.open,
        "evaluated": coupon.status == CouponStatus.evaluated,
        "gainedPoints": coupon.gained_points,
        "createdAt": coupon.created_at,
        "updatedAt": coupon.updated_at,
        "lockedAt": coupon.locked_at,
        "evaluatedAt": coupon.evaluated_at,
    }


def results_to_response(results: Optional[Dict[int, Outcome]]) -> dict[str, str]:
    return {str(match_id): outcome.value for match_id, outcome in (results or {}).items()}
