"""Coupon endpoints: one coupon per user per day, editable until locked."""

from fastapi import APIRouter, Depends

from kupon.container import GameContainer, get_container
from kupon.models.coupon import SubmitCouponRequest, coupon_to_response
from kupon.models.user import UserInDB
from kupon.services.auth_service import get_current_user

router = APIRouter(prefix="/api/coupon", tags=["coupon"])


@router.post("")
async def save_coupon(
    body: SubmitCouponRequest,
    user: UserInDB = Depends(get_current_user),
    container: GameContainer = Depends(get_container),
):
    """Create today's coupon or replace its picks while it is still open."""
    outcome = await container.store.submit(user.id, container.today(), body.items or [])
    return {
        "coupon": coupon_to_response(outcome.coupon),
        "dropped": [d.model_dump(by_alias=True) for d in outcome.dropped],
    }


@router.post("/lock")
async def lock_coupon(
    user: UserInDB = Depends(get_current_user),
    container: GameContainer = Depends(get_container),
):
    coupon = await container.store.lock(user.id, container.today())
    return {"coupon": coupon_to_response(coupon)}


@router.get("/today")
async def coupon_today(
    user: UserInDB = Depends(get_current_user),
    container: GameContainer = Depends(get_container),
):
    day = container.today()
    coupon = container.store.get_today(user.id, day)
    return {
        "coupon": coupon_to_response(coupon) if coupon else None,
        "date": day,
    }
