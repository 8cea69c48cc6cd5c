from fastapi import APIRouter, Depends

from kupon.container import GameContainer, get_container
from kupon.models.coupon import coupon_to_response, results_to_response
from kupon.models.user import UserInDB
from kupon.services.auth_service import get_current_user

router = APIRouter(prefix="/api/results", tags=["results"])


@router.post("/evaluate")
async def evaluate_coupon(
    user: UserInDB = Depends(get_current_user),
    container: GameContainer = Depends(get_container),
):
    """Score today's locked coupon. Repeat calls return the stored evaluation."""
    outcome = await container.scoring.evaluate(user.id, container.today())
    body = {
        "coupon": coupon_to_response(outcome.coupon),
        "results": results_to_response(outcome.results),
        "gainedPoints": outcome.gained_points,
        "totalPoints": outcome.total_points,
    }
    if outcome.already_evaluated:
        body["message"] = "Already evaluated"
    return body
