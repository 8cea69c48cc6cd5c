from fastapi import APIRouter, Depends

from kupon.container import GameContainer, get_container
from kupon.services.leaderboard_service import top_players

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


@router.get("")
async def get_leaderboard(container: GameContainer = Depends(get_container)):
    """Global leaderboard, sorted by points descending. Public: name and points only."""
    players = top_players(container.users, limit=container.settings.LEADERBOARD_LIMIT)
    return {"players": [p.model_dump() for p in players]}
