from fastapi import APIRouter, Depends

from kupon.container import GameContainer, get_container
from kupon.models.match import MatchesResponse

router = APIRouter(prefix="/api/matches", tags=["matches"])


@router.get("/today", response_model=MatchesResponse)
async def matches_today(container: GameContainer = Depends(get_container)):
    """Today's catalog. Publishes it from the configured feed on first request."""
    day = container.today()
    matches = await container.catalog.get_or_fetch(day)
    return MatchesResponse(date=day, matches=list(matches))
