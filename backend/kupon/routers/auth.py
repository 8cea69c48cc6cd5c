"""Registration and token login."""

from fastapi import APIRouter, Depends

from kupon.container import GameContainer, get_container
from kupon.errors import NameRequired
from kupon.models.user import LoginRequest, RegisterRequest, UserResponse
from kupon.services.auth_service import login

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", response_model=UserResponse)
async def register(
    body: RegisterRequest,
    container: GameContainer = Depends(get_container),
):
    """Register a display name and receive the opaque token for later calls."""
    if not body.name:
        raise NameRequired()
    user = container.users.register(body.name)
    return UserResponse(token=user.token, name=user.name, points=user.points)


@router.post("/login", response_model=UserResponse)
async def login_with_token(
    body: LoginRequest,
    container: GameContainer = Depends(get_container),
):
    user = login(container, body.token)
    return UserResponse(token=user.token, name=user.name, points=user.points)
