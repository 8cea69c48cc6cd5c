import logging
from typing import Optional

from fastapi import Depends, Header

from kupon.container import GameContainer, get_container
from kupon.errors import InvalidCredential, MissingCredential, UserNotFound
from kupon.models.user import UserInDB

logger = logging.getLogger("kupon.auth")

TOKEN_HEADER = "X-Auth-Token"


def resolve_user(container: GameContainer, token: Optional[str]) -> UserInDB:
    """Resolve an opaque token to its user. Never falls back to anonymous."""
    if not token:
        raise MissingCredential()
    user = container.users.get_by_token(token)
    if user is None:
        logger.warning("Rejected unknown token")
        raise InvalidCredential()
    return user


def login(container: GameContainer, token: str) -> UserInDB:
    """Look up the user owning `token` for the login endpoint."""
    if not token:
        raise MissingCredential("Token required.")
    user = container.users.get_by_token(token)
    if user is None:
        raise UserNotFound()
    return user


async def get_current_user(
    x_auth_token: Optional[str] = Header(default=None, alias=TOKEN_HEADER),
    container: GameContainer = Depends(get_container),
) -> UserInDB:
    """FastAPI dependency: the user behind the X-Auth-Token header."""
    return resolve_user(container, x_auth_token)
