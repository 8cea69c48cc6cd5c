"""
backend/kupon/services/user_repository.py

Purpose:
    In-memory user store keyed by user id, with token lookup for identity
    resolution and the points balance sink used by the scoring engine.

Dependencies:
    - kupon.models.user
"""

from __future__ import annotations

import logging
import secrets

from kupon.errors import UserNotFound
from kupon.models.user import UserInDB
from kupon.utils import utcnow

logger = logging.getLogger("kupon.user_repository")


class UserRepository:
    """Users in registration order. Dict insertion order is the tie-break order."""

    def __init__(self) -> None:
        self._users: dict[int, UserInDB] = {}
        self._by_token: dict[str, int] = {}
        self._next_id = 1

    def register(self, name: str) -> UserInDB:
        token = secrets.token_urlsafe(16)
        while token in self._by_token:
            token = secrets.token_urlsafe(16)

        user = UserInDB(id=self._next_id, name=name, token=token, points=0, created_at=utcnow())
        self._next_id += 1
        self._users[user.id] = user
        self._by_token[token] = user.id
        logger.info("User registered: id=%d name=%s", user.id, name)
        return user

    def get(self, user_id: int) -> UserInDB | None:
        return self._users.get(user_id)

    def get_by_token(self, token: str) -> UserInDB | None:
        user_id = self._by_token.get(token)
        if user_id is None:
            return None
        return self._users.get(user_id)

    def add_points(self, user_id: int, amount: int) -> UserInDB:
        """Credit `amount` points. Synchronous so callers can commit it atomically."""
        if amount < 0:
            raise ValueError("Points can only be added, never deducted.")
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFound()
        updated = user.model_copy(update={"points": user.points + amount})
        self._users[user_id] = updated
        return updated

    def all(self) -> list[UserInDB]:
        return list(self._users.values())
