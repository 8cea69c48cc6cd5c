from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserInDB(BaseModel):
    """Registered player. `points` only ever grows."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    token: str
    points: int = Field(default=0, ge=0)
    created_at: datetime


class RegisterRequest(BaseModel):
    """Request body for registration."""
    name: str = ""

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class LoginRequest(BaseModel):
    """Request body for login with a previously issued token."""
    token: str = ""


class UserResponse(BaseModel):
    """Session data returned to the owner of the token."""
    token: str
    name: str
    points: int


class LeaderboardEntry(BaseModel):
    """Public leaderboard row: never carries the token."""
    rank: int
    name: str
    points: int
