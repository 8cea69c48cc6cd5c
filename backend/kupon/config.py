"""
backend/kupon/config.py

Purpose:
    Central settings loading for the coupon game backend.

Dependencies:
    - pydantic-settings
    - pathlib
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

# Prefer backend/.env, fallback to project-root .env.
_BACKEND_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"
_ROOT_ENV_FILE = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    APP_NAME: str = "Kupon"
    BACKEND_CORS_ORIGINS: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # "Today" is computed in this timezone
    GAME_TIMEZONE: str = "UTC"

    # Match + result source: "demo" | "api_football"
    CATALOG_SOURCE: str = "demo"
    DEMO_MATCHES_PER_DAY: int = 5
    DEMO_SEED: Optional[int] = None

    # API-Football (api-sports.io)
    API_FOOTBALL_KEY: str = ""
    API_FOOTBALL_BASE_URL: str = "https://v3.football.api-sports.io"
    API_FOOTBALL_BOOKMAKER_ID: int = 8
    API_FOOTBALL_MAX_FIXTURES: int = 10
    API_FOOTBALL_TIMEOUT_SECONDS: float = 15.0
    API_FOOTBALL_MAX_RETRIES: int = 2

    # Scoring
    POINTS_MULTIPLIER: int = 10
    LEADERBOARD_LIMIT: int = 50

    model_config = {
        "env_file": (str(_BACKEND_ENV_FILE), str(_ROOT_ENV_FILE)),
        "extra": "ignore",
    }


settings = Settings()
