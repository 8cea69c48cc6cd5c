"""
backend/kupon/container.py

Purpose:
    Wires repositories, providers and services for one running game. The app
    builds a single container at startup and exposes it to routers through
    the `get_container` dependency; tests build their own.

Dependencies:
    - kupon.config
    - kupon.providers
    - kupon.services
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from fastapi import Request

from kupon.config import Settings
from kupon.providers.api_football import ApiFootballProvider
from kupon.providers.base import MatchDataProvider
from kupon.providers.demo import DemoProvider
from kupon.services.catalog_service import OddsCatalog
from kupon.services.coupon_repository import CouponRepository
from kupon.services.coupon_service import CouponStore
from kupon.services.result_service import ResultBook
from kupon.services.scoring_service import ScoringEngine
from kupon.services.user_repository import UserRepository
from kupon.utils import day_key

logger = logging.getLogger("kupon.container")


@dataclass
class GameContainer:
    settings: Settings
    provider: MatchDataProvider
    users: UserRepository
    coupons: CouponRepository
    catalog: OddsCatalog
    results: ResultBook
    store: CouponStore
    scoring: ScoringEngine

    def today(self, now: Optional[datetime] = None) -> str:
        return day_key(now, self.settings.GAME_TIMEZONE)

    async def aclose(self) -> None:
        await self.provider.aclose()


def build_provider(settings: Settings) -> MatchDataProvider:
    source = settings.CATALOG_SOURCE.strip().lower()
    if source == "api_football":
        if not settings.API_FOOTBALL_KEY:
            raise ValueError("CATALOG_SOURCE=api_football requires API_FOOTBALL_KEY")
        return ApiFootballProvider(
            api_key=settings.API_FOOTBALL_KEY,
            base_url=settings.API_FOOTBALL_BASE_URL,
            bookmaker_id=settings.API_FOOTBALL_BOOKMAKER_ID,
            max_fixtures=settings.API_FOOTBALL_MAX_FIXTURES,
            timeout=settings.API_FOOTBALL_TIMEOUT_SECONDS,
            max_retries=settings.API_FOOTBALL_MAX_RETRIES,
        )
    if source != "demo":
        raise ValueError(f"Unknown CATALOG_SOURCE: {settings.CATALOG_SOURCE}")
    rng = random.Random(settings.DEMO_SEED) if settings.DEMO_SEED is not None else None
    return DemoProvider(matches_per_day=settings.DEMO_MATCHES_PER_DAY, rng=rng)


def build_container(settings: Settings, provider: Optional[MatchDataProvider] = None) -> GameContainer:
    provider = provider or build_provider(settings)
    users = UserRepository()
    coupons = CouponRepository()
    catalog = OddsCatalog(provider)
    results = ResultBook(provider, catalog)
    container = GameContainer(
        settings=settings,
        provider=provider,
        users=users,
        coupons=coupons,
        catalog=catalog,
        results=results,
        store=CouponStore(coupons, catalog),
        scoring=ScoringEngine(coupons, users, results, multiplier=settings.POINTS_MULTIPLIER),
    )
    logger.info("Game container built: source=%s tz=%s", type(provider).__name__, settings.GAME_TIMEZONE)
    return container


def get_container(request: Request) -> GameContainer:
    return request.app.state.container
