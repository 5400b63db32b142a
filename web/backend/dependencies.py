#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from functools import lru_cache, partial
from typing import Generator, Optional

from fastapi import Depends
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from core.cache import ScoreCacheService, get_score_cache
from core.config_loader import get_config
from core.scorer import ScoringService, WeightStore, get_weight_store as _global_weight_store
from core.sync_service import VehicleSyncService
from core.wargaming_client import WargamingClient
from database.repositories import VehicleRepository
from database.uow import vehicle_uow


class DatabaseManager:
    """Manages database connections and sessions."""

    def __init__(self):
        config = get_config()
        self.engine = create_engine(
            config.database.url,
            pool_pre_ping=True,  # Verify connections before using
            pool_size=10,
            max_overflow=20
        )
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )

    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session.

        Yields:
            Session: SQLAlchemy database session.
        """
        session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()


@lru_cache()
def get_db_manager() -> DatabaseManager:
    """Engine is created on first use so importing the app needs no database."""
    return DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: Database session that will be automatically closed.
    """
    yield from get_db_manager().get_session()


def get_cache() -> Optional[ScoreCacheService]:
    """Shared cache service, or None when caching was not initialized."""
    return get_score_cache()


def get_weight_store() -> WeightStore:
    return _global_weight_store()


@lru_cache()
def get_wargaming_client() -> WargamingClient:
    config = get_config()
    return WargamingClient(
        api_key=config.wargaming.api_key,
        base_url=config.wargaming.base_url,
        request_timeout_seconds=config.wargaming.request_timeout_seconds,
        cache=get_score_cache(),
        cache_ttl_seconds=config.wargaming.cache_ttl_seconds
    )


def get_scoring_service(
    db: Session = Depends(get_db),
    cache: Optional[ScoreCacheService] = Depends(get_cache),
    weight_store: WeightStore = Depends(get_weight_store)
) -> ScoringService:
    return ScoringService(
        VehicleRepository(db),
        cache=cache,
        weight_store=weight_store,
        config=get_config().scoring
    )


def get_sync_service(
    client: WargamingClient = Depends(get_wargaming_client),
    cache: Optional[ScoreCacheService] = Depends(get_cache)
) -> VehicleSyncService:
    uow_factory = partial(vehicle_uow, get_db_manager().SessionLocal)
    return VehicleSyncService(client, uow_factory=uow_factory, cache=cache)
