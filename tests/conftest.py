"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For vehicle test data, see tests/fixtures/vehicle_fixtures.py
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.models import Base


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring database (deselect with '-m \"not db\"')"
    )


def create_sqlite_session_factory():
    """
    In-memory SQLite engine shared across threads (the TestClient runs
    sync endpoints in a worker thread), with the schema created.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    return engine, sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session_factory():
    engine, factory = create_sqlite_session_factory()
    yield factory
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()
