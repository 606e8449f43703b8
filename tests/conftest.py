"""
- Spins up temp test DB
- Create tables before tests run
- Provide a db_session fixture and override FastAPI's get_db so routes use the test session.
- Provide a small in-memory Pokemon catalog instead of calling pokeapi.co.
- Pin the puzzle day to 2024-01-15 (secret = #54 Psyduck with 386 Pokemon).
- Provide a client fixture (TestClient(app)) that already has the overrides applied.
"""
import os
import pytest
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure the app does NOT run dev-only startup hooks (e.g., auto-create tables against real DB)
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("POKEDLE_UNIVERSE_SIZE", "386")

from app.db import Base, get_db
from app.engine import Entity
from app.main import app, get_day_key, get_lookup
from app.pokeapi_client import CatalogLookup
from app import models  # noqa: F401

# Use SQLite in-memory for tests (fast, isolated)
TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"

DAY_KEY = 20240115
SECRET_NAME = "psyduck"

CATALOG = [
    Entity(1, "bulbasaur", "grass", "poison", 1, 7, 69, "green", 318),
    Entity(4, "charmander", "fire", None, 1, 6, 85, "red", 309),
    Entity(7, "squirtle", "water", None, 1, 5, 90, "blue", 314),
    Entity(25, "pikachu", "electric", None, 1, 4, 60, "yellow", 320),
    Entity(54, "psyduck", "water", None, 1, 8, 196, "yellow", 320),
    Entity(55, "golduck", "water", None, 1, 17, 766, "blue", 500),
    Entity(130, "gyarados", "water", "flying", 1, 65, 2350, "blue", 540),
    Entity(152, "chikorita", "grass", None, 2, 9, 64, "green", 318),
    Entity(258, "mudkip", "water", None, 3, 4, 76, "blue", 310),
    Entity(384, "rayquaza", "dragon", "flying", 3, 70, 2065, "green", 680, is_legendary=True),
]

# Six wrong names, enough to lose
WRONG_NAMES = ["bulbasaur", "charmander", "squirtle", "pikachu", "golduck", "gyarados"]


@pytest.fixture
def pokemon() -> dict:
    return {entity.name: entity for entity in CATALOG}

@pytest.fixture
def lookup() -> CatalogLookup:
    return CatalogLookup(CATALOG)

@pytest.fixture(scope="session")
def engine():
    # StaticPool + check_same_thread=False lets Starlette's TestClient and SQLAlchemy
    # share ONE in-memory SQLite database across threads. Otherwise each thread would
    # see a different empty DB.
    engine = create_engine(
        TEST_DATABASE_URL,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # <-- share one connection across threads
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(engine) -> Generator:
    """Provide a clean session per test with rollback."""
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    db = TestingSessionLocal()
    try:
        yield db
        # Roll back uncommitted changes in this session
        db.rollback()
    finally:
        db.close()

@pytest.fixture(autouse=True)
def _clean_db(engine):
    """
    Keep tests independent:
    The store commits on every write, so data would leak between tests.
    We delete rows before each test to ensure a clean slate.
    """
    with engine.begin() as conn:
        conn.execute(text("DELETE FROM puzzle_sessions"))
    yield

@pytest.fixture(autouse=True)
def override_dep(db_session, lookup):
    """Force the app to use our test session, catalog and day for every request."""
    def _get_db_for_tests():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db_for_tests
    app.dependency_overrides[get_lookup] = lambda: lookup
    app.dependency_overrides[get_day_key] = lambda: DAY_KEY
    yield
    app.dependency_overrides.clear()

@pytest.fixture
def client():
    # Talks to the FastAPI app in-process; no network, no real database.
    return TestClient(app)
