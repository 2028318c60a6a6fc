"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Settings are read at import time; point everything at in-memory SQLite
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_ON_STARTUP"] = "false"

import string

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from rest_api.main import app
from rest_api.models import Base, Player, Team
from shared.infrastructure.db import create_db_engine, get_db


# SQLite in-memory database for testing, foreign keys enforced
engine = create_db_engine("sqlite://")
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def letter_name(index: int, prefix: str = "Team") -> str:
    """Letters-only unique name: 0 -> 'Team A', 26 -> 'Team BA'."""
    letters = string.ascii_uppercase
    suffix = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        suffix = letters[remainder] + suffix
    return f"{prefix} {suffix}"


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_team(db_session):
    """Factory inserting a team directly through the ORM."""
    def _make(name: str, shirt_color: str = "red") -> Team:
        team = Team(name=name, shirt_color=shirt_color)
        db_session.add(team)
        db_session.commit()
        db_session.refresh(team)
        return team

    return _make


@pytest.fixture
def make_player(db_session):
    """Factory inserting a player directly through the ORM."""
    def _make(
        team: Team,
        name: str,
        salary: float = 10000,
        age: int = 25,
        position: str = "Midfielder",
    ) -> Player:
        player = Player(
            name=name,
            salary=salary,
            age=age,
            position=position,
            team_id=team.id,
        )
        db_session.add(player)
        db_session.commit()
        db_session.refresh(player)
        return player

    return _make


@pytest.fixture
def seed_team(make_team):
    """Liverpool, without players."""
    return make_team("Liverpool", "red")


@pytest.fixture
def seed_roster(seed_team, make_player):
    """Liverpool with two players earning 50000 and 40000."""
    salah = make_player(seed_team, "Mohamed Salah", salary=50000, age=32, position="Forward")
    hassan = make_player(seed_team, "Hassan Ali", salary=40000, age=21, position="Defender")
    return seed_team, [salah, hassan]


@pytest.fixture
def many_teams(make_team):
    """25 teams with letters-only names."""
    return [make_team(letter_name(i)) for i in range(25)]
