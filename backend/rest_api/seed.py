"""
Seed data for development and testing.
Creates two teams with a small roster each.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from rest_api.models import Player, Team
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit

logger = get_logger(__name__)


# Fixed identities so seeded records are addressable from docs and scripts
LIVERPOOL_ID = "46e3129d-59ee-4e53-976d-ba053a53a7f0"
BARCELONA_ID = "8f5c2a61-3d7e-4b0a-9c1e-2a4b6d8f0e13"

SEED_TEAMS = [
    {"id": LIVERPOOL_ID, "name": "Liverpool", "shirt_color": "red"},
    {"id": BARCELONA_ID, "name": "Barcelona", "shirt_color": "blue"},
]

SEED_PLAYERS = [
    {
        "id": "d4fe0692-bf0e-4db2-8723-edadcb57fa53",
        "name": "Mohamed Salah",
        "position": "Forward",
        "age": 32,
        "salary": 50000,
        "team_id": LIVERPOOL_ID,
    },
    {
        "id": "d4fe0692-bf0e-4db2-8723-edadcb57fa43",
        "name": "Virgil van Dijk",
        "position": "Defender",
        "age": 33,
        "salary": 40000,
        "team_id": LIVERPOOL_ID,
    },
    {
        "id": "5b2e9c7a-1f4d-4e8b-a6c3-7d9e0f1a2b3c",
        "name": "Pedri",
        "position": "Midfielder",
        "age": 22,
        "salary": 35000,
        "team_id": BARCELONA_ID,
    },
]


def seed(db: Session) -> None:
    """
    Seed the database with initial data.
    Idempotent: only inserts if no team exists.
    """
    if db.scalar(select(Team.id).limit(1)):
        logger.info("Database already seeded, skipping")
        return

    logger.info("Seeding database")

    db.add_all(Team(**team) for team in SEED_TEAMS)
    db.flush()
    db.add_all(Player(**player) for player in SEED_PLAYERS)
    safe_commit(db)

    logger.info(
        "Database seeded",
        teams=len(SEED_TEAMS),
        players=len(SEED_PLAYERS),
    )
