"""
Database initialization helpers.

Models are imported so their tables get registered on Base.metadata.
"""

import logging

from sqlalchemy.orm import Session

from community_action.db.session import engine
from community_action.models.base import Base
from community_action.models import project, user, vote  # noqa: F401
from community_action.services.gateway import DataGateway

logger = logging.getLogger(__name__)

DEMO_PROJECTS = [
    {
        "title": "Riverbank Cleanup",
        "description": "Help clean up trash along the riverside park. We'll provide gloves and bags. Join us for a cleaner community!",
        "location": "Riverside Park, Main Street",
        "type": "cleanup",
        "votes": 24,
    },
    {
        "title": "Community Garden Weeding",
        "description": "The community garden needs help with removing invasive weeds. Bring gardening tools if you have them!",
        "location": "Community Garden, Oak Avenue",
        "type": "weeds",
        "votes": 18,
    },
    {
        "title": "Playground Graffiti Removal",
        "description": "The children's playground has been vandalized with graffiti. Help us restore it to a family-friendly space.",
        "location": "Central Park Playground",
        "type": "graffiti",
        "votes": 32,
    },
    {
        "title": "Park Bench Restoration",
        "description": "Several benches in the central park need repainting and minor repairs. Help us make them beautiful and safe again.",
        "location": "Central Park, East Entrance",
        "type": "other",
        "votes": 15,
    },
    {
        "title": "Highway Entrance Cleanup",
        "description": "The entrance to our community from the highway is littered with trash. Let's clean it up to make a better first impression.",
        "location": "Highway 101 Entrance",
        "type": "cleanup",
        "votes": 29,
    },
    {
        "title": "Elementary School Garden",
        "description": "Help maintain the garden at the local elementary school. We need to remove weeds and plant new seasonal flowers.",
        "location": "Lincoln Elementary School",
        "type": "weeds",
        "votes": 22,
    },
]


def init_db() -> None:
    """
    Create all tables based on SQLAlchemy models.
    """
    Base.metadata.create_all(bind=engine)


def seed_initial_data(db: Session) -> int:
    """
    Insert the demo projects into an empty projects table.

    Returns the number of rows inserted.
    """
    gateway = DataGateway(db)
    if gateway.count("projects"):
        return 0

    with gateway.transaction():
        for record in DEMO_PROJECTS:
            gateway.insert("projects", record)
    logger.info("Seeded %d demo projects", len(DEMO_PROJECTS))
    return len(DEMO_PROJECTS)
