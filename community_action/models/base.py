# File: community_action/models/base.py

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models (User, Project, ProjectVote).
    """
    pass
