# File: community_action/models/project.py

"""
Project model.

A proposed community-improvement initiative. ``type`` is stored as a plain
string; readers must pass records through ``schemas.project.normalize`` so
anything outside the closed set shows up as "other".
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from community_action.models.base import Base


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (CheckConstraint("votes >= 0", name="ck_projects_votes_non_negative"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="other")
    votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    creator_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    voters: Mapped[list["ProjectVote"]] = relationship(  # noqa: F821
        back_populates="project",
        cascade="all, delete-orphan",
    )
