# File: community_action/models/vote.py

"""
Vote ledger: one row per (project, user) that currently supports a project.

``projects.votes`` is kept in step with this table inside the same
transaction, see ``services.voting``.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from community_action.models.base import Base


class ProjectVote(Base):
    __tablename__ = "project_votes"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_votes_voter"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    project: Mapped["Project"] = relationship(back_populates="voters")  # noqa: F821
