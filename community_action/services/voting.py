# File: community_action/services/voting.py

"""
Vote toggling for a single project.

Support is recorded in the ``project_votes`` ledger and the counter on
``projects.votes`` is moved with an atomic increment in the same
transaction, so concurrent voters cannot overwrite each other's counts.

Local state (``vote_count`` / ``has_voted``) only changes after the write
succeeds; a failed write leaves it exactly as it was.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from community_action.core.errors import AuthenticationRequired, GatewayError
from community_action.schemas.user import SessionUser
from community_action.services.gateway import DataGateway

logger = logging.getLogger(__name__)


class VoteOutcome(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    FAILED = "failed"
    IGNORED = "ignored"


NOTICES = {
    VoteOutcome.ADDED: ("success", "Your vote has been counted!"),
    VoteOutcome.REMOVED: ("info", "Your vote has been removed"),
    VoteOutcome.FAILED: ("error", "Failed to update vote. Please try again."),
}


@dataclass
class VoteResult:
    outcome: VoteOutcome
    vote_count: int
    has_voted: bool

    @property
    def ok(self) -> bool:
        return self.outcome in (VoteOutcome.ADDED, VoteOutcome.REMOVED)

    @property
    def notice(self) -> Optional[tuple]:
        return NOTICES.get(self.outcome)


def has_user_voted(gateway: DataGateway, project_id: int, user: Optional[SessionUser]) -> bool:
    if user is None:
        return False
    return gateway.count("project_votes", {"project_id": project_id, "user_id": user.id}) > 0


class VoteToggleController:
    def __init__(
        self,
        gateway: DataGateway,
        project_id: int,
        vote_count: int,
        user: Optional[SessionUser],
        has_voted: bool = False,
        return_to: Optional[str] = None,
    ):
        self.gateway = gateway
        self.project_id = project_id
        self.user = user
        self.vote_count = vote_count
        self.has_voted = has_voted
        self.is_updating = False
        self.return_to = return_to or f"/project/{project_id}"

    @classmethod
    def load(
        cls,
        gateway: DataGateway,
        project: dict,
        user: Optional[SessionUser],
        return_to: Optional[str] = None,
    ) -> "VoteToggleController":
        """Build a controller for ``project``, reading ``has_voted`` from the ledger."""
        project_id = project["id"]
        return cls(
            gateway,
            project_id,
            project["votes"],
            user,
            has_voted=has_user_voted(gateway, project_id, user),
            return_to=return_to,
        )

    def _state(self, outcome: VoteOutcome) -> VoteResult:
        return VoteResult(outcome=outcome, vote_count=self.vote_count, has_voted=self.has_voted)

    def _write(self, delta: int) -> int:
        ledger_key = {"project_id": self.project_id, "user_id": self.user.id}
        with self.gateway.transaction():
            if delta > 0:
                self.gateway.insert("project_votes", ledger_key)
            elif not self.gateway.delete_where("project_votes", ledger_key):
                raise GatewayError("No vote to remove.")
            return self.gateway.increment("projects", self.project_id, "votes", delta)

    def toggle(self) -> VoteResult:
        if self.user is None:
            raise AuthenticationRequired(self.return_to)

        if self.is_updating:
            return self._state(VoteOutcome.IGNORED)

        self.is_updating = True
        try:
            delta = -1 if self.has_voted else 1
            try:
                new_count = self._write(delta)
            except GatewayError as exc:
                logger.error("Vote on project %s by %s failed: %s", self.project_id, self.user.id, exc)
                return self._state(VoteOutcome.FAILED)

            self.vote_count, self.has_voted = new_count, not self.has_voted
            logger.info(
                "Vote %s on project %s by %s (now %d)",
                "added" if delta > 0 else "removed",
                self.project_id,
                self.user.id,
                new_count,
            )
            return self._state(VoteOutcome.ADDED if delta > 0 else VoteOutcome.REMOVED)
        finally:
            self.is_updating = False
