# File: community_action/schemas/project.py

from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict

# Largest id a signed 64-bit integer column can hold.
MAX_PROJECT_ID = 2**63 - 1


class ProjectType(str, Enum):
    CLEANUP = "cleanup"
    WEEDS = "weeds"
    GRAFFITI = "graffiti"
    OTHER = "other"

    @classmethod
    def coerce(cls, value: Any) -> "ProjectType":
        """
        Map any stored value onto the closed set; unknown input becomes OTHER.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        return cls.OTHER

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]

    @property
    def label(self) -> str:
        return TYPE_LABELS[self]

    @property
    def badge_class(self) -> str:
        return f"badge-{self.value}"


TYPE_LABELS = {
    ProjectType.CLEANUP: "Litter Cleanup",
    ProjectType.WEEDS: "Weed Removal",
    ProjectType.GRAFFITI: "Graffiti Removal",
    ProjectType.OTHER: "Other",
}


class ProjectBase(BaseModel):
    title: str
    description: str
    location: str
    type: ProjectType


class ProjectPayload(BaseModel):
    """
    Body accepted by the JSON API for create and update.

    Fields are loose strings on purpose; the form schema in
    ``services.forms`` decides what is valid so pages and API agree.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    type: Optional[str] = None


class ProjectRead(ProjectBase):
    model_config = ConfigDict(from_attributes=True, extra="allow")

    id: int
    votes: int = 0
    image: Optional[str] = None
    creator_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VoteRead(BaseModel):
    project_id: int
    votes: int
    has_voted: bool
    outcome: str


def normalize(raw: Mapping[str, Any]) -> ProjectRead:
    """
    Turn a raw gateway record into a ProjectRead.

    Every field is copied as-is except ``type``, which is coerced into
    :class:`ProjectType`.
    """
    data = dict(raw)
    data["type"] = ProjectType.coerce(data.get("type"))
    return ProjectRead.model_validate(data)
