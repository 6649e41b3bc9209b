# File: community_action/services/projects.py

"""
Project reads and writes on top of the data gateway.

Every record handed back to callers has gone through ``normalize``.
Ownership rules live here so the pages and the JSON API enforce them the
same way.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional

from community_action.core.errors import (
    AuthenticationRequired,
    FormValidationError,
    PermissionDenied,
    ProjectNotFound,
)
from community_action.schemas.project import ProjectRead, normalize
from community_action.schemas.user import SessionUser
from community_action.services.forms import PROJECT_FORM_SCHEMA, validate_form
from community_action.services.gateway import DataGateway

logger = logging.getLogger(__name__)

TABLE = "projects"
FEATURED_LIMIT = 3


def list_projects(gateway: DataGateway) -> List[ProjectRead]:
    rows = gateway.select(TABLE, order=[("created_at", "desc"), ("id", "desc")])
    return [normalize(row) for row in rows]


def featured_projects(gateway: DataGateway, limit: int = FEATURED_LIMIT) -> List[ProjectRead]:
    rows = gateway.select(TABLE, order=[("votes", "desc"), ("id", "asc")], limit=limit)
    return [normalize(row) for row in rows]


def get_project(gateway: DataGateway, project_id: int) -> Optional[ProjectRead]:
    row = gateway.select_one(TABLE, project_id)
    return normalize(row) if row is not None else None


def community_stats(gateway: DataGateway) -> Dict[str, int]:
    return {
        "projects": gateway.count(TABLE),
        "votes": gateway.total(TABLE, "votes"),
        "members": gateway.count("users"),
    }


def is_creator(project: ProjectRead, user: Optional[SessionUser]) -> bool:
    return bool(user and project.creator_id and project.creator_id == user.id)


def _require_user(user: Optional[SessionUser], return_to: str) -> SessionUser:
    if user is None:
        raise AuthenticationRequired(return_to)
    return user


def _clean(values: Mapping[str, str]) -> Dict[str, str]:
    result = validate_form(values, PROJECT_FORM_SCHEMA)
    if not result.is_valid:
        raise FormValidationError(result.errors)
    return result.values


def create_project(
    gateway: DataGateway,
    values: Mapping[str, str],
    user: Optional[SessionUser],
) -> ProjectRead:
    user = _require_user(user, "/new-project")
    cleaned = _clean(values)

    row = gateway.insert(
        TABLE,
        {
            **cleaned,
            "votes": 0,
            "creator_id": user.id,
        },
    )
    logger.info("Project %s created by %s", row["id"], user.id)
    return normalize(row)


def load_for_edit(
    gateway: DataGateway,
    project_id: int,
    user: Optional[SessionUser],
) -> ProjectRead:
    """
    Fetch a project the current user is allowed to change.

    Raises ProjectNotFound, or PermissionDenied when ``user`` is not the
    creator (projects without a creator are not editable by anyone).
    """
    user = _require_user(user, f"/edit-project/{project_id}")
    project = get_project(gateway, project_id)
    if project is None:
        raise ProjectNotFound(project_id)
    if not is_creator(project, user):
        logger.warning("User %s denied access to project %s", user.id, project_id)
        raise PermissionDenied("You don't have permission to edit this project")
    return project


def update_project(
    gateway: DataGateway,
    project_id: int,
    values: Mapping[str, str],
    user: Optional[SessionUser],
) -> ProjectRead:
    load_for_edit(gateway, project_id, user)
    cleaned = _clean(values)

    gateway.update(
        TABLE,
        project_id,
        {**cleaned, "updated_at": datetime.now(timezone.utc)},
    )
    logger.info("Project %s updated by %s", project_id, user.id)
    return get_project(gateway, project_id)


def delete_project(
    gateway: DataGateway,
    project_id: int,
    user: Optional[SessionUser],
) -> None:
    user = _require_user(user, f"/project/{project_id}")
    project = get_project(gateway, project_id)
    if project is None:
        raise ProjectNotFound(project_id)
    if not is_creator(project, user):
        logger.warning("User %s denied delete of project %s", user.id, project_id)
        raise PermissionDenied("You don't have permission to delete this project")

    gateway.delete(TABLE, project_id)
    logger.info("Project %s deleted by %s", project_id, user.id)
