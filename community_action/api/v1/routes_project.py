# File: community_action/api/v1/routes_project.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status

from community_action.api.deps import get_current_user, get_gateway
from community_action.core.errors import (
    AuthenticationRequired,
    FormValidationError,
    GatewayError,
    PermissionDenied,
    ProjectNotFound,
)
from community_action.schemas.project import MAX_PROJECT_ID, ProjectPayload, ProjectRead, VoteRead
from community_action.schemas.user import SessionUser
from community_action.services import projects as project_service
from community_action.services.gateway import DataGateway
from community_action.services.listing import ViewState
from community_action.services.voting import VoteOutcome, VoteToggleController
from community_action.web.templating import sign_in_url

router = APIRouter()


def _unauthorized(return_to: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": "Authentication required.", "sign_in_url": sign_in_url(return_to)},
    )


def _store_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail="The data store is unavailable. Please try again later.",
    )


@router.get(
    "/",
    response_model=list[ProjectRead],
    summary="List projects (search, type filter, vote sort)",
)
def list_projects(
    q: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    gateway: DataGateway = Depends(get_gateway),
):
    view = ViewState.from_query(q=q, type=type, sort=sort)
    try:
        return view.apply(project_service.list_projects(gateway))
    except GatewayError:
        raise _store_unavailable()


@router.get("/{project_id}", response_model=ProjectRead, summary="Get one project")
def get_project(
    project_id: int = Path(..., ge=1, le=MAX_PROJECT_ID),
    gateway: DataGateway = Depends(get_gateway),
):
    try:
        project = project_service.get_project(gateway, project_id)
    except GatewayError:
        raise _store_unavailable()
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


@router.post(
    "/",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
)
def create_project(
    payload: ProjectPayload,
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    try:
        return project_service.create_project(gateway, payload.model_dump(), user)
    except AuthenticationRequired as exc:
        raise _unauthorized(exc.return_to)
    except FormValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": exc.errors},
        )
    except GatewayError:
        raise _store_unavailable()


@router.put("/{project_id}", response_model=ProjectRead, summary="Update project (creator only)")
def update_project(
    payload: ProjectPayload,
    project_id: int = Path(..., ge=1, le=MAX_PROJECT_ID),
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    try:
        return project_service.update_project(gateway, project_id, payload.model_dump(), user)
    except AuthenticationRequired as exc:
        raise _unauthorized(exc.return_to)
    except ProjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    except PermissionDenied as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    except FormValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": exc.errors},
        )
    except GatewayError:
        raise _store_unavailable()


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project (creator only)",
)
def delete_project(
    project_id: int = Path(..., ge=1, le=MAX_PROJECT_ID),
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    try:
        project_service.delete_project(gateway, project_id, user)
    except AuthenticationRequired as exc:
        raise _unauthorized(exc.return_to)
    except ProjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    except PermissionDenied as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    except GatewayError:
        raise _store_unavailable()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{project_id}/vote", response_model=VoteRead, summary="Toggle the caller's vote")
def toggle_vote(
    project_id: int = Path(..., ge=1, le=MAX_PROJECT_ID),
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    return_to = f"/project/{project_id}"
    if user is None:
        raise _unauthorized(return_to)

    try:
        project = project_service.get_project(gateway, project_id)
        if project is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
        controller = VoteToggleController.load(gateway, project.model_dump(), user, return_to=return_to)
        result = controller.toggle()
    except AuthenticationRequired as exc:
        raise _unauthorized(exc.return_to)
    except GatewayError:
        raise _store_unavailable()

    if result.outcome is VoteOutcome.FAILED:
        raise _store_unavailable()

    return VoteRead(
        project_id=project_id,
        votes=result.vote_count,
        has_voted=result.has_voted,
        outcome=result.outcome.value,
    )
