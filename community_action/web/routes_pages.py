# File: community_action/web/routes_pages.py

"""
Server-rendered pages.

Every failure here ends in a rendered page or a redirect with a notice;
store errors are logged and never surface as a 500.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request, status

from community_action.api.deps import get_auth, get_current_user, get_gateway
from community_action.core.config import settings
from community_action.core.errors import (
    AuthError,
    AuthenticationRequired,
    FormValidationError,
    GatewayError,
    PermissionDenied,
    ProjectNotFound,
)
from community_action.schemas.project import MAX_PROJECT_ID
from community_action.schemas.user import SessionUser
from community_action.services import projects as project_service
from community_action.services.auth_service import AuthGateway
from community_action.services.gateway import DataGateway
from community_action.services.listing import ViewState
from community_action.services.voting import VoteToggleController
from community_action.web.templating import (
    redirect,
    render,
    safe_return_path,
    sign_in_redirect,
)

logger = logging.getLogger(__name__)

router = APIRouter()

VOLUNTEER_NOTICE = "Thanks for volunteering! We'll be in touch with details."
BLANK_FORM = {"title": "", "type": "", "location": "", "description": ""}


def _parse_id(value: str) -> Optional[int]:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    if not 1 <= parsed <= MAX_PROJECT_ID:
        return None
    return parsed


def not_found_page(request: Request, user: Optional[SessionUser], message: str = "Page not found"):
    return render(
        request,
        "not_found.html",
        {"message": message},
        user=user,
        status_code=status.HTTP_404_NOT_FOUND,
    )


def _load_project(gateway: DataGateway, raw_id: str):
    project_id = _parse_id(raw_id)
    if project_id is None:
        return None
    return project_service.get_project(gateway, project_id)


# ---------- HOME / STATIC ----------

@router.get("/", name="home")
def home(
    request: Request,
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    featured, stats, notice = [], None, None
    try:
        featured = project_service.featured_projects(gateway)
        stats = project_service.community_stats(gateway)
    except GatewayError:
        notice = ("error", "Failed to load projects. Please try again later.")
    return render(
        request,
        "index.html",
        {"featured": featured, "stats": stats},
        user=user,
        notice=notice,
    )


@router.get("/about", name="about")
def about(request: Request, user: Optional[SessionUser] = Depends(get_current_user)):
    return render(request, "about.html", user=user)


# ---------- LISTING ----------

@router.get("/projects", name="projects")
def projects_page(
    request: Request,
    q: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    view = ViewState.from_query(q=q, type=type, sort=sort)
    notice = None
    try:
        all_projects = project_service.list_projects(gateway)
    except GatewayError:
        all_projects = []
        notice = ("error", "Failed to load projects. Please try again later.")

    return render(
        request,
        "projects.html",
        {"view": view, "projects": view.apply(all_projects)},
        user=user,
        notice=notice,
    )


# ---------- DETAIL / VOTE / VOLUNTEER ----------

@router.get("/project/{project_id}", name="project_detail")
def project_detail(
    request: Request,
    project_id: str,
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    try:
        project = _load_project(gateway, project_id)
        if project is None:
            return not_found_page(request, user, "Project not found")
        voting = VoteToggleController.load(gateway, project.model_dump(), user)
    except GatewayError:
        return redirect(request, "/projects", ("error", "Failed to load project. Please try again."))

    return render(
        request,
        "project_detail.html",
        {
            "project": project,
            "voting": voting,
            "is_creator": project_service.is_creator(project, user),
        },
        user=user,
    )


@router.post("/project/{project_id}/vote", name="project_vote")
def project_vote(
    request: Request,
    project_id: str,
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    detail_url = f"/project/{project_id}"
    if user is None:
        return sign_in_redirect(request, detail_url)

    try:
        project = _load_project(gateway, project_id)
        if project is None:
            return not_found_page(request, user, "Project not found")
        controller = VoteToggleController.load(gateway, project.model_dump(), user, return_to=detail_url)
        result = controller.toggle()
    except AuthenticationRequired as exc:
        return sign_in_redirect(request, exc.return_to)
    except GatewayError:
        return redirect(request, detail_url, ("error", "An error occurred. Please try again later."))

    return redirect(request, detail_url, result.notice)


@router.post("/project/{project_id}/volunteer", name="project_volunteer")
def project_volunteer(
    request: Request,
    project_id: str,
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    detail_url = f"/project/{project_id}"
    if user is None:
        return sign_in_redirect(request, detail_url)

    try:
        project = _load_project(gateway, project_id)
    except GatewayError:
        return redirect(request, detail_url, ("error", "An error occurred. Please try again later."))
    if project is None:
        return not_found_page(request, user, "Project not found")

    logger.info("User %s volunteered for project %s", user.id, project.id)
    return redirect(request, detail_url, ("success", VOLUNTEER_NOTICE))


# ---------- CREATE ----------

@router.get("/new-project", name="new_project")
def new_project_form(
    request: Request,
    user: Optional[SessionUser] = Depends(get_current_user),
):
    if user is None:
        return sign_in_redirect(request, "/new-project")
    return render(
        request,
        "project_form.html",
        {"mode": "create", "values": BLANK_FORM, "errors": {}, "action": "/new-project"},
        user=user,
    )


@router.post("/new-project", name="new_project_submit")
def new_project_submit(
    request: Request,
    title: str = Form(""),
    type: str = Form(""),
    location: str = Form(""),
    description: str = Form(""),
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    values = {"title": title, "type": type, "location": location, "description": description}
    context = {"mode": "create", "values": values, "errors": {}, "action": "/new-project"}
    try:
        project = project_service.create_project(gateway, values, user)
    except AuthenticationRequired as exc:
        return sign_in_redirect(request, exc.return_to)
    except FormValidationError as exc:
        context["errors"] = exc.errors
        return render(
            request,
            "project_form.html",
            context,
            user=user,
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except GatewayError:
        return render(
            request,
            "project_form.html",
            context,
            user=user,
            notice=("error", "Failed to submit project. Please try again."),
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return redirect(request, f"/project/{project.id}", ("success", "Project submitted successfully!"))


# ---------- EDIT ----------

def _edit_guard(request: Request, gateway: DataGateway, raw_id: str, user: Optional[SessionUser]):
    """
    Returns (project, None) when editing is allowed, else (None, response).
    """
    project_id = _parse_id(raw_id)
    if project_id is None:
        return None, not_found_page(request, user, "Project not found")
    try:
        return project_service.load_for_edit(gateway, project_id, user), None
    except AuthenticationRequired as exc:
        return None, sign_in_redirect(request, exc.return_to)
    except ProjectNotFound:
        return None, not_found_page(request, user, "Project not found")
    except PermissionDenied as exc:
        return None, redirect(request, f"/project/{project_id}", ("error", str(exc)))
    except GatewayError:
        return None, redirect(request, "/projects", ("error", "Failed to load project. Please try again."))


@router.get("/edit-project/{project_id}", name="edit_project")
def edit_project_form(
    request: Request,
    project_id: str,
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    project, response = _edit_guard(request, gateway, project_id, user)
    if response is not None:
        return response

    values = {
        "title": project.title,
        "type": project.type.value,
        "location": project.location,
        "description": project.description,
    }
    return render(
        request,
        "project_form.html",
        {
            "mode": "edit",
            "project": project,
            "values": values,
            "errors": {},
            "action": f"/edit-project/{project.id}",
        },
        user=user,
    )


@router.post("/edit-project/{project_id}", name="edit_project_submit")
def edit_project_submit(
    request: Request,
    project_id: str,
    title: str = Form(""),
    type: str = Form(""),
    location: str = Form(""),
    description: str = Form(""),
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    project, response = _edit_guard(request, gateway, project_id, user)
    if response is not None:
        return response

    values = {"title": title, "type": type, "location": location, "description": description}
    context = {
        "mode": "edit",
        "project": project,
        "values": values,
        "errors": {},
        "action": f"/edit-project/{project.id}",
    }
    try:
        project_service.update_project(gateway, project.id, values, user)
    except FormValidationError as exc:
        context["errors"] = exc.errors
        return render(
            request,
            "project_form.html",
            context,
            user=user,
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except GatewayError:
        return render(
            request,
            "project_form.html",
            context,
            user=user,
            notice=("error", "Failed to update project. Please try again."),
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return redirect(request, f"/project/{project.id}", ("success", "Project updated successfully"))


# ---------- DELETE ----------

@router.get("/project/{project_id}/delete", name="delete_project")
def delete_project_confirm(
    request: Request,
    project_id: str,
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    project, response = _edit_guard(request, gateway, project_id, user)
    if response is not None:
        return response
    return render(request, "project_delete.html", {"project": project}, user=user)


@router.post("/project/{project_id}/delete", name="delete_project_submit")
def delete_project_submit(
    request: Request,
    project_id: str,
    gateway: DataGateway = Depends(get_gateway),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    pid = _parse_id(project_id)
    if pid is None:
        return not_found_page(request, user, "Project not found")
    detail_url = f"/project/{pid}"
    try:
        project_service.delete_project(gateway, pid, user)
    except AuthenticationRequired as exc:
        return sign_in_redirect(request, exc.return_to)
    except ProjectNotFound:
        return not_found_page(request, user, "Project not found")
    except PermissionDenied as exc:
        return redirect(request, detail_url, ("error", str(exc)))
    except GatewayError:
        return redirect(request, detail_url, ("error", "Failed to delete project. Please try again."))

    return redirect(request, "/projects", ("success", "Project deleted successfully"))


# ---------- AUTH ----------

@router.get("/auth", name="auth")
def auth_page(
    request: Request,
    redirect_to: Optional[str] = Query(None, alias="redirect"),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    target = safe_return_path(redirect_to)
    if user is not None:
        return redirect(request, target)
    return render(request, "auth.html", {"redirect": target, "email": ""}, user=user)


@router.post("/auth/sign-in", name="sign_in")
def sign_in(
    request: Request,
    email: str = Form(""),
    full_name: str = Form(""),
    provider: str = Form("email"),
    redirect_to: str = Form("/projects", alias="redirect"),
    gateway: DataGateway = Depends(get_gateway),
    auth: AuthGateway = Depends(get_auth),
):
    target = safe_return_path(redirect_to)
    try:
        session_user, token = auth.sign_in_with_provider(
            gateway,
            provider,
            email=email,
            full_name=full_name.strip() or None,
        )
    except AuthError as exc:
        return render(
            request,
            "auth.html",
            {"redirect": target, "email": email},
            notice=("error", str(exc)),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except GatewayError:
        return render(
            request,
            "auth.html",
            {"redirect": target, "email": email},
            notice=("error", "Sign-in failed. Please try again later."),
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    response = redirect(request, target, ("success", f"Signed in as {session_user.display_name}"))
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    return response


@router.post("/auth/sign-out", name="sign_out")
def sign_out(
    request: Request,
    auth: AuthGateway = Depends(get_auth),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    auth.sign_out(user)
    response = redirect(request, "/", ("info", "You have been signed out"))
    response.delete_cookie(settings.session_cookie_name)
    return response
