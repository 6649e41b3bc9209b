# File: community_action/web/templating.py

from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from community_action.core.config import settings
from community_action.schemas.project import ProjectType
from community_action.schemas.user import SessionUser
from community_action.web.notices import clear_notices, peek_notices, push_notice

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["project_types"] = list(ProjectType)
templates.env.globals["app_name"] = settings.PROJECT_NAME


def render(
    request: Request,
    name: str,
    context: Optional[dict] = None,
    *,
    user: Optional[SessionUser] = None,
    notice: Optional[tuple] = None,
    status_code: int = status.HTTP_200_OK,
):
    notices = list(getattr(request.state, "pushed_notices", None) or peek_notices(request))
    if notice:
        level, message = notice
        notices.append({"level": level, "message": message})
    ctx = {"user": user, "notices": notices}
    ctx.update(context or {})
    response = templates.TemplateResponse(request, name, ctx, status_code=status_code)
    if request.cookies.get(settings.notice_cookie_name):
        clear_notices(response)
    return response


def redirect(
    request: Request,
    url: str,
    notice: Optional[tuple] = None,
) -> RedirectResponse:
    response = RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)
    if notice:
        push_notice(request, response, *notice)
    return response


def safe_return_path(value: Optional[str], default: str = "/projects") -> str:
    """
    Only same-site absolute paths are accepted as post sign-in targets.
    """
    if not value or not value.startswith("/") or value.startswith("//") or "\\" in value:
        return default
    return value


def sign_in_url(return_to: str) -> str:
    return f"/auth?redirect={quote(safe_return_path(return_to), safe='/')}"


def sign_in_redirect(request: Request, return_to: str) -> RedirectResponse:
    return redirect(request, sign_in_url(return_to))
