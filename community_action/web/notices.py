# File: community_action/web/notices.py

"""
One-shot notices ("toasts") carried across a redirect in a signed cookie.
"""

from typing import List

from fastapi import Request, Response

from community_action.core.config import settings
from community_action.core.security import read_signed_payload, sign_payload

LEVELS = ("success", "info", "error")


def push_notice(request: Request, response: Response, level: str, message: str) -> None:
    if level not in LEVELS:
        level = "info"
    pending = getattr(request.state, "pushed_notices", None)
    if pending is None:
        pending = peek_notices(request)
        request.state.pushed_notices = pending
    pending.append({"level": level, "message": message})
    response.set_cookie(
        settings.notice_cookie_name,
        sign_payload(pending),
        max_age=60,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


def peek_notices(request: Request) -> List[dict]:
    data = read_signed_payload(request.cookies.get(settings.notice_cookie_name))
    if not isinstance(data, list):
        return []
    return [n for n in data if isinstance(n, dict) and "message" in n]


def clear_notices(response: Response) -> None:
    response.delete_cookie(settings.notice_cookie_name)
