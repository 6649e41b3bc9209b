# File: community_action/api/deps.py

from collections.abc import Generator
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from community_action.db.session import SessionLocal
from community_action.schemas.user import SessionUser
from community_action.services.auth_service import AuthGateway
from community_action.services.gateway import DataGateway


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a SQLAlchemy session.

    Usage in route functions:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_gateway(db: Session = Depends(get_db)) -> DataGateway:
    return DataGateway(db)


def get_auth(request: Request) -> AuthGateway:
    return request.app.state.auth


def _token_from_request(request: Request) -> Optional[str]:
    auth = request.app.state.auth
    token = request.cookies.get(auth.settings.session_cookie_name)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def get_current_user(
    request: Request,
    auth: AuthGateway = Depends(get_auth),
) -> Optional[SessionUser]:
    """
    The signed-in user (session cookie or bearer token), or None.
    """
    return auth.current_session(_token_from_request(request))
