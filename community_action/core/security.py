# File: community_action/core/security.py

"""
Token helpers for the CommunityAction app.

Session tokens are HS256 JWTs signed with ``settings.secret_key``. The same
signing is reused for the short-lived notice cookie so a client cannot forge
messages.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt

from community_action.core.config import settings


ALGORITHM = settings.algorithm
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes
SECRET_KEY = settings.secret_key


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Encode ``data`` as a signed JWT with an ``exp`` claim.

    ``data`` should carry ``sub`` (the user id) plus whatever session
    metadata the caller wants back from :func:`decode_access_token`.
    """
    to_encode: dict[str, Any] = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: Optional[str]) -> Optional[dict]:
    """
    Return the claims of a valid, unexpired token, or None.
    """
    if not token:
        return None
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def sign_payload(payload: Any) -> str:
    return jwt.encode({"data": payload}, SECRET_KEY, algorithm=ALGORITHM)


def read_signed_payload(value: Optional[str]) -> Any:
    if not value:
        return None
    try:
        return jwt.decode(value, SECRET_KEY, algorithms=[ALGORITHM]).get("data")
    except JWTError:
        return None
