# File: community_action/services/auth_service.py

"""
Authentication service.

``AuthGateway`` owns everything session related:
  - Sign-in through a named provider (only "email" ships; the provider
    vouches for the address, the way an OAuth callback would)
  - Issuing and reading signed session tokens
  - Notifying subscribers when someone signs in or out

One instance lives on ``app.state.auth`` for the lifetime of the app and is
handed to routes through ``api.deps.get_auth``.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from community_action.core.config import Settings
from community_action.core.errors import AuthError
from community_action.core.security import create_access_token, decode_access_token
from community_action.schemas.user import SessionUser
from community_action.services.gateway import DataGateway

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

SessionListener = Callable[[str, Optional[SessionUser]], None]


def email_provider(gateway: DataGateway, *, email: str, full_name: Optional[str] = None, **_) -> dict:
    """
    Look up (or create) the user row for ``email``.
    """
    try:
        email = validate_email(email or "", check_deliverability=False).normalized
    except EmailNotValidError as exc:
        raise AuthError(str(exc)) from exc

    rows = gateway.select("users", filters={"email": email}, limit=1)
    if rows:
        user = rows[0]
        if full_name and full_name != user.get("full_name"):
            gateway.update("users", user["id"], {"full_name": full_name})
            user["full_name"] = full_name
        return user

    return gateway.insert("users", {"email": email, "full_name": full_name or None})


PROVIDERS: Dict[str, Callable[..., dict]] = {
    "email": email_provider,
}


class AuthGateway:
    def __init__(self, settings: Settings):
        self.settings = settings
        self._listeners: List[SessionListener] = []

    # -----------------------------
    # session-change notifications
    # -----------------------------
    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str, user: Optional[SessionUser]) -> None:
        for listener in list(self._listeners):
            listener(event, user)

    # -----------------------------
    # sign in / out
    # -----------------------------
    def sign_in_with_provider(
        self,
        gateway: DataGateway,
        provider: str,
        **credentials,
    ) -> Tuple[SessionUser, str]:
        handler = PROVIDERS.get(provider)
        if handler is None:
            raise AuthError(f"Unknown sign-in provider '{provider}'.")

        row = handler(gateway, **credentials)
        user = SessionUser(
            id=row["id"],
            email=row["email"],
            metadata={
                "full_name": row.get("full_name"),
                "avatar_url": row.get("avatar_url"),
                "provider": provider,
            },
        )
        token = create_access_token(
            {"sub": user.id, "email": user.email, "metadata": user.metadata}
        )
        self._notify(SIGNED_IN, user)
        return user, token

    def sign_out(self, user: Optional[SessionUser]) -> None:
        # Tokens are stateless; dropping the cookie is the sign-out.
        self._notify(SIGNED_OUT, user)

    def current_session(self, token: Optional[str]) -> Optional[SessionUser]:
        claims = decode_access_token(token)
        if not claims or not claims.get("sub"):
            return None
        return SessionUser(
            id=claims["sub"],
            email=claims.get("email", ""),
            metadata=claims.get("metadata") or {},
        )


def log_session_change(event: str, user: Optional[SessionUser]) -> None:
    logger.info("Session %s for %s", event, user.email if user else "anonymous")
