# File: community_action/api/v1/routes_auth.py

"""
Auth API routes.

Token based counterpart of the /auth pages: the returned access token can be
sent back as ``Authorization: Bearer <token>``; the session cookie is set as
well so browser clients work without extra handling.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from community_action.api.deps import get_auth, get_current_user, get_gateway
from community_action.core.config import settings
from community_action.core.errors import AuthError, GatewayError
from community_action.schemas.user import SessionUser, SignInRequest, TokenResponse
from community_action.services.auth_service import AuthGateway
from community_action.services.gateway import DataGateway

router = APIRouter()


@router.post("/login", response_model=TokenResponse, summary="Sign in through a provider")
def login(
    payload: SignInRequest,
    response: Response,
    gateway: DataGateway = Depends(get_gateway),
    auth: AuthGateway = Depends(get_auth),
):
    try:
        user, token = auth.sign_in_with_provider(
            gateway,
            payload.provider,
            email=payload.email,
            full_name=payload.full_name,
        )
    except AuthError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except GatewayError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Sign-in is unavailable. Please try again later.",
        )

    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    return TokenResponse(access_token=token, user=user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Sign out")
def logout(
    auth: AuthGateway = Depends(get_auth),
    user: Optional[SessionUser] = Depends(get_current_user),
):
    auth.sign_out(user)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/session", response_model=Optional[SessionUser], summary="Current session")
def current_session(user: Optional[SessionUser] = Depends(get_current_user)):
    return user
