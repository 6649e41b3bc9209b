# File: community_action/schemas/user.py

from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    email: EmailStr


class SignInRequest(UserBase):
    provider: str = "email"
    full_name: Optional[str] = None


class SessionUser(BaseModel):
    """
    Identity of the signed-in user, as carried in the session token.
    """

    id: str
    email: str
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.metadata.get("full_name") or self.email


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: SessionUser
