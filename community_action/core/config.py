# File: community_action/core/config.py

import os
from functools import lru_cache
from typing import List

from pydantic import BaseModel, field_validator


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    # Basic app info
    PROJECT_NAME: str = "CommunityAction"
    VERSION: str = "0.1.0"

    api_v1_prefix: str = "/api/v1"
    debug: bool = _env_flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    backend_cors_origins: List[str] = [
        i.strip()
        for i in os.getenv(
            "BACKEND_CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"
        ).split(",")
        if i.strip()
    ]

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./community_action.db")
    seed_demo_data: bool = _env_flag("SEED_DEMO_DATA", "true")

    # Security / sessions
    secret_key: str = os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION")
    access_token_expire_minutes: int = 60 * 24  # 24h
    algorithm: str = "HS256"

    session_cookie_name: str = "ca_session"
    notice_cookie_name: str = "ca_notice"
    cookie_secure: bool = _env_flag("COOKIE_SECURE")

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        if isinstance(v, list):
            return v
        return []


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
