from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field


class Settings(BaseModel):
    data_file: str = Field(default="data/election.json")
    admin_password: str = Field(default="admin123")
    session_secret: str = Field(default="change-me-session-secret")
    session_algorithm: str = Field(default="HS256")
    student_session_minutes: int = Field(default=60 * 24)
    admin_session_minutes: int = Field(default=60 * 8)
    cookie_secure: bool = Field(default=False)
    login_rate_limit: str = Field(default="10/minute")
    log_dir: str = Field(default=".")


def _env(name: str, default: str) -> str:
    value: Optional[str] = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _load_settings() -> Settings:
    return Settings(
        data_file=_env("ELECTION_DATA_FILE", "data/election.json"),
        admin_password=_env("ADMIN_PASSWORD", "admin123"),
        session_secret=_env("SESSION_SECRET", "change-me-session-secret"),
        session_algorithm=_env("SESSION_ALGORITHM", "HS256"),
        student_session_minutes=int(_env("STUDENT_SESSION_MINUTES", "1440")),
        admin_session_minutes=int(_env("ADMIN_SESSION_MINUTES", "480")),
        cookie_secure=_env("COOKIE_SECURE", "0") == "1",
        login_rate_limit=_env("LOGIN_RATE_LIMIT", "10/minute"),
        log_dir=_env("LOG_DIR", "."),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return _load_settings()


def reload_settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "get_settings", "reload_settings"]
