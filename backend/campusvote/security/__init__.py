from __future__ import annotations

import hmac
from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.responses import Response
from jose import JWTError, jwt

from campusvote.core.settings import get_settings
from campusvote.dependencies import get_election_service
from campusvote.models import Voter
from campusvote.service import ElectionService

Role = Literal["admin", "voter"]

ADMIN_COOKIE = "admin-auth"
STUDENT_COOKIE = "student-auth"


def create_session_token(subject: str, role: Role, minutes: int) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    claims = {"sub": subject, "role": role, "iat": now, "exp": now + timedelta(minutes=minutes)}
    return jwt.encode(claims, settings.session_secret, algorithm=settings.session_algorithm)


def _parse_session_token(token: Optional[str], need: Role) -> Optional[str]:
    if not token:
        return None
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[settings.session_algorithm])
    except JWTError:
        return None

    subject = payload.get("sub")
    if isinstance(subject, str) and payload.get("role") == need:
        return subject
    return None


def check_admin_password(password: str) -> bool:
    expected = get_settings().admin_password
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))


def set_session_cookie(response: Response, role: Role, subject: str) -> None:
    settings = get_settings()
    if role == "admin":
        name, minutes = ADMIN_COOKIE, settings.admin_session_minutes
    else:
        name, minutes = STUDENT_COOKIE, settings.student_session_minutes
    response.set_cookie(
        name,
        create_session_token(subject, role, minutes),
        max_age=minutes * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ADMIN_COOKIE, path="/")
    response.delete_cookie(STUDENT_COOKIE, path="/")


def require_admin(request: Request) -> str:
    subject = _parse_session_token(request.cookies.get(ADMIN_COOKIE), "admin")
    if subject is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthenticated")
    return subject


def get_current_voter(
    request: Request, service: ElectionService = Depends(get_election_service)
) -> Voter:
    voter_id = _parse_session_token(request.cookies.get(STUDENT_COOKIE), "voter")
    if voter_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthenticated")
    voter = service.get_voter(voter_id)
    if voter is None:
        # Deleted after logging in.
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unknown_voter")
    return voter


__all__ = [
    "ADMIN_COOKIE",
    "STUDENT_COOKIE",
    "create_session_token",
    "check_admin_password",
    "set_session_cookie",
    "clear_session_cookies",
    "require_admin",
    "get_current_voter",
]
