"""
app/core/security.py

Purpose: Session credential

- Signs and verifies the session JWT ({"id": <account id>, "exp": ...})
- Sets and clears the http-only session cookie
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Response
from jose import JWTError, jwt

from app.core.config import settings


def create_session_token(account_id: str) -> str:
    exp = datetime.now(timezone.utc) + timedelta(days=settings.SESSION_TTL_DAYS)
    payload = {"id": str(account_id), "exp": exp}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_session_token(token: str) -> Optional[str]:
    """
    Returns the account id carried by a valid token, None otherwise
    (bad signature, expired, malformed, or no id claim).
    """
    try:
        data = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    account_id = data.get("id")
    return str(account_id) if account_id else None


def set_session_cookie(response: Response, token: str):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


def clear_session_cookie(response: Response):
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
