"""
app/api/deps.py

Purpose: Shared route dependencies

- Session check: resolves the session cookie to the caller's account id
"""

from typing import Optional

from bson import ObjectId
from fastapi import Request

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.security import decode_session_token
from utils.constants import MSG_INVALID_TOKEN, MSG_NOT_AUTHORISED
from utils.validation_utils import parse_object_id


async def get_current_account_id(request: Request) -> ObjectId:
    """
    Raises:
        AuthenticationError: Missing, invalid or expired session cookie
    """
    token: Optional[str] = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise AuthenticationError(MSG_NOT_AUTHORISED)

    account_id = parse_object_id(decode_session_token(token))
    if account_id is None:
        raise AuthenticationError(MSG_INVALID_TOKEN)

    return account_id
