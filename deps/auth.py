from typing import Annotated

from fastapi import Cookie, Depends
from sqlalchemy.orm import Session

from db import get_db
from errors import InvalidTokenError
from models import User
from security import AUTH_COOKIE, decode_access_token


def require_user(
    db: Annotated[Session, Depends(get_db)],
    auth_token: Annotated[str | None, Cookie(alias=AUTH_COOKIE)] = None,
) -> User:
    """
    Resolve the auth cookie to a user. A token for a deleted user is treated
    the same as an invalid one.
    """
    if not auth_token:
        raise InvalidTokenError("Authentication required")

    user_id = decode_access_token(auth_token)
    if user_id is None:
        raise InvalidTokenError("Invalid or expired token")

    user = db.get(User, user_id)
    if user is None:
        raise InvalidTokenError("Invalid or expired token")
    return user
