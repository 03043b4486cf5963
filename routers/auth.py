from __future__ import annotations

import logging
import os
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from db import get_db
from deps.auth import require_user
from errors import AuthenticationError, LedgerError
from models import User
from schemas.auth import AuthResponse, LoginRequest, PasswordChange, ProfileUpdate, RegisterRequest
from schemas.common import MessageResponse
from security import AUTH_COOKIE, JWT_EXPIRES_DAYS, create_access_token, hash_password, verify_password

logger = logging.getLogger("score-ledger.auth")

router = APIRouter(prefix="/api/auth", tags=["auth"])

COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() in ("1", "true", "yes")

DbSession = Annotated[Session, Depends(get_db)]
CurrentUser = Annotated[User, Depends(require_user)]


def _set_auth_cookie(response: Response, user: User) -> None:
    token = create_access_token(user.id, user.email)
    response.set_cookie(
        AUTH_COOKIE,
        token,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        max_age=JWT_EXPIRES_DAYS * 24 * 60 * 60,
        path="/",
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, response: Response, db: DbSession):
    email = req.email.lower()
    if db.scalars(select(User).where(User.email == email)).first() is not None:
        raise LedgerError("Email already registered")

    user = User(
        email=email,
        password_hash=hash_password(req.password),
        display_name=req.display_name or email.split("@")[0],
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    _set_auth_cookie(response, user)
    logger.info("registered user %s", user.id)
    return {"message": "Registration successful", "user": user}


@router.post("/login", response_model=AuthResponse)
def login(req: LoginRequest, response: Response, db: DbSession):
    user = db.scalars(select(User).where(User.email == req.email.lower())).first()
    if user is None or not verify_password(req.password, user.password_hash):
        raise AuthenticationError("Invalid email or password")

    _set_auth_cookie(response, user)
    return {"message": "Login successful", "user": user}


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    response.delete_cookie(AUTH_COOKIE, path="/")
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=AuthResponse)
def me(user: CurrentUser):
    return {"user": user}


@router.put("/me", response_model=AuthResponse)
def update_me(req: ProfileUpdate, user: CurrentUser, db: DbSession):
    if req.display_name:
        user.display_name = req.display_name
        db.commit()
        db.refresh(user)
    return {"user": user}


@router.put("/password", response_model=MessageResponse)
def change_password(req: PasswordChange, user: CurrentUser, db: DbSession):
    if not verify_password(req.current_password, user.password_hash):
        raise AuthenticationError("Current password is incorrect")

    user.password_hash = hash_password(req.new_password)
    db.commit()
    return {"message": "Password updated successfully"}
