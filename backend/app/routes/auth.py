# app/routes/auth.py
"""Admin authentication endpoints: login, token generation and logout."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import (
    COOKIE_SECURE,
    SESSION_COOKIE_NAME,
    authenticate_user,
    create_access_token,
    get_optional_admin,
)
from app.database import get_session
from app.models import User
from app.schemas.user import SessionStatus, TokenResponse, UserLogin

logger = logging.getLogger(__name__)
router = APIRouter()

SESSION_MAX_AGE = 60 * 60 * 24 * 7


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "code": "auth_invalid_credentials",
            "message": "Invalid username or password",
        },
    )


@router.post("/token", response_model=TokenResponse)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_session),
):
    """OAuth2 password flow used by interactive docs and external clients."""

    user = await authenticate_user(db, form_data.username, form_data.password)
    if not user:
        logger.warning("Failed OAuth login for %s", form_data.username)
        raise _invalid_credentials()
    logger.info("Admin %s logged in via OAuth form", user.username)
    return TokenResponse(access_token=create_access_token(data={"sub": user.username}))


@router.post("/auth/login", response_model=TokenResponse)
async def login(
    user_in: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_session),
):
    """JSON login used by the dashboard; also sets the session cookie."""

    user = await authenticate_user(db, user_in.username, user_in.password)
    if not user:
        logger.warning("Failed login for %s", user_in.username)
        raise _invalid_credentials()
    access_token = create_access_token(data={"sub": user.username})
    response.set_cookie(
        SESSION_COOKIE_NAME,
        access_token,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        max_age=SESSION_MAX_AGE,
        path="/",
    )
    logger.info("Admin %s logged in", user.username)
    return TokenResponse(access_token=access_token)


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")


@router.get("/auth/session", response_model=SessionStatus)
async def session_status(user: User | None = Depends(get_optional_admin)):
    """Report whether the caller holds a valid admin session."""
    if user is None:
        return SessionStatus(authenticated=False)
    return SessionStatus(authenticated=True, username=user.username)
