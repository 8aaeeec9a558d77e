"""
Backend — Login and Password Recovery Routes
==============================================

What:  OAuth2 password login, token check, and the password recovery flow.
Who:   The frontend login / recover-password / reset-password pages, and
       Swagger UI's "Authorize" button (tokenUrl points at /login/access-token).

Recovery flow:
    1. POST /password-recovery/{email}  → reset email (captured by the mail
       catcher locally) with a link to FRONTEND_HOST/reset-password?token=...
    2. POST /reset-password/            → {token, new_password}
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.exceptions import NotFoundError, ValidationError
from app.models.user import User
from app.routes.deps import get_current_active_superuser, get_current_user
from app.schemas.auth import NewPassword, Token
from app.schemas.common import ErrorResponse, Message
from app.schemas.user import UserPublic
from app.security import create_access_token, verify_password_reset_token
from app.services import email_service
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["login"])

RECOVERY_MESSAGE = "If that email is registered, a password recovery email has been sent"


@router.post(
    "/login/access-token",
    response_model=Token,
    responses={400: {"description": "Incorrect credentials or inactive user", "model": ErrorResponse}},
    summary="OAuth2 compatible token login",
)
async def login_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db_session),
) -> Token:
    """
    Get an access token for future requests.

    The OAuth2 form calls the field `username`; it carries the email.
    """
    user = await user_service.authenticate(
        db, email=form_data.username, password=form_data.password
    )
    if user is None:
        raise ValidationError(message="Incorrect email or password")
    if not user.is_active:
        raise ValidationError(message="Inactive user")

    access_token_expires = timedelta(minutes=settings.access_token_expire_minutes)
    return Token(access_token=create_access_token(user.id, expires_delta=access_token_expires))


@router.post("/login/test-token", response_model=UserPublic, summary="Test access token")
async def test_token(current_user: User = Depends(get_current_user)) -> User:
    return current_user


@router.post("/password-recovery/{email}", response_model=Message, summary="Recover password")
async def recover_password(email: str, db: AsyncSession = Depends(get_db_session)) -> Message:
    """
    Send a password recovery email.

    The response is identical whether or not the account exists, so the
    endpoint cannot be used to discover registered emails.
    """
    user = await user_service.get_user_by_email(db, email)
    if user is not None:
        if settings.emails_enabled:
            email_data = email_service.build_reset_password_email(user.email)
            await email_service.send_email(
                email_to=user.email,
                subject=email_data.subject,
                html_content=email_data.html_content,
            )
        else:
            logger.warning("Password recovery requested but SMTP is not configured")
    return Message(message=RECOVERY_MESSAGE)


@router.post(
    "/reset-password/",
    response_model=Message,
    responses={
        400: {"description": "Invalid token or inactive user", "model": ErrorResponse},
        404: {"description": "User no longer exists", "model": ErrorResponse},
    },
    summary="Reset password",
)
async def reset_password(body: NewPassword, db: AsyncSession = Depends(get_db_session)) -> Message:
    email = verify_password_reset_token(token=body.token)
    if not email:
        raise ValidationError(message="Invalid token")

    user = await user_service.get_user_by_email(db, email)
    if user is None:
        raise NotFoundError(resource="user")
    if not user.is_active:
        raise ValidationError(message="Inactive user")

    await user_service.update_password(db, user, body.new_password)
    return Message(message="Password updated successfully")


@router.post(
    "/password-recovery-html-content/{email}",
    dependencies=[Depends(get_current_active_superuser)],
    response_class=HTMLResponse,
    summary="Preview password recovery email",
)
async def recover_password_html_content(
    email: str, db: AsyncSession = Depends(get_db_session)
) -> HTMLResponse:
    """HTML of the recovery email, for superusers debugging templates."""
    user = await user_service.get_user_by_email(db, email)
    if user is None:
        raise NotFoundError(resource="user")

    email_data = email_service.build_reset_password_email(user.email)
    return HTMLResponse(
        content=email_data.html_content,
        headers={"subject": email_data.subject},
    )
