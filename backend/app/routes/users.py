"""
Backend — User Route Handlers
===============================

What:  Account management: admin CRUD, self-service profile, open sign-up.
How:   Thin handlers; rules live in UserService, auth in routes/deps.py.

Route Inventory (prefix /users):
    GET    /             superuser   list users
    POST   /             superuser   create user (+ new account email)
    GET    /me           any user    own profile
    PATCH  /me           any user    update own name/email
    PATCH  /me/password  any user    change own password
    DELETE /me           non-super   delete own account
    POST   /signup       public      open registration
    GET    /{user_id}    self|super  read a user
    PATCH  /{user_id}    superuser   update a user
    DELETE /{user_id}    superuser   delete a user (and their items)

Static paths (/me, /signup) are registered before /{user_id} so they win.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.exceptions import PermissionDeniedError, ValidationError
from app.models.user import User
from app.routes.deps import get_current_active_superuser, get_current_user
from app.schemas.common import ErrorResponse, Message
from app.schemas.user import (
    UpdatePassword,
    UserCreate,
    UserPublic,
    UserRegister,
    UsersPublic,
    UserUpdate,
    UserUpdateMe,
)
from app.security import verify_password
from app.services import email_service
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/",
    dependencies=[Depends(get_current_active_superuser)],
    response_model=UsersPublic,
    summary="List users",
)
async def read_users(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db_session),
) -> UsersPublic:
    users, count = await user_service.list_users(db, skip=skip, limit=limit)
    response.headers["X-Total-Count"] = str(count)
    return UsersPublic(data=[UserPublic.model_validate(u) for u in users], count=count)


@router.post(
    "/",
    dependencies=[Depends(get_current_active_superuser)],
    response_model=UserPublic,
    responses={
        409: {"description": "Email already registered", "model": ErrorResponse},
        503: {"description": "New account email could not be sent", "model": ErrorResponse},
    },
    summary="Create user",
)
async def create_user(user_in: UserCreate, db: AsyncSession = Depends(get_db_session)) -> User:
    """
    Create an account and, when SMTP is configured, send the new account email.

    The email is part of the request's transaction: if delivery fails the
    response is 503 and the user is not created, so the admin can retry
    without hitting a 409.
    """
    user = await user_service.create_user(db, user_in)
    if settings.emails_enabled and user_in.email:
        email_data = email_service.generate_new_account_email(
            email_to=user_in.email, username=user_in.email
        )
        await email_service.send_email(
            email_to=user_in.email,
            subject=email_data.subject,
            html_content=email_data.html_content,
        )
    return user


@router.patch(
    "/me",
    response_model=UserPublic,
    responses={409: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Update own profile",
)
async def update_user_me(
    user_in: UserUpdateMe,
    db: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
) -> User:
    return await user_service.update_me(db, current_user, user_in)


@router.patch("/me/password", response_model=Message, summary="Update own password")
async def update_password_me(
    body: UpdatePassword,
    db: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
) -> Message:
    if not verify_password(body.current_password, current_user.hashed_password):
        raise ValidationError(message="Incorrect password", field="current_password")
    if body.current_password == body.new_password:
        raise ValidationError(
            message="New password cannot be the same as the current one",
            field="new_password",
        )
    await user_service.update_password(db, current_user, body.new_password)
    return Message(message="Password updated successfully")


@router.get("/me", response_model=UserPublic, summary="Read own profile")
async def read_user_me(current_user: User = Depends(get_current_user)) -> User:
    return current_user


@router.delete("/me", response_model=Message, summary="Delete own account")
async def delete_user_me(
    db: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
) -> Message:
    if current_user.is_superuser:
        raise PermissionDeniedError(message="Super users are not allowed to delete themselves")
    await user_service.delete_user(db, current_user)
    return Message(message="User deleted successfully")


@router.post(
    "/signup",
    response_model=UserPublic,
    responses={409: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Register without being logged in",
)
async def register_user(user_in: UserRegister, db: AsyncSession = Depends(get_db_session)) -> User:
    # UserRegister has no privilege flags: signups are always regular, active users
    return await user_service.create_user(db, UserCreate(**user_in.model_dump()))


@router.get(
    "/{user_id}",
    response_model=UserPublic,
    responses={
        403: {"description": "Not yourself and not a superuser", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Read user by id",
)
async def read_user_by_id(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
) -> User:
    if user_id == current_user.id:
        return current_user
    if not current_user.is_superuser:
        raise PermissionDeniedError(message="The user doesn't have enough privileges")
    return await user_service.get_user(db, user_id)


@router.patch(
    "/{user_id}",
    dependencies=[Depends(get_current_active_superuser)],
    response_model=UserPublic,
    responses={
        404: {"description": "User not found", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Update user",
)
async def update_user(
    user_id: uuid.UUID,
    user_in: UserUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> User:
    user = await user_service.get_user(db, user_id)
    return await user_service.update_user(db, user, user_in)


@router.delete(
    "/{user_id}",
    response_model=Message,
    responses={
        403: {"description": "Deleting yourself as superuser", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Delete user",
)
async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_active_superuser),
) -> Message:
    user = await user_service.get_user(db, user_id)
    if user.id == current_user.id:
        raise PermissionDeniedError(message="Super users are not allowed to delete themselves")
    await user_service.delete_user(db, user)
    return Message(message="User deleted successfully")
