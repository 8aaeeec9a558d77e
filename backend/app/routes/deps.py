"""
Backend — Route Dependencies (Authentication)
===============================================

What:  FastAPI dependencies resolving the caller from the bearer token.
How:   OAuth2PasswordBearer extracts the token (401 when absent);
       get_current_user decodes it and loads the user;
       get_current_active_superuser adds the privilege check.

Dependency chain:
    oauth2_scheme → get_current_user → get_current_active_superuser
"""

import uuid

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.exceptions import CredentialsError, PermissionDeniedError, ValidationError
from app.models.user import User
from app.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_v1_str}/login/access-token")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """
    Resolve the authenticated user.

    A token for a deleted account is reported exactly like a forged one.

    Raises:
        CredentialsError: Invalid/expired token, or it names no user (→ 403)
        ValidationError: Account is deactivated (→ 400)
    """
    payload = decode_access_token(token)
    try:
        user_id = uuid.UUID(payload.sub or "")
    except ValueError:
        raise CredentialsError()

    user = await db.get(User, user_id)
    if user is None:
        raise CredentialsError()
    if not user.is_active:
        raise ValidationError(message="Inactive user")
    return user


async def get_current_active_superuser(
    current_user: User = Depends(get_current_user),
) -> User:
    if not current_user.is_superuser:
        raise PermissionDeniedError(message="The user doesn't have enough privileges")
    return current_user
