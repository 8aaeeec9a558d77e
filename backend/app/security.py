"""
Backend — Password Hashing and Tokens
=======================================

What:  bcrypt password hashing and HS256 JWTs (access + password reset).
Who:   UserService (hashing), login routes (tokens), auth dependencies (decoding).

Token types:
    access token:   {"sub": <user id>, "exp": ...}
                    lifetime ACCESS_TOKEN_EXPIRE_MINUTES
    reset token:    {"sub": <email>, "nbf": ..., "exp": ...}
                    lifetime EMAIL_RESET_TOKEN_EXPIRE_HOURS

Both are signed with SECRET_KEY. Rotating SECRET_KEY invalidates every
outstanding token.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from app.exceptions import CredentialsError
from app.schemas.auth import TokenPayload

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(subject: Any, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token for `subject` (the user id).

    Args:
        subject: Stored as the `sub` claim, stringified
        expires_delta: Lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> TokenPayload:
    """
    Decode and validate an access token.

    Raises:
        CredentialsError: Bad signature, expired, or malformed claims.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return TokenPayload(**payload)
    except (JWTError, PydanticValidationError) as e:
        logger.info("Rejected access token: %s", type(e).__name__)
        raise CredentialsError()


def generate_password_reset_token(email: str) -> str:
    now = datetime.now(timezone.utc)
    expires = now + timedelta(hours=settings.email_reset_token_expire_hours)
    return jwt.encode(
        {"exp": expires, "nbf": now, "sub": email},
        settings.secret_key,
        algorithm=ALGORITHM,
    )


def verify_password_reset_token(token: str) -> Optional[str]:
    """Return the email a reset token was issued for, or None if it is invalid."""
    try:
        decoded = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None
    sub = decoded.get("sub")
    return str(sub) if sub else None
