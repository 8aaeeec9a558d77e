"""
Backend — Authentication Schemas
==================================

What:  Token and password-reset payloads used by the login routes and the
       auth dependencies.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Token(BaseModel):
    """OAuth2 bearer token response (shape required by the OAuth2 password flow)."""
    access_token: str
    token_type: str = "bearer"


class TokenPayload(BaseModel):
    """Decoded JWT claims. `sub` holds the user id as a string."""
    sub: Optional[str] = None


class NewPassword(BaseModel):
    token: str = Field(description="Password reset token from the recovery email")
    new_password: str = Field(min_length=8, max_length=128)
