"""
Backend — User Request/Response Schemas
=========================================

What:  Pydantic models defining the user-facing API contract.
Why:   Input validation, response shaping (hashed_password never leaves the
       server) and OpenAPI generation.

Naming follows the payload direction:
    UserCreate / UserRegister / UserUpdate / UserUpdateMe / UpdatePassword → input
    UserPublic / UsersPublic → output
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserCreate(BaseModel):
    """Admin-created account. Superusers may set the privilege flags."""
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=8, max_length=128)
    full_name: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = True
    is_superuser: bool = False


class UserRegister(BaseModel):
    """Open sign-up payload. Never carries privilege flags."""
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=8, max_length=128)
    full_name: Optional[str] = Field(default=None, max_length=255)


class UserUpdate(BaseModel):
    """Admin update; every field optional, only supplied fields are applied."""
    email: Optional[EmailStr] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)
    full_name: Optional[str] = Field(default=None, max_length=255)
    is_active: Optional[bool] = None
    is_superuser: Optional[bool] = None


class UserUpdateMe(BaseModel):
    full_name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[EmailStr] = Field(default=None, max_length=255)


class UpdatePassword(BaseModel):
    current_password: str = Field(min_length=8, max_length=128)
    new_password: str = Field(min_length=8, max_length=128)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserPublic(BaseModel):
    id: uuid.UUID = Field(description="Unique user identifier (UUID)")
    email: EmailStr
    full_name: Optional[str] = None
    is_active: bool
    is_superuser: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UsersPublic(BaseModel):
    """Offset-paginated list wrapper: `count` is the total, not the page size."""
    data: List[UserPublic]
    count: int = Field(description="Total number of users")
