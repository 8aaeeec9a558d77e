"""
Backend — Private Routes (local environment only)
===================================================

What:  Unauthenticated helpers used by the frontend end-to-end tests to seed data.
When:  Mounted by main.create_app() only when ENVIRONMENT=local.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.models.user import User
from app.schemas.user import UserCreate, UserPublic
from app.services.user_service import user_service

router = APIRouter(prefix="/private", tags=["private"])


class PrivateUserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    full_name: str | None = Field(default=None, max_length=255)


@router.post("/users/", response_model=UserPublic, summary="Create user (local only)")
async def create_user(user_in: PrivateUserCreate, db: AsyncSession = Depends(get_db_session)) -> User:
    return await user_service.create_user(
        db,
        UserCreate(
            email=user_in.email,
            password=user_in.password,
            full_name=user_in.full_name,
        ),
    )
