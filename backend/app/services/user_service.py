"""
Backend — User Service (Accounts and Authentication)
======================================================

What:  Business logic for user accounts: lookup, creation, updates,
       authentication and deletion.
Why:   Keeps the routers thin and lets the prestart script reuse the same
       creation path as the API.
How:   Stateless service; every method receives the AsyncSession to work in.
       Writes are flushed, never committed; get_db_session (or the caller)
       owns the transaction.

Error Handling Strategy:
    Missing users → NotFoundError, duplicate emails → ConflictError.
    SQLAlchemy errors are wrapped in DatabaseError so SQL never reaches clients.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, DatabaseError, NotFoundError
from app.models.item import Item
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate, UserUpdateMe
from app.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "The user with this email already exists in the system"

NON_NULLABLE_UPDATE_FIELDS = ("email", "password", "is_active", "is_superuser")


class UserService:
    """
    Responsibilities:
        - get_user_by_email() / get_user(): lookups
        - create_user(): hash password, enforce unique email
        - update_user() / update_me() / update_password(): partial updates
        - authenticate(): email + password check for the login route
        - list_users(): offset pagination with total count
        - delete_user(): removes the user and the items it owns
    """

    async def get_user_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        """
        Case-insensitive lookup.

        EmailStr lower-cases only the domain when storing, so the address a
        user typed at sign-up may differ in case from the stored one.
        """
        result = await db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_user(self, db: AsyncSession, user_id: UUID) -> User:
        """
        Fetch a user by primary key.

        Raises:
            NotFoundError: No user with this id (→ 404)
        """
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user

    async def create_user(self, db: AsyncSession, user_in: UserCreate) -> User:
        """
        Create a user from validated input.

        Raises:
            ConflictError: Email already registered (→ 409)
            DatabaseError: Insert failed (→ 500)
        """
        if await self.get_user_by_email(db, user_in.email) is not None:
            raise ConflictError(
                message=DUPLICATE_EMAIL_MESSAGE,
                context={"email": user_in.email},
            )

        user = User(
            email=user_in.email,
            hashed_password=get_password_hash(user_in.password),
            full_name=user_in.full_name,
            is_active=user_in.is_active,
            is_superuser=user_in.is_superuser,
        )
        db.add(user)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to create user %s: %s", user_in.email, str(e))
            raise DatabaseError(
                message="Could not create the user. Please try again.",
                context={"error_type": type(e).__name__},
            )
        logger.info("User created: %s (superuser=%s)", user.id, user.is_superuser)
        return user

    async def _ensure_email_free(self, db: AsyncSession, email: str, user_id: UUID) -> None:
        existing = await self.get_user_by_email(db, email)
        if existing is not None and existing.id != user_id:
            raise ConflictError(
                message="User with this email already exists",
                context={"email": email},
            )

    async def update_user(self, db: AsyncSession, user: User, user_in: UserUpdate) -> User:
        """
        Apply only the supplied fields; a new password is re-hashed.

        An explicit null clears full_name; for the NOT NULL columns it means
        "leave unchanged".
        """
        data = user_in.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_UPDATE_FIELDS:
            if field in data and data[field] is None:
                del data[field]
        if data.get("email"):
            await self._ensure_email_free(db, data["email"], user.id)

        password = data.pop("password", None)
        if password:
            user.hashed_password = get_password_hash(password)
        for field, value in data.items():
            setattr(user, field, value)

        await db.flush()
        return user

    async def update_me(self, db: AsyncSession, user: User, user_in: UserUpdateMe) -> User:
        data = user_in.model_dump(exclude_unset=True)
        if data.get("email") is None:
            data.pop("email", None)
        if data.get("email"):
            await self._ensure_email_free(db, data["email"], user.id)
        for field, value in data.items():
            setattr(user, field, value)
        await db.flush()
        return user

    async def update_password(self, db: AsyncSession, user: User, new_password: str) -> User:
        user.hashed_password = get_password_hash(new_password)
        await db.flush()
        return user

    async def authenticate(
        self, db: AsyncSession, email: str, password: str
    ) -> Optional[User]:
        """Return the user when the password matches, else None (no reason given)."""
        user = await self.get_user_by_email(db, email)
        if user is None:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    async def list_users(
        self, db: AsyncSession, skip: int = 0, limit: int = 100
    ) -> Tuple[List[User], int]:
        count_result = await db.execute(select(func.count()).select_from(User))
        count = count_result.scalar() or 0

        result = await db.execute(
            select(User).order_by(User.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all()), count

    async def delete_user(self, db: AsyncSession, user: User) -> None:
        # Explicit item delete: SQLite test databases do not enforce FK cascades
        await db.execute(delete(Item).where(Item.owner_id == user.id))
        await db.delete(user)
        await db.flush()
        logger.info("User deleted: %s", user.id)


user_service = UserService()
