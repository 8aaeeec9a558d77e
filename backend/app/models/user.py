"""
Backend — User SQLAlchemy Model
=================================

What:  ORM model representing the `user` table.
Who:   Used by UserService for CRUD and authentication, by the prestart script
       to seed the first superuser, and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: Non-sequential (IDs cannot be enumerated)
    - email: Unique + indexed; the login identifier
    - hashed_password: bcrypt hash, never the plain password
    - is_active: Inactive users cannot log in or reset their password
    - is_superuser: Grants access to admin routes (user management, all items)
    - created_at: UTC with timezone
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class User(Base):
    """
    A registered account.

    Items owned by a user are deleted with it (FK ON DELETE CASCADE in the
    database; UserService also removes them explicitly so SQLite behaves the same).
    """

    __tablename__ = "user"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    is_superuser: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', superuser={self.is_superuser})>"
