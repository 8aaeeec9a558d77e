"""
Backend — Item SQLAlchemy Model
=================================

What:  ORM model representing the `item` table.
Who:   Used by ItemService for CRUD operations and by Alembic.

Every item belongs to exactly one user (owner_id). Deleting the owner deletes
its items (ON DELETE CASCADE).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Item(Base):
    """
    Query Patterns:
        - Owner listing: WHERE owner_id = :uid ORDER BY created_at DESC
          → idx_item_owner_created
        - Single item: primary key lookup
    """

    __tablename__ = "item"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_item_owner_created", "owner_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, title='{self.title}', owner_id={self.owner_id})>"
