"""
Backend — Item Service
========================

What:  CRUD for items with ownership rules.
How:   Superusers see and modify every item; other users only their own.
       Ownership is checked here, not in the router, so every caller gets it.
"""

import logging
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError, PermissionDeniedError
from app.models.item import Item
from app.models.user import User
from app.schemas.item import ItemCreate, ItemUpdate

logger = logging.getLogger(__name__)


class ItemService:

    async def list_items(
        self, db: AsyncSession, user: User, skip: int = 0, limit: int = 100
    ) -> Tuple[List[Item], int]:
        """
        Page through the items visible to `user`, newest first.

        Returns:
            (items on this page, total visible items)
        """
        count_query = select(func.count()).select_from(Item)
        query = select(Item)
        if not user.is_superuser:
            count_query = count_query.where(Item.owner_id == user.id)
            query = query.where(Item.owner_id == user.id)

        count_result = await db.execute(count_query)
        count = count_result.scalar() or 0

        result = await db.execute(
            query.order_by(Item.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all()), count

    async def get_item(self, db: AsyncSession, user: User, item_id: UUID) -> Item:
        """
        Raises:
            NotFoundError: No such item (→ 404)
            PermissionDeniedError: Item belongs to someone else (→ 403)
        """
        item = await db.get(Item, item_id)
        if item is None:
            raise NotFoundError(resource="item", resource_id=str(item_id))
        if not user.is_superuser and item.owner_id != user.id:
            raise PermissionDeniedError()
        return item

    async def create_item(self, db: AsyncSession, owner: User, item_in: ItemCreate) -> Item:
        item = Item(**item_in.model_dump(), owner_id=owner.id)
        db.add(item)
        await db.flush()
        logger.info("Item %s created by %s", item.id, owner.id)
        return item

    async def update_item(
        self, db: AsyncSession, user: User, item_id: UUID, item_in: ItemUpdate
    ) -> Item:
        item = await self.get_item(db, user, item_id)
        data = item_in.model_dump(exclude_unset=True)
        # title is NOT NULL; an explicit null means "leave unchanged"
        if data.get("title") is None:
            data.pop("title", None)
        for field, value in data.items():
            setattr(item, field, value)
        await db.flush()
        return item

    async def delete_item(self, db: AsyncSession, user: User, item_id: UUID) -> None:
        item = await self.get_item(db, user, item_id)
        await db.delete(item)
        await db.flush()
        logger.info("Item %s deleted by %s", item_id, user.id)


item_service = ItemService()
