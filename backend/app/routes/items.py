"""
Backend — Item Route Handlers
===============================

What:  CRUD for items owned by the authenticated user.
Who:   The frontend Items page.

Visibility: superusers see every item; other users only their own
(enforced in ItemService).
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.models.item import Item
from app.models.user import User
from app.routes.deps import get_current_user
from app.schemas.common import ErrorResponse, Message
from app.schemas.item import ItemCreate, ItemPublic, ItemsPublic, ItemUpdate
from app.services.item_service import item_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/items", tags=["items"])

_ITEM_ERRORS = {
    403: {"description": "Item belongs to another user", "model": ErrorResponse},
    404: {"description": "Item not found", "model": ErrorResponse},
}


@router.get("/", response_model=ItemsPublic, summary="List items")
async def read_items(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
) -> ItemsPublic:
    items, count = await item_service.list_items(db, current_user, skip=skip, limit=limit)
    response.headers["X-Total-Count"] = str(count)
    return ItemsPublic(data=[ItemPublic.model_validate(i) for i in items], count=count)


@router.get("/{item_id}", response_model=ItemPublic, responses=_ITEM_ERRORS, summary="Read item")
async def read_item(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
) -> Item:
    return await item_service.get_item(db, current_user, item_id)


@router.post("/", response_model=ItemPublic, summary="Create item")
async def create_item(
    item_in: ItemCreate,
    db: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
) -> Item:
    return await item_service.create_item(db, current_user, item_in)


@router.put("/{item_id}", response_model=ItemPublic, responses=_ITEM_ERRORS, summary="Update item")
async def update_item(
    item_id: uuid.UUID,
    item_in: ItemUpdate,
    db: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
) -> Item:
    return await item_service.update_item(db, current_user, item_id, item_in)


@router.delete("/{item_id}", response_model=Message, responses=_ITEM_ERRORS, summary="Delete item")
async def delete_item(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
) -> Message:
    await item_service.delete_item(db, current_user, item_id)
    return Message(message="Item deleted successfully")
