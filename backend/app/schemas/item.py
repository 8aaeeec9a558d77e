"""
Backend — Item Request/Response Schemas
=========================================
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ItemCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)


class ItemUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)


class ItemPublic(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    owner_id: uuid.UUID
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ItemsPublic(BaseModel):
    data: List[ItemPublic]
    count: int = Field(description="Total number of items visible to the caller")
