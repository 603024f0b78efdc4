# shelfstore/schemas/shelf.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import List, Optional

# Keeps quantities well inside a 64-bit integer column
MAX_QUANTITY = 1_000_000_000


class ShelfCreate(BaseModel):
    name: str = Field(min_length=3, max_length=100)
    row_index: int = Field(ge=0)
    col_index: int = Field(ge=0)
    max_volume: float = Field(gt=0)


# Partial update; a missing or null field keeps the stored value
class ShelfUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=3, max_length=100)
    max_volume: Optional[float] = Field(None, gt=0)


# Single item on a shelf; volume is product.volume * quantity
class ShelfItemOut(BaseModel):
    id: str
    shelf_id: str
    sku: str
    product_name: str
    quantity: int
    volume: float
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Shelf with its items and the volume they currently occupy
class ShelfOut(BaseModel):
    id: str
    name: str
    row_index: int
    col_index: int
    max_volume: float
    used_volume: float
    items: List[ShelfItemOut]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ShelfList(BaseModel):
    shelves: List[ShelfOut]


class AddItemRequest(BaseModel):
    sku: str = Field(min_length=1)
    quantity: int = Field(gt=0, le=MAX_QUANTITY)


# Zero or a negative quantity removes the item
class ItemQuantityUpdate(BaseModel):
    quantity: int = Field(le=MAX_QUANTITY)
