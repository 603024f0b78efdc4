# shelfstore/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional, List


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Schema for creating a new product
class ProductCreate(BaseModel):
    sku: str = Field(min_length=3, max_length=50)
    name: str = Field(min_length=3, max_length=255)
    volume: float = Field(gt=0)
    weight: float = Field(gt=0)


# Schema for partial product updates
class ProductUpdate(BaseModel):
    """All fields optional; a missing or null field keeps the stored value."""
    name: Optional[str] = Field(None, min_length=3, max_length=255)
    volume: Optional[float] = Field(None, gt=0)
    weight: Optional[float] = Field(None, gt=0)


class ProductOut(ORMBase):
    sku: str
    name: str
    volume: float
    weight: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductList(BaseModel):
    products: List[ProductOut]
