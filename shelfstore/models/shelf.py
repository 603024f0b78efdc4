# shelfstore/models/shelf.py
import uuid
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, ForeignKey,
    CheckConstraint, UniqueConstraint, Index, func,
)
from sqlalchemy.orm import relationship
from shelfstore.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Shelf(Base):
    """Fixed-capacity storage location at a (row, column) grid position."""
    __tablename__ = "shelves"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(100), nullable=False)
    row_index = Column(Integer, CheckConstraint("row_index >= 0"), nullable=False)
    col_index = Column(Integer, CheckConstraint("col_index >= 0"), nullable=False)
    max_volume = Column(Float, CheckConstraint("max_volume > 0"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # The shelf owns its items: deleting it removes them
    items = relationship(
        "ShelfItem",
        back_populates="shelf",
        cascade="all, delete-orphan",
        order_by="ShelfItem.created_at",
    )

    __table_args__ = (
        Index("ix_shelves_position", "row_index", "col_index"),
    )

    @property
    def used_volume(self) -> float:
        return sum((item.volume for item in self.items), 0.0)


class ShelfItem(Base):
    """Quantity of one product placed on one shelf."""
    __tablename__ = "shelf_items"

    id = Column(String(36), primary_key=True, default=_new_id)
    shelf_id = Column(String(36), ForeignKey("shelves.id", ondelete="CASCADE"), nullable=False, index=True)
    sku = Column(String(50), ForeignKey("products.sku", ondelete="RESTRICT"), nullable=False, index=True)
    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    shelf = relationship("Shelf", back_populates="items")
    product = relationship("Product", lazy="joined")

    __table_args__ = (
        UniqueConstraint("shelf_id", "sku", name="uq_shelf_items_shelf_sku"),
    )

    # Derived from the joined product, never stored
    @property
    def volume(self) -> float:
        return self.product.volume * self.quantity

    @property
    def product_name(self) -> str:
        return self.product.name
