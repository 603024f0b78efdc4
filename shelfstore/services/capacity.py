"""
Shelf capacity accounting.

Used volume is always recomputed from the current item rows joined to their
products; there is no stored running total.
"""
from sqlalchemy import func
from sqlalchemy.orm import Session

from shelfstore.models.product import Product
from shelfstore.models.shelf import Shelf, ShelfItem


def used_volume(db: Session, shelf_id: str) -> float:
    """Sum of quantity * unit volume over every item on the shelf (0.0 when empty)."""
    total = (
        db.query(func.coalesce(func.sum(ShelfItem.quantity * Product.volume), 0.0))
        .select_from(ShelfItem)
        .join(Product, ShelfItem.sku == Product.sku)
        .filter(ShelfItem.shelf_id == shelf_id)
        .scalar()
    )
    return float(total or 0.0)


def projected_volume(used: float, unit_volume: float, delta_quantity: int) -> float:
    return used + delta_quantity * unit_volume


def fits(used: float, max_volume: float, unit_volume: float, delta_quantity: int) -> bool:
    # Inclusive ceiling: landing exactly on max_volume is allowed
    return projected_volume(used, unit_volume, delta_quantity) <= max_volume


def can_add(db: Session, shelf: Shelf, product: Product, delta_quantity: int) -> bool:
    """True iff ``delta_quantity`` more units of ``product`` fit on ``shelf`` right now."""
    return fits(used_volume(db, shelf.id), shelf.max_volume, product.volume, delta_quantity)
