"""
Shelf item ledger: quantity changes on a shelf under the capacity invariant.

AddItem reads the shelf's used volume, compares, then writes. That sequence
runs inside a per-shelf critical section: an in-process lock keyed by shelf
id, then a write transaction that excludes other worker processes. On SQLite
that transaction starts with ``BEGIN IMMEDIATE``; on PostgreSQL the shelf row
is held with ``SELECT ... FOR UPDATE``.
"""
import logging
import threading
from typing import Dict, Optional

from sqlalchemy.orm import Session

from shelfstore.database import begin_write
from shelfstore.errors import InsufficientVolume, ItemNotFound, ProductNotFound, ShelfNotFound
from shelfstore.models.product import Product
from shelfstore.models.shelf import Shelf, ShelfItem
from shelfstore.services.capacity import can_add, used_volume

logger = logging.getLogger(__name__)


class ShelfLocks:
    """Registry of one mutex per shelf id."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def for_shelf(self, shelf_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(shelf_id)
            if lock is None:
                lock = self._locks[shelf_id] = threading.Lock()
            return lock

    def discard(self, shelf_id: str) -> None:
        with self._guard:
            self._locks.pop(shelf_id, None)


shelf_locks = ShelfLocks()


def _lock_shelf_row(db: Session, shelf_id: str) -> Shelf:
    shelf = (
        db.query(Shelf)
        .filter(Shelf.id == shelf_id)
        .with_for_update()
        .populate_existing()
        .one_or_none()
    )
    if shelf is None:
        raise ShelfNotFound(shelf_id)
    return shelf


def _get_item(db: Session, item_id: str, shelf_id: Optional[str] = None) -> ShelfItem:
    query = db.query(ShelfItem).filter(ShelfItem.id == item_id)
    if shelf_id is not None:
        query = query.filter(ShelfItem.shelf_id == shelf_id)
    item = query.populate_existing().one_or_none()
    if item is None:
        raise ItemNotFound(item_id)
    return item


def add_item(db: Session, shelf_id: str, sku: str, quantity: int) -> ShelfItem:
    """Place ``quantity`` units of ``sku`` on the shelf, merging into an existing row.

    Raises ProductNotFound, ShelfNotFound or InsufficientVolume; on any failure
    nothing is written.
    """
    if db.get(Product, sku) is None:
        raise ProductNotFound(sku)
    if db.query(Shelf.id).filter(Shelf.id == shelf_id).scalar() is None:
        raise ShelfNotFound(shelf_id)

    with shelf_locks.for_shelf(shelf_id):
        begin_write(db)
        try:
            # Shared row lock: a concurrent product volume change waits for us
            product = db.get(Product, sku, with_for_update={"read": True}, populate_existing=True)
            if product is None:
                raise ProductNotFound(sku)
            shelf = _lock_shelf_row(db, shelf_id)

            # Only the incoming quantity is checked; the existing rows are already in `used`
            if not can_add(db, shelf, product, quantity):
                raise InsufficientVolume(
                    shelf.id,
                    used=used_volume(db, shelf.id),
                    requested=quantity * product.volume,
                    max_volume=shelf.max_volume,
                )

            item = (
                db.query(ShelfItem)
                .filter(ShelfItem.shelf_id == shelf.id, ShelfItem.sku == product.sku)
                .populate_existing()
                .one_or_none()
            )
            if item is not None:
                item.quantity = item.quantity + quantity
            else:
                item = ShelfItem(shelf_id=shelf.id, sku=product.sku, quantity=quantity)
                db.add(item)
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(item)
    logger.info("Added %s x %s to shelf %s (quantity now %s)", quantity, sku, shelf_id, item.quantity)
    return item


def update_quantity(db: Session, item_id: str, quantity: int, shelf_id: Optional[str] = None) -> Optional[ShelfItem]:
    """Overwrite an item's quantity.

    A quantity of zero or less removes the item and returns None. Positive
    quantities are written without a capacity check.
    """
    if quantity <= 0:
        remove_item(db, item_id, shelf_id=shelf_id)
        return None

    item = _get_item(db, item_id, shelf_id)
    with shelf_locks.for_shelf(item.shelf_id):
        begin_write(db)
        try:
            item = _get_item(db, item_id, shelf_id)
            item.quantity = quantity
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(item)
    logger.info("Set quantity of item %s to %s", item_id, quantity)
    return item


def remove_item(db: Session, item_id: str, shelf_id: Optional[str] = None) -> None:
    item = _get_item(db, item_id, shelf_id)
    with shelf_locks.for_shelf(item.shelf_id):
        begin_write(db)
        try:
            db.delete(_get_item(db, item_id, shelf_id))
            db.commit()
        except Exception:
            db.rollback()
            raise
    logger.info("Removed item %s", item_id)
