"""Shelf store: shelf lifecycle and the expanded shelf view (items + used volume)."""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from shelfstore.errors import ShelfNotFound
from shelfstore.models.shelf import Shelf
from shelfstore.services.capacity import used_volume
from shelfstore.services.ledger import shelf_locks

logger = logging.getLogger(__name__)


def _with_items(db: Session):
    return db.query(Shelf).options(selectinload(Shelf.items))


def get_shelf(db: Session, shelf_id: str) -> Shelf:
    shelf = _with_items(db).filter(Shelf.id == shelf_id).populate_existing().one_or_none()
    if shelf is None:
        raise ShelfNotFound(shelf_id)
    return shelf


def list_shelves(db: Session) -> List[Shelf]:
    return (
        _with_items(db)
        .order_by(Shelf.row_index.asc(), Shelf.col_index.asc())
        .populate_existing()
        .all()
    )


def create_shelf(db: Session, name: str, row_index: int, col_index: int, max_volume: float) -> Shelf:
    shelf = Shelf(name=name, row_index=row_index, col_index=col_index, max_volume=max_volume)
    db.add(shelf)
    db.commit()
    logger.info("Shelf %s created at (%s, %s)", shelf.id, row_index, col_index)
    return get_shelf(db, shelf.id)


def update_shelf(
    db: Session,
    shelf_id: str,
    name: Optional[str] = None,
    max_volume: Optional[float] = None,
) -> Shelf:
    """Partial update; a field left as None keeps its stored value.

    Shrinking max_volume below what is already stored is accepted; the items
    stay where they are.
    """
    shelf = db.get(Shelf, shelf_id)
    if shelf is None:
        raise ShelfNotFound(shelf_id)
    if name is not None:
        shelf.name = name
    if max_volume is not None:
        shelf.max_volume = max_volume
    db.commit()

    used = used_volume(db, shelf_id)
    if used > shelf.max_volume:
        logger.warning(
            "Shelf %s is over capacity after update: used %s > max %s",
            shelf_id, used, shelf.max_volume,
        )
    return get_shelf(db, shelf_id)


def delete_shelf(db: Session, shelf_id: str) -> None:
    shelf = db.get(Shelf, shelf_id)
    if shelf is None:
        raise ShelfNotFound(shelf_id)
    with shelf_locks.for_shelf(shelf_id):
        db.delete(shelf)
        db.commit()
    shelf_locks.discard(shelf_id)
    logger.info("Shelf %s deleted", shelf_id)
