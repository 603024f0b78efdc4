"""Product catalog: SKU-keyed products with per-unit volume and weight."""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shelfstore.database import begin_write
from shelfstore.errors import DuplicateSKU, InsufficientVolume, ProductInUse, ProductNotFound
from shelfstore.models.product import Product
from shelfstore.models.shelf import Shelf, ShelfItem
from shelfstore.services.capacity import fits, used_volume

logger = logging.getLogger(__name__)


def get_product(db: Session, sku: str) -> Product:
    product = db.get(Product, sku)
    if product is None:
        raise ProductNotFound(sku)
    return product


def list_products(db: Session) -> List[Product]:
    return db.query(Product).order_by(Product.name.asc(), Product.sku.asc()).all()


def create_product(db: Session, sku: str, name: str, volume: float, weight: float) -> Product:
    if db.get(Product, sku) is not None:
        raise DuplicateSKU(sku)

    product = Product(sku=sku, name=name, volume=volume, weight=weight)
    db.add(product)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # Another request inserted the same SKU between the check and the commit
        if db.get(Product, sku) is not None:
            raise DuplicateSKU(sku) from None
        raise
    db.refresh(product)
    logger.info("Product %s created", sku)
    return product


def update_product(
    db: Session,
    sku: str,
    name: Optional[str] = None,
    volume: Optional[float] = None,
    weight: Optional[float] = None,
) -> Product:
    """Partial update; a field left as None keeps its stored value.

    Growing ``volume`` grows every shelf item holding the SKU, so it is
    rejected with InsufficientVolume when any such shelf would overflow.
    """
    product = get_product(db, sku)
    if volume is not None and volume > product.volume:
        begin_write(db)
        try:
            product = db.get(Product, sku, with_for_update=True, populate_existing=True)
            if product is None:
                raise ProductNotFound(sku)
            _check_shelves_hold(db, product, volume)
            _apply(product, name, volume, weight)
            db.commit()
        except Exception:
            db.rollback()
            raise
    else:
        _apply(product, name, volume, weight)
        db.commit()
    db.refresh(product)
    logger.info("Product %s updated", sku)
    return product


def _apply(product: Product, name, volume, weight) -> None:
    if name is not None:
        product.name = name
    if volume is not None:
        product.volume = volume
    if weight is not None:
        product.weight = weight


def _check_shelves_hold(db: Session, product: Product, new_volume: float) -> None:
    rows = (
        db.query(ShelfItem.shelf_id, ShelfItem.quantity, Shelf.max_volume)
        .join(Shelf, Shelf.id == ShelfItem.shelf_id)
        .filter(ShelfItem.sku == product.sku)
        .all()
    )
    growth = new_volume - product.volume
    for shelf_id, quantity, max_volume in rows:
        used = used_volume(db, shelf_id)
        if not fits(used, max_volume, growth, quantity):
            raise InsufficientVolume(shelf_id, used=used, requested=quantity * growth, max_volume=max_volume)


def delete_product(db: Session, sku: str) -> None:
    product = get_product(db, sku)
    in_use = db.query(ShelfItem.id).filter(ShelfItem.sku == sku).count()
    if in_use:
        raise ProductInUse(sku)
    db.delete(product)
    db.commit()
    logger.info("Product %s deleted", sku)
