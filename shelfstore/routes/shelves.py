# shelfstore/routes/shelves.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from shelfstore.database import get_db
from shelfstore.models.users import User
from shelfstore.services import ledger, shelves as shelf_store
from shelfstore.utils.audit import client_ip, write_log
from shelfstore.utils.policy import Action
from shelfstore.utils.tokenJWT import require
import shelfstore.schemas.shelf as shelf_schemas

router = APIRouter(prefix="/shelves", tags=["Shelves"])


@router.get("", response_model=shelf_schemas.ShelfList)
def list_shelves(
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.READ)),
):
    return {"shelves": shelf_store.list_shelves(db)}


@router.get("/{shelf_id}", response_model=shelf_schemas.ShelfOut)
def get_shelf(
    shelf_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.READ)),
):
    return shelf_store.get_shelf(db, shelf_id)


@router.post("", response_model=shelf_schemas.ShelfOut, status_code=status.HTTP_201_CREATED)
def create_shelf(
    payload: shelf_schemas.ShelfCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.WRITE_SHELF)),
):
    shelf = shelf_store.create_shelf(
        db, payload.name, payload.row_index, payload.col_index, payload.max_volume
    )
    write_log(db, user_id=current_user.id, action="SHELF_CREATE", resource="shelves",
              ip=client_ip(request), meta={"id": shelf.id})
    return shelf


@router.put("/{shelf_id}", response_model=shelf_schemas.ShelfOut)
def update_shelf(
    shelf_id: str,
    payload: shelf_schemas.ShelfUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.WRITE_SHELF)),
):
    shelf = shelf_store.update_shelf(db, shelf_id, name=payload.name, max_volume=payload.max_volume)
    write_log(db, user_id=current_user.id, action="SHELF_UPDATE", resource="shelves",
              ip=client_ip(request), meta={"id": shelf_id, **payload.model_dump(exclude_none=True)})
    return shelf


@router.delete("/{shelf_id}")
def delete_shelf(
    shelf_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.DELETE_SHELF)),
):
    shelf_store.delete_shelf(db, shelf_id)
    write_log(db, user_id=current_user.id, action="SHELF_DELETE", resource="shelves",
              ip=client_ip(request), meta={"id": shelf_id})
    return {"message": "shelf deleted successfully"}


# ---- ITEMS ----
@router.post("/{shelf_id}/items", response_model=shelf_schemas.ShelfItemOut)
def add_item(
    shelf_id: str,
    payload: shelf_schemas.AddItemRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.WRITE_ITEMS)),
):
    item = ledger.add_item(db, shelf_id, payload.sku, payload.quantity)
    write_log(db, user_id=current_user.id, action="ITEM_ADD", resource="shelves",
              ip=client_ip(request),
              meta={"shelf_id": shelf_id, "sku": payload.sku, "quantity": payload.quantity})
    return item


@router.put("/{shelf_id}/items/{item_id}")
def update_item_quantity(
    shelf_id: str,
    item_id: str,
    payload: shelf_schemas.ItemQuantityUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.WRITE_ITEMS)),
):
    item = ledger.update_quantity(db, item_id, payload.quantity, shelf_id=shelf_id)
    write_log(db, user_id=current_user.id, action="ITEM_UPDATE", resource="shelves",
              ip=client_ip(request),
              meta={"shelf_id": shelf_id, "item_id": item_id, "quantity": payload.quantity})
    if item is None:
        return {"message": "item removed successfully"}
    return {"message": "item quantity updated successfully"}


@router.delete("/{shelf_id}/items/{item_id}")
def remove_item(
    shelf_id: str,
    item_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.WRITE_ITEMS)),
):
    ledger.remove_item(db, item_id, shelf_id=shelf_id)
    write_log(db, user_id=current_user.id, action="ITEM_REMOVE", resource="shelves",
              ip=client_ip(request), meta={"shelf_id": shelf_id, "item_id": item_id})
    return {"message": "item removed successfully"}
