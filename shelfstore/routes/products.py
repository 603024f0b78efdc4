# shelfstore/routes/products.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from shelfstore.database import get_db
from shelfstore.models.users import User
from shelfstore.services import products as catalog
from shelfstore.utils.audit import client_ip, write_log
from shelfstore.utils.policy import Action
from shelfstore.utils.tokenJWT import require
import shelfstore.schemas.product as product_schemas

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=product_schemas.ProductList)
def list_products(
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.READ)),
):
    return {"products": catalog.list_products(db)}


@router.get("/{sku}", response_model=product_schemas.ProductOut)
def get_product(
    sku: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.READ)),
):
    return catalog.get_product(db, sku)


@router.post("", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.WRITE_PRODUCT)),
):
    product = catalog.create_product(db, payload.sku, payload.name, payload.volume, payload.weight)
    write_log(db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
              ip=client_ip(request), meta={"sku": product.sku})
    return product


@router.put("/{sku}", response_model=product_schemas.ProductOut)
def update_product(
    sku: str,
    payload: product_schemas.ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.WRITE_PRODUCT)),
):
    product = catalog.update_product(
        db, sku, name=payload.name, volume=payload.volume, weight=payload.weight
    )
    write_log(db, user_id=current_user.id, action="PRODUCT_UPDATE", resource="products",
              ip=client_ip(request), meta={"sku": sku, **payload.model_dump(exclude_none=True)})
    return product


@router.delete("/{sku}")
def delete_product(
    sku: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.DELETE_PRODUCT)),
):
    catalog.delete_product(db, sku)
    write_log(db, user_id=current_user.id, action="PRODUCT_DELETE", resource="products",
              ip=client_ip(request), meta={"sku": sku})
    return {"message": "product deleted successfully"}
