# shelfstore/routes/admin.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from shelfstore.database import get_db
from shelfstore.models.users import User
from shelfstore.schemas.user import UserCreate, UserCreated, UserList
from shelfstore.services import users as user_service
from shelfstore.utils.audit import client_ip, write_log
from shelfstore.utils.policy import Action
from shelfstore.utils.tokenJWT import require

router = APIRouter(prefix="/users", tags=["Admin"])


# Create an account with an explicit role (Admin only)
@router.post("", response_model=UserCreated, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.MANAGE_USERS)),
):
    user = user_service.create_user(db, payload.email, payload.password, payload.role)
    write_log(db, user_id=current_user.id, action="USER_CREATE", resource="users",
              ip=client_ip(request), meta={"id": user.id, "role": user.role})
    return {"message": "user created successfully", "user": user}


@router.get("", response_model=UserList)
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.MANAGE_USERS)),
):
    return {"users": user_service.list_users(db)}


# Delete a user account (Admin only, never the caller's own)
@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(Action.MANAGE_USERS)),
):
    user_service.delete_user(db, user_id, current_user)
    write_log(db, user_id=current_user.id, action="USER_DELETE", resource="users",
              ip=client_ip(request), meta={"id": user_id})
    return {"message": "user deleted successfully"}
