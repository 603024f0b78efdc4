# shelfstore/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

from shelfstore.database import get_db
from shelfstore.models.users import User
from shelfstore.schemas import user as schemas
from shelfstore.services import users as user_service
from shelfstore.utils.audit import client_ip, write_log
from shelfstore.utils.tokenJWT import get_current_user, token_for

router = APIRouter(prefix="/auth", tags=["Auth"])


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.LoginResponse)
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    user = user_service.authenticate(db, payload.email, payload.password)

    # Validate credentials and log failure on error
    if user is None:
        write_log(db, user_id=None, action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"email": payload.email})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid credentials")

    token = token_for(user)

    write_log(db, user_id=user.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"email": user.email})

    return {"token": token, "token_type": "bearer", "user": user}


# Retrieve current authenticated user details
@router.get("/profile", response_model=schemas.UserResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=schemas.UserResponse)
def update_profile(
    payload: schemas.ProfileUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = user_service.update_profile(db, current_user, email=payload.email, role=payload.role)
    write_log(db, user_id=user.id, action="PROFILE_UPDATE", resource="auth",
              ip=client_ip(request), meta=payload.model_dump(mode="json", exclude_none=True))
    return user
