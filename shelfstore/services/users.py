"""User accounts and the startup admin seed."""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from shelfstore.errors import EmailTaken, Forbidden, UserNotFound
from shelfstore.models.users import User, UserRole
from shelfstore.utils.hashing import get_password_hash, verify_password

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == _normalize_email(email)).first()


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFound()
    return user


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc(), User.email.asc()).all()


def create_user(db: Session, email: str, password: str, role=UserRole.VIEWER) -> User:
    if _find_by_email(db, email) is not None:
        raise EmailTaken()
    user = User(
        email=_normalize_email(email),
        password_hash=get_password_hash(password),
        role=UserRole(role).value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User %s created with role %s", user.email, user.role)
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = _find_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def update_profile(db: Session, user: User, email: Optional[str] = None, role=None) -> User:
    if role is not None and UserRole(role).value != user.role:
        if user.role != UserRole.ADMIN.value:
            raise Forbidden("only admin can change roles")
        user.role = UserRole(role).value
    if email is not None:
        existing = _find_by_email(db, email)
        if existing is not None and existing.id != user.id:
            raise EmailTaken()
        user.email = _normalize_email(email)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str, acting_user: User) -> None:
    if user_id == acting_user.id:
        raise Forbidden("you cannot delete your own account")
    user = get_user(db, user_id)
    email = user.email
    db.delete(user)
    db.commit()
    logger.info("User %s deleted", email)


def ensure_admin(db: Session, email: str, password: str) -> Optional[User]:
    """Create the initial admin when no account exists yet; otherwise do nothing."""
    if db.query(User.id).count() > 0:
        return None
    user = create_user(db, email, password, UserRole.ADMIN)
    logger.info("Initial admin user created: %s", user.email)
    return user
