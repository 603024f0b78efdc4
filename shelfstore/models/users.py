# shelfstore/models/users.py
import enum
import uuid
from sqlalchemy import Column, String, DateTime, CheckConstraint, func
from shelfstore.database import Base

# Roles recognised by the authorization policy, lowest privilege first
class UserRole(str, enum.Enum):
    VIEWER = "viewer"
    EDITOR = "editor"
    ADMIN = "admin"

# Represents a user account with authentication details and system role
class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        String(20),
        CheckConstraint("role IN ('viewer', 'editor', 'admin')"),
        nullable=False,
        default=UserRole.VIEWER.value,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
