# shelfstore/schemas/user.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import datetime
from typing import List, Optional

from shelfstore.models.users import UserRole

# Shared properties for user models
class UserBase(BaseModel):
    email: EmailStr

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str

# Schema for admin-created accounts
class UserCreate(UserBase):
    password: str = Field(min_length=8)
    role: UserRole = UserRole.VIEWER

# Output schema for user profile details
class UserResponse(UserBase):
    id: str
    role: UserRole
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class UserList(BaseModel):
    users: List[UserResponse]

# Login result: bearer token plus the resolved account
class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse

class UserCreated(BaseModel):
    message: str
    user: UserResponse

# Profile changes; omitted or null fields are left as they are
class ProfileUpdate(BaseModel):
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
