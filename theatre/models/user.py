# theatre/models/user.py
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class UserBase(BaseModel):
    name: str
    email: str

    @field_validator("email")
    def validate_email(cls, v):
        v = v.strip().lower()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("invalid email address")
        return v


class UserCreate(UserBase):
    password: str

    @field_validator("password")
    def validate_password(cls, v):
        if len(v) < 6:
            raise ValueError("password must be at least 6 characters")
        return v


class AdminUserCreate(UserCreate):
    role: UserRole = UserRole.USER


class User(UserBase):
    id: str
    role: UserRole = UserRole.USER
    is_active: bool = True
    avatar: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    avatar: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    user_id: str
    jti: str
    expires_at: Optional[datetime] = None
