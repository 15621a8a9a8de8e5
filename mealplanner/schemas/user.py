from enum import Enum
from typing import Optional
from pydantic import BaseModel, EmailStr


class Role(str, Enum):
    admin = "admin"
    viewer = "viewer"


class UserRole(BaseModel):
    user_id: str
    role: Role = Role.viewer


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    role: Role


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    message: str
