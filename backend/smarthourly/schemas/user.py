from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=200)
    department: Optional[str] = None
    phone: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: Optional[str] = None
    department: Optional[str] = None
    phone: Optional[str] = None


class AdminUserView(BaseModel):
    id: int
    email: str
    name: str
    role: str
    department: str
    phone: str
    is_current_user: bool


class RoleUpdateRequest(BaseModel):
    role: str = Field(pattern="^(operator|supervisor|admin)$")
