from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class SessionContext(BaseModel):
    """Who is calling. Passed explicitly into every service call."""

    user_id: str
    email: str
    full_name: Optional[str] = None
    role: str


class UserIn(BaseModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    role: str = "employee"


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    id: str
    full_name: Optional[str] = None
    email: EmailStr
    role: str


class AuthResponse(BaseModel):
    user: UserOut
    token: str
