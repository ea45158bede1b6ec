from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from staffdesk.utils.dates import as_date

from .common import Role


class EmployeeIn(BaseModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Role = Role.employee
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    profile_pic_url: Optional[str] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None


class ProfileOut(BaseModel):
    id: str
    full_name: Optional[str] = None
    email: EmailStr
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    profile_pic_url: Optional[str] = None
    role: Optional[str] = None
    updated_at: Optional[datetime] = None

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _strip_time(cls, v):
        return as_date(v)


class EmployeeListOut(BaseModel):
    items: list[ProfileOut]
    total: int


class MenuItem(BaseModel):
    title: str
    url: str
