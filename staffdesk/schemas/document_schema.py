from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class DocumentOut(BaseModel):
    id: str
    user_id: str
    file_name: str
    file_type: Optional[str] = None
    file_url: str
    size_bytes: int = 0
    uploaded_by: Optional[str] = None
    created_at: datetime


class DocumentGroup(BaseModel):
    date: date
    items: list[DocumentOut]


class DocumentListOut(BaseModel):
    items: list[DocumentOut]
    total: int
    # Filled only when grouping by upload day was requested
    groups: Optional[list[DocumentGroup]] = None
