from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from staffdesk.utils.dates import as_date


class RoomIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class JoinRoomIn(BaseModel):
    room_code: str = Field(min_length=1, max_length=16)


class RoomOut(BaseModel):
    id: str
    name: str
    room_code: str
    created_by: str
    created_at: datetime


class WorkLogIn(BaseModel):
    log_date: date
    log_time: Optional[time] = None
    tasks: str = Field(min_length=1)


class WorkLogOut(BaseModel):
    id: str
    room_id: str
    user_id: str
    log_date: date
    log_time: Optional[str] = None
    tasks: str
    created_at: datetime

    @field_validator("log_date", mode="before")
    @classmethod
    def _strip_time(cls, v):
        return as_date(v)


class WorkLogListOut(BaseModel):
    items: list[WorkLogOut]
    # Newest created_at seen; pass back as `since` to poll for newer logs
    cursor: Optional[datetime] = None
