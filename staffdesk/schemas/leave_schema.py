from datetime import date, datetime, time as dt_time
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


LeaveType = Literal["full-day", "half-day", "early-out", "late-arrival"]
LeaveStatus = Literal["pending", "approved", "rejected"]


class _LeaveDraft(BaseModel):
    start_date: date
    reason: Optional[str] = None
    # Preformatted details; stored as-is when the typed field is absent
    extra_info: Optional[str] = None

    def resolved_end_date(self) -> date:
        return self.start_date

    def resolved_extra_info(self) -> Optional[str]:
        return self.extra_info or None


class FullDayDraft(_LeaveDraft):
    leave_type: Literal["full-day"]
    end_date: date

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def resolved_end_date(self) -> date:
        return self.end_date


class HalfDayDraft(_LeaveDraft):
    leave_type: Literal["half-day"]
    half: Optional[Literal["first", "second"]] = None

    @model_validator(mode="after")
    def _check_half(self):
        if self.half is None and not self.extra_info:
            raise ValueError("half is required for half-day leave")
        return self

    def resolved_extra_info(self) -> Optional[str]:
        if self.half is not None:
            return f"Half Day ({self.half} half)"
        return super().resolved_extra_info()


class _TimedDraft(_LeaveDraft):
    time: Optional[dt_time] = None

    @model_validator(mode="after")
    def _check_time(self):
        if self.time is None and not self.extra_info:
            raise ValueError(f"time is required for {self.leave_type} leave")
        return self


class EarlyOutDraft(_TimedDraft):
    leave_type: Literal["early-out"]

    def resolved_extra_info(self) -> Optional[str]:
        if self.time is not None:
            return f"Early out at {self.time:%H:%M}"
        return super().resolved_extra_info()


class LateArrivalDraft(_TimedDraft):
    leave_type: Literal["late-arrival"]

    def resolved_extra_info(self) -> Optional[str]:
        if self.time is not None:
            return f"Arriving at {self.time:%H:%M}"
        return super().resolved_extra_info()


AnyLeaveDraft = Union[FullDayDraft, HalfDayDraft, EarlyOutDraft, LateArrivalDraft]

LeaveDraft = Annotated[AnyLeaveDraft, Field(discriminator="leave_type")]


class LeaveOut(BaseModel):
    id: str
    requester_id: str
    requester_name: Optional[str] = None
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: Optional[str] = None
    extra_info: Optional[str] = None
    status: LeaveStatus
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime
    # True only for reviewers looking at a pending request
    can_review: bool = False


class LeaveStatusIn(BaseModel):
    status: Literal["approved", "rejected"]


class LeaveListOut(BaseModel):
    items: list[LeaveOut]
    total: int
