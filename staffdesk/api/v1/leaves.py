from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from staffdesk.core.security import get_current_user
from staffdesk.db.mongo import get_store
from staffdesk.db.store import RecordStore
from staffdesk.schemas.auth_schema import SessionContext
from staffdesk.schemas.leave_schema import (
    AnyLeaveDraft,
    LeaveListOut,
    LeaveOut,
    LeaveStatus,
    LeaveStatusIn,
)
from staffdesk.services.leave_service import LeaveRequestService

router = APIRouter(prefix="/leaves", tags=["leaves"])


def get_leave_service(store: RecordStore = Depends(get_store)) -> LeaveRequestService:
    return LeaveRequestService(store)


@router.get("", response_model=LeaveListOut)
async def list_leaves(
    status: Optional[LeaveStatus] = Query(None),
    service: LeaveRequestService = Depends(get_leave_service),
    current_user: SessionContext = Depends(get_current_user),
):
    items = await service.list(current_user, status=status)
    return {"items": items, "total": len(items)}


@router.get("/{leave_id}", response_model=LeaveOut)
async def get_leave(
    leave_id: str = Path(...),
    service: LeaveRequestService = Depends(get_leave_service),
    current_user: SessionContext = Depends(get_current_user),
):
    return await service.get(current_user, leave_id)


@router.post("", response_model=LeaveOut, status_code=status.HTTP_201_CREATED)
async def create_leave(
    payload: Annotated[AnyLeaveDraft, Body(discriminator="leave_type")],
    service: LeaveRequestService = Depends(get_leave_service),
    current_user: SessionContext = Depends(get_current_user),
):
    return await service.submit(current_user, payload)


@router.patch("/{leave_id}", response_model=LeaveOut)
async def review_leave(
    payload: LeaveStatusIn,
    leave_id: str = Path(...),
    service: LeaveRequestService = Depends(get_leave_service),
    current_user: SessionContext = Depends(get_current_user),
):
    return await service.review(current_user, leave_id, payload.status)
