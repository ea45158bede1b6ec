from bson import ObjectId
from fastapi import APIRouter, Depends

from staffdesk.core.rbac import is_reviewer
from staffdesk.core.security import get_current_user
from staffdesk.db.mongo import get_store
from staffdesk.db.store import RecordStore
from staffdesk.schemas.auth_schema import SessionContext
from staffdesk.schemas.dashboard_schema import SummaryMetrics


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=SummaryMetrics, response_model_exclude_none=True)
async def dashboard_summary(
    store: RecordStore = Depends(get_store),
    current_user: SessionContext = Depends(get_current_user),
):
    if is_reviewer(current_user.role):
        return SummaryMetrics(
            role=current_user.role,
            total_employees=await store.count("profiles"),
            pending_leaves=await store.count("leave_requests", {"status": "pending"}),
            total_documents=await store.count("documents"),
            chat_rooms=await store.count("chat_rooms"),
        )
    me = ObjectId(current_user.user_id)
    return SummaryMetrics(
        role=current_user.role,
        my_documents=await store.count("documents", {"user_id": me}),
        my_pending_leaves=await store.count("leave_requests", {"requester_id": me, "status": "pending"}),
        my_rooms=await store.count("room_members", {"user_id": me}),
    )
