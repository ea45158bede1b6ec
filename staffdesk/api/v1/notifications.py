from datetime import datetime
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Path, Query

from staffdesk.core.errors import NotFoundError
from staffdesk.core.security import get_current_user
from staffdesk.db.mongo import get_store
from staffdesk.db.store import RecordStore, parse_object_id
from staffdesk.schemas.auth_schema import SessionContext
from staffdesk.schemas.notification_schema import NotificationListOut, NotificationOut
from staffdesk.utils.dates import naive_utc


router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListOut)
async def list_notifications(
    read: Optional[bool] = Query(None),
    since: Optional[datetime] = Query(None),
    limit: int = Query(10, ge=1, le=100),
    store: RecordStore = Depends(get_store),
    current_user: SessionContext = Depends(get_current_user),
):
    me = ObjectId(current_user.user_id)
    q: dict = {"user_id": me}
    if read is not None:
        q["read"] = bool(read)
    since = naive_utc(since)
    if since is None:
        items = await store.select("notifications", q, order=[("created_at", -1)], limit=limit)
    else:
        # Oldest new page first so the cursor never skips undelivered rows
        q["created_at"] = {"$gt": since}
        items = await store.select("notifications", q, order=[("created_at", 1)], limit=limit)
        items.reverse()
    unread = await store.count("notifications", {"user_id": me, "read": False})
    cursor = max((n["created_at"] for n in items), default=since)
    return {"items": items, "unread_count": unread, "cursor": cursor}


@router.patch("/{notification_id}/read", response_model=NotificationOut)
async def mark_read(
    notification_id: str = Path(...),
    store: RecordStore = Depends(get_store),
    current_user: SessionContext = Depends(get_current_user),
):
    row = await store.update(
        "notifications",
        {"read": True},
        {"_id": parse_object_id(notification_id, "Notification"), "user_id": ObjectId(current_user.user_id)},
    )
    if not row:
        raise NotFoundError("Notification not found")
    return row
