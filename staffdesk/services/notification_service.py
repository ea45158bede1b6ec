import logging
from datetime import datetime
from typing import Iterable

from bson import ObjectId

from staffdesk.core.errors import StoreError
from staffdesk.core.rbac import REVIEWER_ROLES
from staffdesk.db.store import RecordStore


logger = logging.getLogger("uvicorn.error")


async def notify(store: RecordStore, user_ids: Iterable[str], type: str, payload: dict) -> int:
    """Insert one unread notification per user. Failures are logged, not raised."""
    now = datetime.utcnow()
    sent = 0
    for uid in {str(u) for u in user_ids if u}:
        try:
            await store.create("notifications", {
                "user_id": ObjectId(uid),
                "type": type,
                "payload": payload,
                "read": False,
                "created_at": now,
            })
            sent += 1
        except StoreError as exc:
            logger.warning("Notification %s for user %s not stored: %s", type, uid, exc.detail)
    return sent


async def reviewer_ids(store: RecordStore) -> list[str]:
    rows = await store.select("users", {"role": {"$in": sorted(REVIEWER_ROLES)}, "is_active": True})
    return [r["id"] for r in rows]


async def notify_reviewers(store: RecordStore, type: str, payload: dict, exclude: str | None = None) -> int:
    """Notify every active admin/hr user. Failing to look them up is logged, not raised."""
    try:
        recipients = await reviewer_ids(store)
    except StoreError as exc:
        logger.warning("Reviewers for %s notification not loaded: %s", type, exc.detail)
        return 0
    return await notify(store, [uid for uid in recipients if uid != exclude], type, payload)
