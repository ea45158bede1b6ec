"""Leave request lifecycle: submit, list, review.

A request starts ``pending`` and moves once to ``approved`` or
``rejected``. Only reviewers (admin/hr) may move it, and the review
fields are written together with the new status.
"""
import logging
from datetime import datetime
from typing import Optional

from bson import ObjectId

from staffdesk.core.errors import ConflictError, ForbiddenError, NotFoundError, StoreReadError
from staffdesk.core.rbac import can_view_user_scope, is_reviewer
from staffdesk.db.store import RecordStore, parse_object_id
from staffdesk.schemas.auth_schema import SessionContext
from staffdesk.schemas.leave_schema import AnyLeaveDraft
from staffdesk.services.notification_service import notify, notify_reviewers
from staffdesk.utils.dates import as_date, as_datetime


logger = logging.getLogger("uvicorn.error")

TABLE = "leave_requests"


class LeaveRequestService:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def _serialize(self, session: SessionContext, row: dict, names: Optional[dict] = None) -> dict:
        out = {
            "id": row["id"],
            "requester_id": row["requester_id"],
            "leave_type": row["leave_type"],
            "start_date": as_date(row.get("start_date")),
            "end_date": as_date(row.get("end_date") or row.get("start_date")),
            "reason": row.get("reason"),
            "extra_info": row.get("extra_info"),
            "status": row.get("status", "pending"),
            "reviewed_by": row.get("reviewed_by"),
            "reviewed_at": row.get("reviewed_at"),
            "created_at": row["created_at"],
            "can_review": is_reviewer(session.role) and row.get("status") == "pending",
        }
        if names is not None:
            out["requester_name"] = names.get(row["requester_id"])
        return out

    async def _requester_names(self, requester_ids: set[str]) -> dict[str, Optional[str]]:
        if not requester_ids:
            return {}
        profiles = await self.store.select(
            "profiles", {"_id": {"$in": [ObjectId(i) for i in requester_ids]}}
        )
        names: dict[str, Optional[str]] = {}
        for p in profiles:
            names[p["id"]] = p.get("full_name") or p.get("email") or None
        return names

    async def submit(self, session: SessionContext, draft: AnyLeaveDraft) -> dict:
        now = datetime.utcnow()
        fields = {
            "requester_id": ObjectId(session.user_id),
            "leave_type": draft.leave_type,
            "start_date": as_datetime(draft.start_date),
            "end_date": as_datetime(draft.resolved_end_date()),
            "reason": draft.reason or None,
            "extra_info": draft.resolved_extra_info(),
            "status": "pending",
            "reviewed_by": None,
            "reviewed_at": None,
            "created_at": now,
        }
        row = await self.store.create(TABLE, fields)
        logger.info("Leave request %s submitted by %s", row["id"], session.user_id)
        await notify_reviewers(
            self.store,
            "leave_requested",
            {"leave_id": row["id"], "leave_type": draft.leave_type, "requester_name": session.full_name},
            exclude=session.user_id,
        )
        return self._serialize(session, row)

    async def list(self, session: SessionContext, status: Optional[str] = None) -> list[dict]:
        q: dict = {}
        if status:
            q["status"] = status
        # Employees only ever see their own requests
        if not is_reviewer(session.role):
            q["requester_id"] = ObjectId(session.user_id)
        rows = await self.store.select(TABLE, q, order=[("created_at", -1)])
        if not is_reviewer(session.role):
            return [self._serialize(session, r) for r in rows]
        names = await self._requester_names({r["requester_id"] for r in rows})
        return [self._serialize(session, r, names) for r in rows]

    async def get(self, session: SessionContext, request_id: str) -> dict:
        row = await self.store.select_one(TABLE, {"_id": parse_object_id(request_id, "Leave request")})
        if not row or not can_view_user_scope(session, row["requester_id"]):
            raise NotFoundError("Leave request not found")
        names = await self._requester_names({row["requester_id"]}) if is_reviewer(session.role) else None
        return self._serialize(session, row, names)

    async def review(self, session: SessionContext, request_id: str, decision: str) -> dict:
        if not is_reviewer(session.role):
            raise ForbiddenError("Only admin or HR can review leave requests")
        oid = parse_object_id(request_id, "Leave request")
        now = datetime.utcnow()
        # Filtering on pending makes the transition one-way
        row = await self.store.update(
            TABLE,
            {"status": decision, "reviewed_by": ObjectId(session.user_id), "reviewed_at": now},
            {"_id": oid, "status": "pending"},
        )
        if row is None:
            existing = await self.store.select_one(TABLE, {"_id": oid})
            if existing is None:
                raise NotFoundError("Leave request not found")
            raise ConflictError(f"Leave request already {existing.get('status')}")
        logger.info("Leave request %s %s by %s", request_id, decision, session.user_id)
        await notify(
            self.store,
            [row["requester_id"]],
            "leave_status",
            {"leave_id": row["id"], "status": decision},
        )
        # The decision is already stored; the name is only decoration
        try:
            names = await self._requester_names({row["requester_id"]})
        except StoreReadError as exc:
            logger.warning("Requester name for leave %s not loaded: %s", row["id"], exc.detail)
            names = {}
        return self._serialize(session, row, names)
