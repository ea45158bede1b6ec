from datetime import datetime
from itertools import groupby
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from staffdesk.core.errors import ForbiddenError, NotFoundError, StoreError
from staffdesk.core.rbac import can_view_user_scope, is_reviewer, require_roles
from staffdesk.core.security import get_current_user
from staffdesk.db.mongo import get_store
from staffdesk.db.store import RecordStore, parse_object_id
from staffdesk.schemas.auth_schema import SessionContext
from staffdesk.schemas.document_schema import DocumentListOut, DocumentOut
from staffdesk.services.notification_service import notify
from staffdesk.storage.files import FileStorage, get_file_storage

router = APIRouter(prefix="/documents", tags=["documents"])


def group_by_upload_day(items: list[dict]) -> list[dict]:
    """Group documents (already newest first) by the calendar day they were uploaded."""
    return [
        {"date": day, "items": list(docs)}
        for day, docs in groupby(items, key=lambda d: d["created_at"].date())
    ]


@router.get("", response_model=DocumentListOut)
async def list_documents(
    grouped: bool = Query(False),
    user_id: Optional[str] = Query(None),
    store: RecordStore = Depends(get_store),
    current_user: SessionContext = Depends(get_current_user),
):
    q: dict = {}
    # Employees can only see their own docs
    scope = user_id or (None if is_reviewer(current_user.role) else current_user.user_id)
    if scope is not None:
        if not can_view_user_scope(current_user, scope):
            raise ForbiddenError()
        q["user_id"] = parse_object_id(scope, "Employee")
    items = await store.select("documents", q, order=[("created_at", -1)])
    out = {"items": items, "total": len(items)}
    if grouped:
        out["groups"] = group_by_upload_day(items)
    return out


@router.post("", response_model=DocumentOut, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    user_id: str = Form(...),
    store: RecordStore = Depends(get_store),
    storage: FileStorage = Depends(get_file_storage),
    current_user: SessionContext = Depends(get_current_user),
):
    require_roles(current_user, {"admin"})
    target = parse_object_id(user_id, "Employee")
    if not await store.select_one("profiles", {"_id": target}):
        raise NotFoundError("Employee not found")
    content = await file.read()
    stored = await storage.save("documents", file.filename, content)
    try:
        row = await store.create("documents", {
            "user_id": target,
            "file_name": file.filename or stored.key,
            "file_type": file.content_type,
            "file_url": stored.url,
            "size_bytes": stored.size,
            "uploaded_by": ObjectId(current_user.user_id),
            "created_at": datetime.utcnow(),
        })
    except StoreError:
        await storage.delete(stored.bucket, stored.key)
        raise
    await notify(store, [row["user_id"]], "document_uploaded", {"document_id": row["id"], "file_name": row["file_name"]})
    return row
