import re
from datetime import datetime
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Path, Query, status

from staffdesk.core.errors import NotFoundError
from staffdesk.core.rbac import REVIEWER_ROLES, require_roles
from staffdesk.core.security import get_current_user
from staffdesk.db.mongo import get_store
from staffdesk.db.store import RecordStore, parse_object_id
from staffdesk.schemas.auth_schema import SessionContext
from staffdesk.schemas.employee_schema import (
    EmployeeIn,
    EmployeeListOut,
    ProfileOut,
    ProfileUpdate,
)
from staffdesk.services.account_service import create_account
from staffdesk.utils.dates import as_datetime

router = APIRouter(prefix="/employees", tags=["employees"])


async def profile_with_role(store: RecordStore, profile: dict) -> dict:
    user = await store.select_one("users", {"_id": ObjectId(profile["id"])})
    return {**profile, "role": (user or {}).get("role")}


def profile_update_fields(payload: ProfileUpdate) -> dict:
    update = payload.model_dump(exclude_unset=True)
    if "date_of_birth" in update:
        update["date_of_birth"] = as_datetime(update["date_of_birth"])
    update["updated_at"] = datetime.utcnow()
    return update


@router.get("", response_model=EmployeeListOut)
async def list_employees(
    search: Optional[str] = Query(None),
    store: RecordStore = Depends(get_store),
    current_user: SessionContext = Depends(get_current_user),
):
    require_roles(current_user, REVIEWER_ROLES)
    q: dict = {}
    if search:
        pattern = re.escape(search)
        q["$or"] = [
            {"full_name": {"$regex": pattern, "$options": "i"}},
            {"email": {"$regex": pattern, "$options": "i"}},
        ]
    profiles = await store.select("profiles", q, order=[("full_name", 1)])
    users = await store.select("users", {"_id": {"$in": [ObjectId(p["id"]) for p in profiles]}})
    roles = {u["id"]: u.get("role") for u in users}
    items = [{**p, "role": roles.get(p["id"])} for p in profiles]
    return {"items": items, "total": len(items)}


@router.post("", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeIn,
    store: RecordStore = Depends(get_store),
    current_user: SessionContext = Depends(get_current_user),
):
    require_roles(current_user, REVIEWER_ROLES)
    user = await create_account(
        store,
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        role=payload.role.value,
        phone=payload.phone,
        date_of_birth=payload.date_of_birth,
        profile_pic_url=payload.profile_pic_url,
    )
    profile = await store.select_one("profiles", {"_id": ObjectId(user["id"])})
    return {**profile, "role": user["role"]}


@router.patch("/{user_id}", response_model=ProfileOut)
async def update_employee(
    payload: ProfileUpdate,
    user_id: str = Path(...),
    store: RecordStore = Depends(get_store),
    current_user: SessionContext = Depends(get_current_user),
):
    require_roles(current_user, REVIEWER_ROLES)
    profile = await store.update(
        "profiles",
        profile_update_fields(payload),
        {"_id": parse_object_id(user_id, "Employee")},
    )
    if not profile:
        raise NotFoundError("Employee not found")
    return await profile_with_role(store, profile)
