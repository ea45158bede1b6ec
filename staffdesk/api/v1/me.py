from datetime import datetime

from bson import ObjectId
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from staffdesk.core.errors import NotFoundError, StoreError
from staffdesk.core.security import get_current_user
from staffdesk.db.mongo import get_store
from staffdesk.db.store import RecordStore
from staffdesk.schemas.auth_schema import SessionContext
from staffdesk.schemas.employee_schema import MenuItem, ProfileOut, ProfileUpdate
from staffdesk.storage.files import FileStorage, get_file_storage
from staffdesk.api.v1.employees import profile_update_fields


router = APIRouter(prefix="/me", tags=["me"])

MENU_ITEMS = [
    {"title": "Dashboard", "url": "/dashboard"},
    {"title": "Documents", "url": "/documents"},
    {"title": "Employee", "url": "/employees"},
    {"title": "Chat Room", "url": "/chat-room"},
    {"title": "Leave Requests", "url": "/leave-requests"},
    {"title": "Profile", "url": "/profile"},
]

# Entries hidden from a role
_HIDDEN = {"employee": {"Employee"}}


def menu_for_role(role: str) -> list[dict]:
    hidden = _HIDDEN.get(str(role).lower(), set())
    return [item for item in MENU_ITEMS if item["title"] not in hidden]


@router.get("/profile", response_model=ProfileOut)
async def my_profile(store: RecordStore = Depends(get_store), current_user: SessionContext = Depends(get_current_user)):
    profile = await store.select_one("profiles", {"_id": ObjectId(current_user.user_id)})
    if not profile:
        raise NotFoundError("Profile not found")
    return {**profile, "role": current_user.role}


@router.patch("/profile", response_model=ProfileOut)
async def update_my_profile(
    payload: ProfileUpdate,
    store: RecordStore = Depends(get_store),
    current_user: SessionContext = Depends(get_current_user),
):
    profile = await store.update("profiles", profile_update_fields(payload), {"_id": ObjectId(current_user.user_id)})
    if not profile:
        raise NotFoundError("Profile not found")
    return {**profile, "role": current_user.role}


@router.post("/profile/picture", response_model=ProfileOut)
async def upload_profile_picture(
    file: UploadFile = File(...),
    store: RecordStore = Depends(get_store),
    storage: FileStorage = Depends(get_file_storage),
    current_user: SessionContext = Depends(get_current_user),
):
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Profile picture must be an image")
    content = await file.read()
    stored = await storage.save("profile_pictures", f"{current_user.user_id}_{file.filename or 'picture'}", content)
    try:
        profile = await store.update(
            "profiles",
            {"profile_pic_url": stored.url, "updated_at": datetime.utcnow()},
            {"_id": ObjectId(current_user.user_id)},
        )
    except StoreError:
        await storage.delete(stored.bucket, stored.key)
        raise
    if not profile:
        await storage.delete(stored.bucket, stored.key)
        raise NotFoundError("Profile not found")
    return {**profile, "role": current_user.role}


@router.get("/menu", response_model=list[MenuItem])
async def my_menu(current_user: SessionContext = Depends(get_current_user)):
    return menu_for_role(current_user.role)
