import logging
from datetime import date, datetime
from typing import Optional

from bson import ObjectId

from staffdesk.core.errors import ConflictError, StaffDeskError, StoreError
from staffdesk.core.security import hash_password
from staffdesk.db.store import RecordStore
from staffdesk.utils.dates import as_datetime


logger = logging.getLogger("uvicorn.error")


async def create_account(
    store: RecordStore,
    *,
    email: str,
    password: str,
    full_name: str,
    role: str,
    phone: Optional[str] = None,
    date_of_birth: Optional[date] = None,
    profile_pic_url: Optional[str] = None,
) -> dict:
    """Create the credentials row and the matching profile; both share one id."""
    if not await store.select_one("roles", {"name": role}):
        raise StaffDeskError("Role not found")
    email = email.lower()
    if await store.select_one("users", {"email": email}):
        raise ConflictError("Email already registered")

    now = datetime.utcnow()
    uid = ObjectId()
    user = await store.create("users", {
        "_id": uid,
        "email": email,
        "password_hash": hash_password(password),
        "role": role,
        "is_active": True,
        "last_login": None,
        "created_at": now,
        "updated_at": now,
    })
    try:
        await store.create("profiles", {
            "_id": uid,
            "email": email,
            "full_name": full_name,
            "phone": phone,
            "date_of_birth": as_datetime(date_of_birth),
            "profile_pic_url": profile_pic_url,
            "created_at": now,
            "updated_at": now,
        })
    except StaffDeskError:
        # A user row without its profile is unusable
        try:
            await store.delete("users", {"_id": uid})
        except StoreError as exc:
            logger.warning("Account %s left without a profile: %s", uid, exc.detail)
        raise
    return {"id": user["id"], "email": email, "full_name": full_name, "role": role}
