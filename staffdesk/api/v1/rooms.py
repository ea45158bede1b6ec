import logging
import secrets
import string
from datetime import datetime
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Path, Query, status

from staffdesk.core.errors import ConflictError, ForbiddenError, NotFoundError, StoreWriteError
from staffdesk.core.rbac import REVIEWER_ROLES, require_roles
from staffdesk.core.security import get_current_user
from staffdesk.db.mongo import get_store
from staffdesk.db.store import RecordStore, parse_object_id
from staffdesk.schemas.auth_schema import SessionContext
from staffdesk.schemas.room_schema import JoinRoomIn, RoomIn, RoomOut, WorkLogIn, WorkLogListOut, WorkLogOut
from staffdesk.utils.dates import as_datetime, naive_utc


logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/rooms", tags=["rooms"])

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits
ROOM_CODE_LENGTH = 6


def new_room_code() -> str:
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


async def _join(store: RecordStore, room_id: str, user_id: str) -> None:
    q = {"room_id": ObjectId(room_id), "user_id": ObjectId(user_id)}
    if await store.select_one("room_members", q):
        return
    try:
        await store.create("room_members", {**q, "joined_at": datetime.utcnow()})
    except ConflictError:
        # Joined concurrently
        pass


async def _require_member(store: RecordStore, room_id: str, current_user: SessionContext) -> ObjectId:
    oid = parse_object_id(room_id, "Room")
    if not await store.select_one("chat_rooms", {"_id": oid}):
        raise NotFoundError("Room not found")
    if not await store.select_one("room_members", {"room_id": oid, "user_id": ObjectId(current_user.user_id)}):
        raise ForbiddenError("Join the room first")
    return oid


@router.get("", response_model=list[RoomOut])
async def list_my_rooms(store: RecordStore = Depends(get_store), current_user: SessionContext = Depends(get_current_user)):
    memberships = await store.select("room_members", {"user_id": ObjectId(current_user.user_id)})
    if not memberships:
        return []
    room_ids = [ObjectId(m["room_id"]) for m in memberships]
    return await store.select("chat_rooms", {"_id": {"$in": room_ids}}, order=[("created_at", -1)])


@router.post("", response_model=RoomOut, status_code=status.HTTP_201_CREATED)
async def create_room(
    payload: RoomIn,
    store: RecordStore = Depends(get_store),
    current_user: SessionContext = Depends(get_current_user),
):
    require_roles(current_user, REVIEWER_ROLES)
    room = None
    # Codes are random; retry the rare collision with an existing room
    for _ in range(5):
        try:
            room = await store.create("chat_rooms", {
                "name": payload.name.strip(),
                "room_code": new_room_code(),
                "created_by": ObjectId(current_user.user_id),
                "created_at": datetime.utcnow(),
            })
            break
        except ConflictError:
            logger.info("Room code collision, retrying")
    if room is None:
        raise StoreWriteError("Failed to create room")
    # Creator auto-joins
    await _join(store, room["id"], current_user.user_id)
    return room


@router.post("/join", response_model=RoomOut)
async def join_room(
    payload: JoinRoomIn,
    store: RecordStore = Depends(get_store),
    current_user: SessionContext = Depends(get_current_user),
):
    room = await store.select_one("chat_rooms", {"room_code": payload.room_code.strip().upper()})
    if not room:
        raise NotFoundError("Invalid room code")
    await _join(store, room["id"], current_user.user_id)
    return room


@router.get("/{room_id}/logs", response_model=WorkLogListOut)
async def list_work_logs(
    room_id: str = Path(...),
    since: Optional[datetime] = Query(None),
    store: RecordStore = Depends(get_store),
    current_user: SessionContext = Depends(get_current_user),
):
    oid = await _require_member(store, room_id, current_user)
    since = naive_utc(since)
    q: dict = {"room_id": oid}
    if since is not None:
        q["created_at"] = {"$gt": since}
    items = await store.select("work_logs", q, order=[("log_date", -1), ("created_at", -1)])
    cursor = max((i["created_at"] for i in items), default=since)
    return {"items": items, "cursor": cursor}


@router.post("/{room_id}/logs", response_model=WorkLogOut, status_code=status.HTTP_201_CREATED)
async def add_work_log(
    payload: WorkLogIn,
    room_id: str = Path(...),
    store: RecordStore = Depends(get_store),
    current_user: SessionContext = Depends(get_current_user),
):
    oid = await _require_member(store, room_id, current_user)
    return await store.create("work_logs", {
        "room_id": oid,
        "user_id": ObjectId(current_user.user_id),
        "log_date": as_datetime(payload.log_date),
        "log_time": payload.log_time.strftime("%H:%M") if payload.log_time else None,
        "tasks": payload.tasks.strip(),
        "created_at": datetime.utcnow(),
    })
