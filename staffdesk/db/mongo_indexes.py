from motor.motor_asyncio import AsyncIOMotorDatabase
from staffdesk.db.mongo import get_mongo_db


async def ensure_indexes(db: AsyncIOMotorDatabase | None = None) -> None:
    """Create required MongoDB indexes (idempotent)."""
    if db is None:
        db = get_mongo_db()

    users = db["users"]
    # Unique index on email
    await users.create_index([("email", 1)], unique=True, name="uniq_email")
    await users.create_index([("role", 1)], name="idx_user_role")

    roles = db["roles"]
    await roles.create_index([("name", 1)], unique=True, name="uniq_role_name")

    profiles = db["profiles"]
    await profiles.create_index([("email", 1)], name="idx_profile_email")

    leave_requests = db["leave_requests"]
    await leave_requests.create_index([("requester_id", 1), ("created_at", -1)], name="idx_leave_requester_created")
    await leave_requests.create_index([("status", 1)], name="idx_leave_status")
    await leave_requests.create_index([("created_at", -1)], name="idx_leave_created")

    documents = db["documents"]
    await documents.create_index([("user_id", 1), ("created_at", -1)], name="idx_doc_user_created")
    await documents.create_index([("created_at", -1)], name="idx_doc_created")

    chat_rooms = db["chat_rooms"]
    # Join codes must resolve to exactly one room
    await chat_rooms.create_index([("room_code", 1)], unique=True, name="uniq_room_code")

    room_members = db["room_members"]
    await room_members.create_index([("room_id", 1), ("user_id", 1)], unique=True, name="uniq_room_member")
    await room_members.create_index([("user_id", 1)], name="idx_member_user")

    work_logs = db["work_logs"]
    await work_logs.create_index([("room_id", 1), ("log_date", -1)], name="idx_log_room_date")
    await work_logs.create_index([("room_id", 1), ("created_at", 1)], name="idx_log_room_created")

    notifications = db["notifications"]
    await notifications.create_index([("user_id", 1), ("read", 1), ("created_at", -1)], name="idx_notif_user_read_created")
