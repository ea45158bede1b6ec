from __future__ import annotations

import asyncio
import sys
from datetime import datetime, timedelta
from pathlib import Path

from bson import ObjectId

# Allow running as `python scripts/seed_mongo.py` from the repo root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from staffdesk.db.mongo import get_mongo_db, close_mongo_client  # noqa: E402
from staffdesk.db.mongo_indexes import ensure_indexes  # noqa: E402
from staffdesk.db.seed import ensure_default_roles  # noqa: E402
from staffdesk.db.store import RecordStore  # noqa: E402
from staffdesk.core.security import hash_password  # noqa: E402


DEMO_USERS = [
    # (stable id, email, password, full name, role)
    ("6562a0f0a0a0a0a0a0a0a0a1", "admin@staffdesk.example.com", "admin12345", "Ada Admin", "admin"),
    ("6562a0f0a0a0a0a0a0a0a0a2", "hr@staffdesk.example.com", "hr12345", "Harper Reyes", "hr"),
    ("6562a0f0a0a0a0a0a0a0a0a3", "alice@staffdesk.example.com", "alice12345", "Alice Smith", "employee"),
]


async def seed_users(db):
    now = datetime.utcnow()
    ids = {}
    for uid, email, password, full_name, role in DEMO_USERS:
        oid = ObjectId(uid)
        await db["users"].update_one(
            {"_id": oid},
            {"$setOnInsert": {
                "email": email,
                "password_hash": hash_password(password),
                "role": role,
                "is_active": True,
                "last_login": None,
                "created_at": now,
                "updated_at": now,
            }},
            upsert=True,
        )
        await db["profiles"].update_one(
            {"_id": oid},
            {"$setOnInsert": {
                "email": email,
                "full_name": full_name,
                "phone": None,
                "date_of_birth": None,
                "profile_pic_url": None,
                "created_at": now,
                "updated_at": now,
            }},
            upsert=True,
        )
        ids[role] = oid
    return ids


async def seed_leave_requests(db, ids):
    now = datetime.utcnow()
    today = datetime(now.year, now.month, now.day)
    leaves = [
        {
            "_id": ObjectId("6562a0f0a0a0a0a0a0a0a0c1"),
            "requester_id": ids["employee"],
            "leave_type": "full-day",
            "start_date": today + timedelta(days=7),
            "end_date": today + timedelta(days=9),
            "reason": "Family trip",
            "extra_info": None,
            "status": "pending",
            "reviewed_by": None,
            "reviewed_at": None,
            "created_at": now,
        },
        {
            "_id": ObjectId("6562a0f0a0a0a0a0a0a0a0c2"),
            "requester_id": ids["employee"],
            "leave_type": "early-out",
            "start_date": today,
            "end_date": today,
            "reason": "Doctor appointment",
            "extra_info": "Early out at 15:00",
            "status": "approved",
            "reviewed_by": ids["hr"],
            "reviewed_at": now,
            "created_at": now - timedelta(days=1),
        },
    ]
    for leave in leaves:
        await db["leave_requests"].update_one({"_id": leave["_id"]}, {"$setOnInsert": leave}, upsert=True)


async def seed_rooms(db, ids):
    now = datetime.utcnow()
    room_id = ObjectId("6562a0f0a0a0a0a0a0a0a0e1")
    await db["chat_rooms"].update_one(
        {"_id": room_id},
        {"$setOnInsert": {"name": "Daily Standup", "room_code": "STAND1", "created_by": ids["hr"], "created_at": now}},
        upsert=True,
    )
    for user_id in ids.values():
        await db["room_members"].update_one(
            {"room_id": room_id, "user_id": user_id},
            {"$setOnInsert": {"room_id": room_id, "user_id": user_id, "joined_at": now}},
            upsert=True,
        )


async def main():
    db = get_mongo_db()
    # Ensure indexes before inserting
    await ensure_indexes(db)
    await ensure_default_roles(RecordStore(db))

    ids = await seed_users(db)
    await seed_leave_requests(db, ids)
    await seed_rooms(db, ids)

    print("MongoDB seed completed.")
    close_mongo_client()


if __name__ == "__main__":
    asyncio.run(main())
