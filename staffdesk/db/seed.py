from datetime import datetime

from staffdesk.db.store import RecordStore


DEFAULT_ROLES = ("admin", "hr", "employee")


async def ensure_default_roles(store: RecordStore) -> None:
    """Insert the built-in roles that are missing (idempotent)."""
    existing = {r["name"] for r in await store.select("roles")}
    now = datetime.utcnow()
    for name in DEFAULT_ROLES:
        if name not in existing:
            await store.create("roles", {"name": name, "created_at": now})
