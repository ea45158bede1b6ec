import hashlib
from datetime import datetime, timedelta
from typing import Optional

import jwt
from bson import ObjectId
from fastapi import Depends, Header, HTTPException, status

from staffdesk.core.config import settings
from staffdesk.db.mongo import get_store
from staffdesk.db.store import RecordStore
from staffdesk.schemas.auth_schema import SessionContext


ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(password: str, hashed: str) -> bool:
    return hash_password(password) == hashed


def create_jwt(payload: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = payload.copy()
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.JWT_EXPIRE_HOURS)
    exp = datetime.utcnow() + expires_delta
    to_encode.update({"exp": exp})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_jwt(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.PyJWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc


async def get_current_user(
    authorization: Optional[str] = Header(None),
    store: RecordStore = Depends(get_store),
) -> SessionContext:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    payload = decode_jwt(token)
    uid = payload.get("sub")
    if not uid or not ObjectId.is_valid(uid):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    user = await store.select_one("users", {"_id": ObjectId(uid)})
    if not user or not user.get("is_active", True):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    profile = await store.select_one("profiles", {"_id": ObjectId(uid)})
    return SessionContext(
        user_id=user["id"],
        email=user.get("email", ""),
        full_name=(profile or {}).get("full_name"),
        role=user.get("role", "employee"),
    )
