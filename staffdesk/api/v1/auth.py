from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status

from staffdesk.core.security import create_jwt, get_current_user, verify_password
from staffdesk.db.mongo import get_store
from staffdesk.db.store import RecordStore
from staffdesk.schemas.auth_schema import AuthResponse, LoginIn, SessionContext, UserIn, UserOut
from staffdesk.services.account_service import create_account

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/roles", response_model=list[str])
async def list_roles(store: RecordStore = Depends(get_store)):
    # Public: the sign-up form needs it before there is a session
    return sorted({r["name"] for r in await store.select("roles")})


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: UserIn, store: RecordStore = Depends(get_store)):
    user = await create_account(
        store,
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        role=payload.role,
    )
    token = create_jwt({"sub": user["id"], "role": user["role"]})
    return {"user": user, "token": token}


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginIn, store: RecordStore = Depends(get_store)):
    user = await store.select_one("users", {"email": payload.email.lower()})
    if not user or not verify_password(payload.password, user.get("password_hash", "")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not user.get("is_active", True):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account disabled")
    profile = await store.select_one("profiles", {"email": user["email"]}) or {}
    token = create_jwt({"sub": user["id"], "role": user.get("role", "employee")})
    # Update last_login
    await store.update("users", {"last_login": datetime.utcnow()}, {"email": user["email"]})
    user_out = {
        "id": user["id"],
        "full_name": profile.get("full_name"),
        "email": user["email"],
        "role": user.get("role", "employee"),
    }
    return {"user": user_out, "token": token}


@router.get("/me", response_model=UserOut)
async def get_me(current_user: SessionContext = Depends(get_current_user)):
    return {
        "id": current_user.user_id,
        "full_name": current_user.full_name,
        "email": current_user.email,
        "role": current_user.role,
    }
