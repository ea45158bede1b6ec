import logging
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from staffdesk.core.config import settings
from staffdesk.core.errors import StaffDeskError, StoreError
from staffdesk.api.v1.auth import router as auth_router
from staffdesk.api.v1.employees import router as employees_router
from staffdesk.api.v1.leaves import router as leaves_router
from staffdesk.api.v1.documents import router as documents_router
from staffdesk.api.v1.rooms import router as rooms_router
from staffdesk.api.v1.notifications import router as notifications_router
from staffdesk.api.v1.dashboard import router as dashboard_router
from staffdesk.api.v1.me import router as me_router
from staffdesk.db.mongo import get_mongo_client, get_mongo_db, close_mongo_client
from staffdesk.db.mongo_indexes import ensure_indexes
from staffdesk.db.seed import ensure_default_roles
from staffdesk.db.store import RecordStore

logger = logging.getLogger("uvicorn.error")
logger.setLevel(settings.LOG_LEVEL)

app = FastAPI(title="StaffDesk Backend")

# Build CORS allowlist from local dev + configured origins
_base_origins = {
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
}
if settings.FRONTEND_BASE_URL:
    _base_origins.add(settings.FRONTEND_BASE_URL)
for o in settings.ALLOWED_ORIGINS:
    _base_origins.add(o)
# Normalize by stripping trailing slashes to match Origin header format
_allowed_origins = sorted({o.rstrip('/') for o in _base_origins if o})

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_origin_regex=r"^http(s)?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StaffDeskError)
async def staffdesk_error_handler(request: Request, exc: StaffDeskError):
    if isinstance(exc, StoreError):
        logger.warning("%s %s failed: %s (%r)", request.method, request.url.path, exc.detail, exc.__cause__)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/")
def read_root():
    return {"message": "Welcome to StaffDesk Backend"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


# Mount API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(employees_router, prefix="/api/v1")
app.include_router(leaves_router, prefix="/api/v1")
app.include_router(documents_router, prefix="/api/v1")
app.include_router(rooms_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(dashboard_router, prefix="/api/v1")
app.include_router(me_router, prefix="/api/v1")

# Uploaded documents and profile pictures
app.mount("/files", StaticFiles(directory=settings.STORAGE_DIR, check_dir=False), name="files")


@app.on_event("startup")
async def on_startup():
    Path(settings.STORAGE_DIR).mkdir(parents=True, exist_ok=True)
    # Initialize Mongo client
    get_mongo_client()
    # Create required indexes and default roles (non-fatal on failure)
    try:
        await ensure_indexes()
        await ensure_default_roles(RecordStore(get_mongo_db()))
    except Exception as exc:
        logger.warning("Mongo initialization failed: %s", exc)


@app.on_event("shutdown")
async def on_shutdown():
    # Close Mongo client
    close_mongo_client()
