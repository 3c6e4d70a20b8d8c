import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from focusflow.api import activity, auth, focus_sessions, sandclock, tasks
from focusflow.config import get_settings
from focusflow.core.errors import (
    BindingConflict,
    StorageUnavailable,
    TaskAlreadyCompleted,
    TaskNotFound,
)
from focusflow.database import init_db

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s: %(name)s: %(message)s")
logging.getLogger("focusflow").setLevel(settings.log_level.upper())
logging.getLogger("focusflow.services").setLevel(logging.INFO)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="FocusFlow", description="Gamified productivity tracker backend", version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(tasks.router)
app.include_router(sandclock.router)
app.include_router(focus_sessions.router)
app.include_router(activity.router)


@app.exception_handler(StorageUnavailable)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailable):
    logger.error(f"[Storage] {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage temporarily unavailable, please retry"},
        headers={"Retry-After": "1"},
    )


@app.exception_handler(TaskNotFound)
async def task_not_found_handler(request: Request, exc: TaskNotFound):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(BindingConflict)
@app.exception_handler(TaskAlreadyCompleted)
async def binding_conflict_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    init_db()


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
