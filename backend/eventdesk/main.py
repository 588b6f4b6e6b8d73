"""FastAPI application entry point."""
import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from eventdesk.config import settings
from eventdesk.database import Base, engine
from eventdesk.errors import InternalError, ValidationError, format_validation_errors
from eventdesk.logging_config import setup_logging

# Import routers
from eventdesk.routers import admin, auth, discussions, events, invitations, notifications

# Import all models so Base.metadata knows about them
from eventdesk.models.user import User                  # noqa: F401
from eventdesk.models.event import Event                # noqa: F401
from eventdesk.models.invitation import Invitation      # noqa: F401
from eventdesk.models.comment import Comment            # noqa: F401
from eventdesk.models.notification import Notification  # noqa: F401

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="EventDesk",
    description="Event management API — organizers publish events, invite attendees, and run discussions",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported as 400 like service-level validation."""
    error = ValidationError(format_validation_errors(exc.errors()))
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


@app.exception_handler(SQLAlchemyError)
async def handle_store_error(request: Request, exc: SQLAlchemyError):
    """Translate unexpected store failures into a generic 500."""
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(discussions.router, prefix="/api/events", tags=["Discussions"])
app.include_router(invitations.router, prefix="/api", tags=["Invitations"])
app.include_router(notifications.router, prefix="/api", tags=["Notifications"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
