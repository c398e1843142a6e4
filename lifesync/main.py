"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

from lifesync.api.auth import router as auth_router
from lifesync.api.deps import (
    get_dispatcher,
    get_recording_manager,
    get_reminder_store,
)
from lifesync.api.notifications import router as notifications_router
from lifesync.api.preferences import router as preferences_router
from lifesync.api.recordings import router as recordings_router
from lifesync.api.reminders import router as reminders_router
from lifesync.api.tips import router as tips_router
from lifesync.config import get_settings
from lifesync.db.session import engine
from lifesync.workers.alarm_scanner import AlarmScanner
from lifesync.workers.runner import ScannerRunner, configure_worker_logging

settings = get_settings()
configure_worker_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, seed demo data and run the alarm scanner."""
    settings.validate()

    # Import models to register them with SQLModel
    from lifesync.models import Preference  # noqa: F401
    SQLModel.metadata.create_all(engine)

    store = get_reminder_store()
    if settings.SEED_DEMO_REMINDERS and len(store) == 0:
        store.seed_demo()
        logger.info("Seeded demo reminders", extra={"count": len(store)})

    runner = ScannerRunner(
        AlarmScanner(store, get_dispatcher(), window_seconds=settings.ALARM_WINDOW_SECONDS),
        interval_seconds=settings.ALARM_SCAN_INTERVAL_SECONDS,
    )
    app.state.scanner = runner
    runner.start()
    try:
        yield
    finally:
        await runner.stop()
        get_recording_manager().cancel_all()


app = FastAPI(
    title="LifeSync Reminder API",
    description="Reminders with natural-language intake and overdue alarms",
    version="1.0.0",
    lifespan=lifespan,
)

# Remove duplicates and empty strings
cors_origins = [
    origin for origin in {settings.FRONTEND_URL, "http://localhost:3000", "http://localhost:5173"}
    if origin
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth_router)
app.include_router(reminders_router)
app.include_router(tips_router)
app.include_router(recordings_router)
app.include_router(preferences_router)
app.include_router(notifications_router)


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
