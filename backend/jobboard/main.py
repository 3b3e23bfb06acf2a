"""
Job Board API - Main Application Entry Point

This module initializes the FastAPI application with:
- Database connection and schema initialization
- Background scheduler for the posting expiry sweep
- CORS middleware for frontend communication
- Prometheus metrics and uploaded document serving
- API router registration

Architecture:
    FastAPI App
    ├── Lifespan Management (startup/shutdown)
    ├── CORS Middleware (CORS_ORIGINS)
    ├── /metrics - Prometheus scrape endpoint
    ├── /storage/v1/object/public - Uploaded documents
    └── API Router
        ├── /auth - Sign-in codes, sessions, reviewer login
        ├── /jobs - Public listing, detail and applications
        ├── /submit - Phone lookup and posting submission
        ├── /poster - Dashboard, edits, questions, applicants
        ├── /review - Moderation queue
        └── /unsubscribe - Email preference links
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from jobboard.api import api_router
from jobboard.config import get_settings
from jobboard.database import init_db
from jobboard.middleware.metrics import setup_metrics
from jobboard.scheduler import start_scheduler, stop_scheduler
from jobboard.services.otp import close_otp_store
from jobboard.services.storage import PUBLIC_PREFIX

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle events.

    Startup:
        1. Initialize database tables
        2. Start the expiry sweep scheduler

    Shutdown:
        1. Stop the scheduler
        2. Close the sign-in code store connection
    """
    await init_db()
    start_scheduler()
    logger.info("Job board API started")
    yield
    stop_scheduler()
    await close_otp_store()


storage_root = Path(settings.storage_root)
storage_root.mkdir(parents=True, exist_ok=True)

app = FastAPI(
    title="Job Board API",
    description="Member job board: postings, applications and moderation",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_metrics(app)
app.mount(PUBLIC_PREFIX, StaticFiles(directory=str(storage_root)), name="storage")
app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
