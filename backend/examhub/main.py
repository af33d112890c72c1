"""ExamHub API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to the Failure envelope
    - CORS configured from settings (not hardcoded)
    - Remote table client opened on startup and closed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Security headers written by the envelope writers (so the catch-all 500
      built outside the middleware stack carries them) and by a small HTTP
      middleware for every other response
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from examhub.api.error_handlers import register_error_handlers
from examhub.api.responses import SECURITY_HEADERS
from examhub.api.routes import (
    auth, enrollments, exams, health, subjects, topics, translations, users,
)
from examhub.config import get_settings
from examhub.infrastructure.observability import setup_logging
from examhub.infrastructure.remote_tables import close_remote_tables, init_remote_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_remote_tables(
        settings.supabase_url,
        settings.supabase_key,
        timeout_seconds=settings.supabase_timeout_seconds,
    )
    logger.info(f"ExamHub API started ({settings.environment})")
    yield
    await close_remote_tables()
    logger.info("ExamHub API shutting down")


app = FastAPI(title="ExamHub API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


register_error_handlers(app)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(exams.router)
app.include_router(subjects.router)
app.include_router(topics.router)
app.include_router(enrollments.router)
app.include_router(translations.router)
