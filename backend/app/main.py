"""FastAPI application entry point.

This module wires together the API routers, configures middleware and
startup tasks, and exposes the ASGI application object used by the
server.  Service errors raised anywhere below the routes are translated
into JSON responses here.
"""

import os
import logging
import asyncio
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from app.routes import (
    auth,
    children,
    donations,
    departments,
    stats,
    gift_ideas,
    settings,
    backups,
)
from app.database import create_db_and_tables, async_session
from app.crud import get_settings
from app.backups import create_backup
from app.errors import GENERIC_FAILURE_MESSAGE, ServiceError

# Basic logging configuration.  The log level can be controlled with an
# environment variable so deployments can adjust verbosity without code
# changes.
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, LOG_LEVEL))
logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
DAILY_BACKUP_ENABLED = os.getenv("DAILY_BACKUP_ENABLED", "true").lower() == "true"

app = FastAPI(title="Giving Tree API")

# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_timeout(request: Request, call_next):
    """Give up on requests that exceed the configured time budget."""
    try:
        return await asyncio.wait_for(call_next(request), REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.error(
            "Request %s %s timed out after %ss",
            request.method,
            request.url.path,
            REQUEST_TIMEOUT_SECONDS,
        )
        return JSONResponse(
            status_code=503,
            content={
                "detail": {"code": "request_timeout", "message": GENERIC_FAILURE_MESSAGE}
            },
        )


@app.on_event("startup")
async def on_startup():
    """Initialize the database and kick off background tasks."""

    await create_db_and_tables()
    async with async_session() as session:
        # Make sure the settings row exists before the first request.
        await get_settings(session)
    if DAILY_BACKUP_ENABLED:
        asyncio.create_task(daily_backup_task())


async def daily_backup_task():
    """Background coroutine that backs up the donation table once per day."""

    logger.info("Starting daily backup task")
    while True:
        try:
            async with async_session() as session:
                await create_backup(session)
        except Exception as exc:
            logger.exception("Daily backup failed: %s", exc)
        # Sleep for roughly one day before running again.
        await asyncio.sleep(60 * 60 * 24)


app.include_router(auth.router)
app.include_router(children.router)
app.include_router(donations.router)
app.include_router(departments.router)
app.include_router(stats.router)
app.include_router(gift_ideas.router)
app.include_router(settings.router)
app.include_router(backups.router)


@app.get("/")
async def read_root():
    async with async_session() as session:
        s = await get_settings(session)
        name = s.site_name
    return {"message": f"Welcome to {name} API"}


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Report a rejected request with its code and user-facing message."""
    if exc.status_code >= 500:
        logger.error("Request %s failed: %s", request.url.path, exc.code)
    else:
        logger.info("Request %s rejected: %s", request.url.path, exc.code)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Database failures are worth retrying; keep the details in the log."""
    logger.exception("Database error during request %s", request.url.path)
    return JSONResponse(
        status_code=503,
        content={"detail": {"code": "try_again", "message": GENERIC_FAILURE_MESSAGE}},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler that logs the stack trace once."""
    logger.exception("Unhandled error during request %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "code": "internal_server_error",
            "message": "An unexpected error occurred",
        },
    )
