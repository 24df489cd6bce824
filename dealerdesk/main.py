# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dealerdesk import __version__
from dealerdesk.config import settings
from dealerdesk.database import SessionLocal
from dealerdesk.exceptions import RBACError
from dealerdesk.services import auth_service
from dealerdesk.services.rbac_seed_service import seed_rbac_data

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    db = SessionLocal()
    try:
        if settings.seed_on_startup:
            logger.info("Seeding RBAC data...")
            seed_rbac_data(db)
        if settings.cleanup_sessions_on_startup:
            removed = auth_service.cleanup_expired_sessions(db)
            logger.info(f"Removed {removed} expired sessions")
    except Exception as e:
        logger.error(f"Error during startup: {e}")
        raise
    finally:
        db.close()

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    description="Resource-based access control for dealership management",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RBACError)
async def rbac_error_handler(request: Request, exc: RBACError) -> JSONResponse:
    """Render service errors with their status code."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


# Import and include API router after it's created
from dealerdesk.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
