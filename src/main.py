"""FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from src.api import ai, auth, tasks, users
from src.api.dependencies import close_ai_services
from src.api.errors import register_error_handling
from src.config import get_settings
from src.database import get_db
from src.services.metrics import error_tracker, performance_monitor

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"
STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(f"SprintSync API starting (environment={settings.environment})")
    yield
    await close_ai_services()
    logger.info("SprintSync API shutting down")


app = FastAPI(
    title="SprintSync API",
    description="Task tracking with role-based access and AI-assisted planning",
    version=VERSION,
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:3001",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_error_handling(app)

# Register routers
app.include_router(auth.router)
app.include_router(tasks.router)
app.include_router(users.router)
app.include_router(ai.router)


@app.get("/health")
def health_check(db: Annotated[Session, Depends(get_db)]):
    """Health check endpoint: database connectivity plus in-process metrics."""
    start = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "timestamp": datetime.now(UTC).isoformat(),
                "database": "unreachable",
                "latency": f"{latency_ms:.0f}ms",
            },
        )

    latency_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Health check completed in {latency_ms:.0f}ms")
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "database": "connected",
        "latency": f"{latency_ms:.0f}ms",
        "metrics": {
            "performance": performance_monitor.summary(),
            "errors": error_tracker.summary(),
        },
        "environment": settings.environment,
        "version": VERSION,
    }
