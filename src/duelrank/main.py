# src/duelrank/main.py

"""Main FastAPI application for DuelRank."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .api import match, player
from .db.session import engine
from .exceptions import (
    ConflictError,
    PersistenceError,
    ResourceNotFoundError,
    ValidationError,
)
from .middleware.logging import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Dispose of pooled connections when the application stops."""
    yield
    await engine.dispose()


app = FastAPI(title="DuelRank API", lifespan=lifespan)
app.add_middleware(RequestLoggingMiddleware)


def error_response(status_code: int, detail: str, error_type: str) -> JSONResponse:
    """Uniform error body shared by every handler below."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "error_type": error_type},
    )


# =============================================================================
# Domain errors raised by routes and the match service
# =============================================================================


@app.exception_handler(ValidationError)
async def validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """Malformed or self-contradictory submission -> 400."""
    logger.warning("Rejected submission: %s", exc.message, extra=exc.details)
    return error_response(400, exc.message, type(exc).__name__)


@app.exception_handler(ResourceNotFoundError)
async def resource_not_found_handler(
    request: Request, exc: ResourceNotFoundError
) -> JSONResponse:
    """Unknown player or match -> 404."""
    logger.warning("Resource not found: %s", exc.message, extra=exc.details)
    return error_response(404, exc.message, type(exc).__name__)


@app.exception_handler(ConflictError)
async def conflict_error_handler(
    request: Request, exc: ConflictError
) -> JSONResponse:
    """Write that clashes with existing data -> 409."""
    logger.info("Conflict: %s", exc.message, extra=exc.details)
    return error_response(409, exc.message, type(exc).__name__)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(
    request: Request, exc: PersistenceError
) -> JSONResponse:
    """Rolled back store failure -> 500; the client may retry."""
    logger.error("Persistence error: %s", exc.message, extra=exc.details)
    return error_response(
        500, "Failed to record match. Please try again.", type(exc).__name__
    )


# =============================================================================
# Store errors that escaped a route
# =============================================================================


@app.exception_handler(IntegrityError)
async def integrity_error_handler(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    """Unique index hit by a concurrent insert -> 409."""
    logger.warning("Database integrity error: %s", exc.orig)
    return error_response(
        409,
        "Resource already exists with given unique field(s)",
        type(exc).__name__,
    )


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_error_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Any other database failure on a read path -> 500."""
    logger.error("Database error: %s", exc, exc_info=exc)
    return error_response(
        500, "An internal database error occurred", type(exc).__name__
    )


# Include routers into the main application
app.include_router(player.router)
app.include_router(match.router)


@app.get("/", tags=["Root"])
async def read_root() -> dict[str, str]:
    """Provides a welcome message."""
    return {"message": "Welcome to the DuelRank API"}


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
