"""Main entry point for the Town Hall application."""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from town_hall.api.v1 import (
    admin_router,
    questions_router,
    status_router,
    votes_router,
)
from town_hall.core.settings import settings
from town_hall.services.errors import BackendFailure, TownHallError

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Town Hall API",
    description="Submit questions, vote on them, and get a daily digest",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(questions_router, prefix="/v1")
app.include_router(votes_router, prefix="/v1")
app.include_router(status_router, prefix="/v1")
app.include_router(admin_router, prefix="/v1")


def _status_response(status_code: int) -> JSONResponse:
    # Callers only ever see the generic status phrase.
    return JSONResponse(
        status_code=status_code,
        content={"detail": HTTPStatus(status_code).phrase},
    )


@app.exception_handler(TownHallError)
async def town_hall_error_handler(request: Request, exc: TownHallError) -> JSONResponse:
    if isinstance(exc, BackendFailure):
        logger.error(
            "Backend failure handling %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
    else:
        logger.debug("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return _status_response(exc.status_code)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Database error handling %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return _status_response(HTTPStatus.INTERNAL_SERVER_ERROR)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return _status_response(HTTPStatus.BAD_REQUEST)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("town_hall.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
