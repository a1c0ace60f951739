"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from hotelbook.infra.db import PersistenceFailure
from hotelbook.observability.correlation import (
    CORRELATION_ID_HEADER,
    accept_inbound,
    correlation_scope,
)
from hotelbook.observability.logging import get_logger, log_event

from .routers import public
from .routes import auth, bookings, frontdesk, reservations, rooms

logger = get_logger(__name__)

# Seconds a client should wait before retrying after a storage failure
RETRY_AFTER_SECONDS = 1


def create_app() -> FastAPI:
    """Create the FastAPI app with all routers mounted."""
    app = FastAPI(
        title="Hotelbook",
        docs_url=None,
        redoc_url=None,
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = accept_inbound(request.headers.get(CORRELATION_ID_HEADER))
        with correlation_scope(cid):
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response

    @app.exception_handler(PersistenceFailure)
    async def persistence_failure_handler(request: Request, exc: PersistenceFailure) -> JSONResponse:
        log_event(
            logger,
            "persistence failure",
            level=logging.ERROR,
            path=request.url.path,
            method=request.method,
            error=type(exc.__cause__).__name__ if exc.__cause__ else None,
            retryable=exc.retryable,
        )
        headers = {"Retry-After": str(RETRY_AFTER_SECONDS)} if exc.retryable else {}
        return JSONResponse(
            status_code=503,
            content={"detail": "Service temporarily unavailable"},
            headers=headers,
        )

    app.include_router(public.router)
    app.include_router(auth.router)
    app.include_router(bookings.router)
    app.include_router(rooms.router)
    app.include_router(reservations.router)
    app.include_router(frontdesk.router)

    return app
