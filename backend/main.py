# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Build the engine and session factory for this app instance (no global DB
  handle) and create the tables on startup when configured to.
* Register CORS and request-logging middleware.
* Mount the feature routers (tags, likes, keygen).
* Render every ``TagVaultError`` as ``{"detail": …}`` with its status code.
* Expose a /health endpoint for container liveness checks.

Run with:
    uvicorn main:app --app-dir backend
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from core.config import Settings, settings as default_settings
from core.errors import InvalidInputError, TagVaultError, UnsupportedMethodError
from core.logger import logger
from core.security import get_client_ip
from database import build_engine, build_session_factory, create_tables
from keygen.router import router as keygen_router
from likes.router import router as likes_router
from tags.router import router as tags_router


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# The query string is NOT logged – it carries plaintext targets and tags –
# and neither is the Authorization header.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            get_client_ip(request),
            response.status_code,
            elapsed_ms,
        )
        return response


# ---------------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------------


def _error_response(exc: TagVaultError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def _tagvault_error_handler(request: Request, exc: TagVaultError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.__class__.__name__)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.detail)
    return _error_response(exc)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Only field locations go to the client; submitted values may be plaintext
    fields = ", ".join(".".join(str(p) for p in err["loc"][1:]) or "body" for err in exc.errors())
    return await _tagvault_error_handler(request, InvalidInputError(f"Invalid input: {fields}"))


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return await _tagvault_error_handler(request, UnsupportedMethodError())
    return await http_exception_handler(request, exc)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    engine = build_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "tagvault starting up | cipher=%s derivation=%s",
            settings.cipher_mode,
            settings.key_derivation,
        )
        if settings.auto_create_tables:
            create_tables(engine)
        yield
        engine.dispose()
        logger.info("tagvault shutting down")

    app = FastAPI(title="tagvault", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # -- CORS ---------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=[settings.credential_header, "Content-Type"],
    )
    app.add_middleware(_RequestLogMiddleware)

    # -- Errors -------------------------------------------------------------
    app.add_exception_handler(TagVaultError, _tagvault_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)

    # -- Routers ------------------------------------------------------------
    app.include_router(tags_router)
    app.include_router(likes_router)
    app.include_router(keygen_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
