"""FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import auth, dashboard, health, locations
from .config import settings
from .errors import AuthError, RemoteStoreError, ValidationError

logger = logging.getLogger(__name__)


def _remote_store_status(exc: RemoteStoreError) -> int:
    if exc.not_found:
        return status.HTTP_404_NOT_FOUND
    if exc.permission_denied:
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_502_BAD_GATEWAY


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(AuthError)
    def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
        code = status.HTTP_409_CONFLICT if exc.code == status.HTTP_409_CONFLICT else status.HTTP_401_UNAUTHORIZED
        return JSONResponse(status_code=code, content={"detail": exc.message})

    @app.exception_handler(ValidationError)
    def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message, "fields": list(exc.fields)},
        )

    @app.exception_handler(RemoteStoreError)
    def handle_remote_store_error(request: Request, exc: RemoteStoreError) -> JSONResponse:
        code = _remote_store_status(exc)
        if code == status.HTTP_502_BAD_GATEWAY:
            logger.error(f"Document store failure on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=code, content={"detail": exc.message})

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(dashboard.router, prefix=settings.api_prefix)
    app.include_router(locations.router, prefix=settings.api_prefix)
    return app


app = create_app()
