from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pymongo import MongoClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging, request_id_var
from ..domain.errors import ServiceError
from ..domain.ports.persistence import UserRepository
from ..infrastructure.persistence.mongo import MongoUserRepository
from ..presentation.api.responses import failure
from ..presentation.api.routers import admin as admin_router
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import users as users_router

logger = logging.getLogger(__name__)

SERVICE_NAME = "users-service"
REQUEST_ID_HEADER = "X-Request-ID"
SLOW_REQUEST_MS = 1000
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


def create_application(
    settings: Optional[Settings] = None,
    repository: Optional[UserRepository] = None,
) -> FastAPI:
    """Build the ASGI app.

    Settings are read from the environment when not given, so a missing
    ``JWT_SECRET`` stops the process here, before any request is served.
    """
    settings = settings or Settings.from_env()

    app = FastAPI(title="Users Service", lifespan=_create_lifespan(settings, repository))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    _register_request_context(app, settings)
    _register_exception_handlers(app)

    app.include_router(auth_router.router)
    app.include_router(users_router.router)
    app.include_router(admin_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {
            "success": True,
            "status": "OK",
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
            "service": SERVICE_NAME,
        }

    return app


def _create_lifespan(settings: Settings, repository: Optional[UserRepository]):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        persistence = repository
        if persistence is None:
            client: MongoClient = MongoClient(settings.mongodb_uri, tz_aware=False)
            persistence = MongoUserRepository(client, settings.mongodb_database)
        container = ApplicationContainer.build(settings, persistence)
        container.admin_service.ensure_default_admin(
            settings.admin_default_email, settings.admin_default_password
        )

        app.state.container = container  # type: ignore[attr-defined]
        logger.info("%s started (environment=%s)", SERVICE_NAME, settings.environment)

        try:
            yield
        finally:
            persistence.close()

    return lifespan


def _register_request_context(app: FastAPI, settings: Settings) -> None:
    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = str(uuid.uuid4())
        token = request_id_var.set(request_id)
        request.state.request_id = request_id
        started = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.exception("Unhandled error on %s %s", request.method, request.url.path)
                response = failure(
                    500,
                    "Internal server error",
                    message=str(exc) if settings.is_development else None,
                )
            duration_ms = (time.perf_counter() - started) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id
            for name, value in SECURITY_HEADERS.items():
                response.headers.setdefault(name, value)
            logger.log(
                logging.WARNING if duration_ms > SLOW_REQUEST_MS else logging.DEBUG,
                "%s %s %s %.1fms",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )
            return response
        finally:
            request_id_var.reset(token)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return failure(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return failure(400, _describe_validation_errors(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return failure(404, "Route not found")
        return failure(exc.status_code, str(exc.detail))


def _describe_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return ", ".join(messages) or "Invalid request"
