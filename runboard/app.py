"""FastAPI application factory and configuration."""

from __future__ import annotations

import logging
import socket
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import register_routes
from .core import ALLOWED_CORS_ORIGINS, HOST, IS_PRODUCTION, LOG_LEVEL, PORT, configure_logging
from .core.errors import RateLimited, ServiceError, StorageError
from .services import BackupState, Services

logger = logging.getLogger(__name__)


def _lan_address() -> str:
    try:
        return socket.gethostbyname(socket.gethostname())
    except OSError:
        return "localhost"


async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if isinstance(exc, StorageError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = None
    if isinstance(exc, RateLimited):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        {"success": False, "message": exc.message},
        status_code=exc.status_code,
        headers=headers,
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(
        {"success": False, "message": f"Invalid request: {detail}"},
        status_code=400,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(LOG_LEVEL)
    services: Services = app.state.services
    if services.backup_autostart:
        await services.backups.start()
    if not IS_PRODUCTION:
        logger.info("Leaderboard running at http://localhost:%s", PORT)
        logger.info("Leaderboard running at http://%s:%s (local network)", _lan_address(), PORT)
    yield
    if services.backups.state is BackupState.RUNNING:
        await services.backups.stop()
    services.database.close()


def create_app(services: Optional[Services] = None) -> FastAPI:
    app = FastAPI(title="Runboard API", version="1.0.0", lifespan=lifespan)
    app.state.services = services or Services.from_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Retry-After"],
    )
    app.add_exception_handler(ServiceError, _service_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    register_routes(app)
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("runboard.app:create_app", factory=True, host=HOST, port=PORT)
