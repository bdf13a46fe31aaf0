# =============================================================================
# racf_core/server/app.py
# Thin remote user service (FastAPI)
# =============================================================================
"""
The remote user service the console talks to when it is online.

It shares the console's validation, normalization and uniqueness rules by
running the same LocalBackend over its own SQLite file, and it seeds the
default users once, exactly like a client does.

Routes (mounted under /api):
    GET    /health
    GET    /users
    POST   /users          201 | 400 | 409
    PUT    /users/{id}     200 | 400 | 404 | 409
    DELETE /users/{id}     204, also when the id is unknown
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from racf_core.errors import (
    DuplicateUserError,
    RACFAdminError,
    UserNotFoundError,
    UserValidationError,
)
from racf_core.logging import get_logger
from racf_core.models.user import CreateUserPayload, UpdateUserPayload
from racf_core.offline.backends import LocalBackend
from racf_core.offline.local_database import LocalDatabase
from racf_core.offline.seed_manager import SeedManager
from racf_core.offline.settings_store import SettingsStore

logger = get_logger(__name__)

INVALID_PAYLOAD_MESSAGE = "Invalid user payload"
UNEXPECTED_ERROR_MESSAGE = "Unexpected server error"


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def validation_error_handler(request: Request, exc: UserValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"message": INVALID_PAYLOAD_MESSAGE, "issues": exc.issues},
    )


async def duplicate_user_handler(request: Request, exc: DuplicateUserError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"message": exc.message})


async def not_found_handler(request: Request, exc: UserNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": "User not found"})


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else: log it, answer without internal detail."""
    if isinstance(exc, RACFAdminError):
        logger.error(f"[{exc.code}] {exc.message}", extra={"details": exc.details})
    else:
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": UNEXPECTED_ERROR_MESSAGE})


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise UserValidationError(
            INVALID_PAYLOAD_MESSAGE,
            issues=[{"message": "Body must be valid JSON", "path": ""}],
        ) from e


# =============================================================================
# APPLICATION
# =============================================================================

def create_app(
    database: Optional[LocalDatabase] = None,
    settings: Optional[SettingsStore] = None,
    data_dir: Path = Path("server_data"),
) -> FastAPI:
    """
    Build the user service.

    Args:
        database: Record store (defaults to ``<data_dir>/users.db``)
        settings: Holder of the server's seed flag (defaults to ``<data_dir>/settings.json``)
        data_dir: Directory for the default files
    """
    database = database or LocalDatabase(data_dir / "users.db")
    database.initialize()
    settings = settings or SettingsStore(data_dir / "settings.json")
    backend = LocalBackend(database, SeedManager(database, settings))

    router = APIRouter()

    @router.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @router.get("/users")
    async def list_users() -> JSONResponse:
        users = await run_in_threadpool(backend.list_users)
        return JSONResponse(content=[user.to_dict() for user in users])

    @router.post("/users")
    async def create_user(request: Request) -> JSONResponse:
        payload = CreateUserPayload.from_dict(await _json_body(request))
        user = await run_in_threadpool(backend.create_user, payload)
        return JSONResponse(status_code=201, content=user.to_dict())

    @router.put("/users/{record_id}")
    async def update_user(record_id: str, request: Request) -> JSONResponse:
        payload = UpdateUserPayload.from_dict(await _json_body(request))
        user = await run_in_threadpool(backend.update_user, record_id, payload)
        return JSONResponse(content=user.to_dict())

    @router.delete("/users/{record_id}", status_code=204)
    async def delete_user(record_id: str) -> Response:
        await run_in_threadpool(backend.delete_user, record_id)
        return Response(status_code=204)

    app = FastAPI(title="RACF User Service", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router, prefix="/api")

    app.add_exception_handler(UserValidationError, validation_error_handler)
    app.add_exception_handler(DuplicateUserError, duplicate_user_handler)
    app.add_exception_handler(UserNotFoundError, not_found_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    logger.info(f"User service ready, store at {database.db_path}")
    return app
