"""Dependency injection for FastAPI endpoints"""

import uuid
from typing import Iterator

from fastapi import HTTPException, Request

from lending_club.domain.result import SysError, SysResult
from lending_club.domain.system import System

# SysError -> HTTP status
STATUS_FOR_ERROR = {
    SysError.ALREADY_EXISTS: 409,
    SysError.DOESNT_EXIST: 404,
    SysError.CANNOT_UPDATE: 422,
    SysError.CANNOT_DELETE: 404,
}


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_system(request: Request) -> Iterator[System]:
    """
    Provide the app's System instance under its exclusive lock.

    Sync endpoints run on a threadpool and System has no internal locking,
    so every request holds the lock for its whole duration.
    """
    with request.app.state.system_lock:
        yield request.app.state.system


def parse_id(raw: str, what: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {what} ID format")


def raise_for_result(result: SysResult, detail: str) -> None:
    """Translate a failed SysResult into an HTTPException"""
    if result.ok:
        return
    raise HTTPException(
        status_code=STATUS_FOR_ERROR[result.error],
        detail={"error": result.error.value, "message": detail},
    )
