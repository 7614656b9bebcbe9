"""Uniform response envelope shared by every endpoint."""

from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

_MISSING: Any = object()


class Envelope(BaseModel):
    success: bool
    message: str
    data: Any = None
    error: str | None = None


def envelope(
    status_code: int,
    message: str,
    *,
    success: bool = True,
    data: Any = _MISSING,
    error: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build ``{success, message, data?, error?}``; unset keys are left out."""
    content: dict[str, Any] = {"success": success, "message": message}
    if data is not _MISSING:
        content["data"] = jsonable_encoder(data)
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def failure(
    status_code: int,
    message: str,
    *,
    error: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return envelope(status_code, message, success=False, error=error, headers=headers)
