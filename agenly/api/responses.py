"""Response envelope shared by every /api route.

Success: ``{"success": true, "data": ..., "message"?: ...}``
Failure: ``{"success": false, "error": ..., "message"?: ...}``
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def ok(data: Any = None, message: str | None = None, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    body.update(extra)
    return body


def fail(
    status_code: int,
    error: str,
    message: str | None = None,
    **extra: Any,
) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "error": error}
    if message:
        body["message"] = message
    body.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
