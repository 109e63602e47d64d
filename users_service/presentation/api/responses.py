"""Uniform response envelope shared by every endpoint."""

from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse


def success(
    data: Any = None,
    *,
    message: Optional[str] = None,
    count: Optional[int] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if count is not None:
        body["count"] = count
    return body


def failure(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "error": error}
    if message is not None:
        body["message"] = message
    return JSONResponse(status_code=status_code, content=body)
