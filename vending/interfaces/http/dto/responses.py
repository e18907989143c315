from __future__ import annotations

from typing import Any, Literal

from flask import Response, jsonify
from pydantic import BaseModel


class ResponseDTO(BaseModel):
    status: Literal["success", "fail", "error"] = "success"
    message: str | None = None
    data: Any = None


def success(message: str | None = None, data: Any = None) -> Response:
    """JSON success envelope; empty ``message``/``data`` are left out."""

    payload = ResponseDTO(message=message, data=data).model_dump(mode="json", exclude_none=True)
    return jsonify(payload)
