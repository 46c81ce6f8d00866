"""JSON request/response helpers shared by the controllers."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from flask import jsonify, request

from ..core.exceptions import ValidationError
from ..core.messages import error_message
from .datetime_utils import parse_iso_date
from .serialization import to_json


def ok(data: Any = None, status: int = 200, message: Optional[str] = None):
    payload: dict[str, Any] = {"success": True, "data": to_json(data)}
    if message:
        payload["message"] = message
    return jsonify(payload), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError(error_message("bad_request"))
    return body


def body_date(body: dict, key: str) -> date:
    value = body.get(key)
    if not value:
        raise ValidationError(f"{key}: {error_message('required')}")
    return parse_iso_date(str(value))


def arg_date(name: str, default: date) -> date:
    value = request.args.get(name)
    return parse_iso_date(value) if value else default


def optional_int(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(error_message("must_be_number"))
