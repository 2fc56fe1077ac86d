"""Shared helpers for API blueprints."""
from __future__ import annotations

from typing import Any, Dict, Optional, Type, TypeVar

from flask import current_app, jsonify, request
from pydantic import BaseModel, ValidationError

from sitegate.app.errors import ApiValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

REQUIRED_ERROR_TYPES = {"missing", "string_too_short"}
REQUIRED_MESSAGE = "This field is required"


def ok(data: Any = None, message: Optional[str] = None, status: int = 200, **extra):
    body: Dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def fail(message: str, status: int = 400, **extra):
    body: Dict[str, Any] = {"success": False, "message": message}
    body.update({key: value for key, value in extra.items() if value is not None})
    return jsonify(body), status


def field_errors(exc: ValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "body"
        if error.get("type") in REQUIRED_ERROR_TYPES:
            errors.setdefault(field, REQUIRED_MESSAGE)
        else:
            errors.setdefault(field, error.get("msg", "Invalid value"))
    return errors


def parse_body(model: Type[ModelT], message: str = "Invalid request data") -> ModelT:
    """Validate the JSON body against ``model`` or raise :class:`ApiValidationError`."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ApiValidationError(message, {"body": "Expected a JSON object"})
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ApiValidationError(message, field_errors(exc)) from exc


def event_log():
    return current_app.extensions["event_log"]


def content():
    return current_app.extensions["content"]


def request_gate():
    return current_app.extensions["request_gate"]


def upload_store():
    return current_app.extensions["uploads"]


def client_context() -> Dict[str, Optional[str]]:
    return {"ip": request.remote_addr, "userAgent": request.headers.get("User-Agent")}


__all__ = [
    "client_context",
    "content",
    "event_log",
    "fail",
    "field_errors",
    "ok",
    "parse_body",
    "request_gate",
    "upload_store",
]
