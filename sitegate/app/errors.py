"""JSON error handlers; every error leaves the API in the response envelope."""

from __future__ import annotations

import traceback
from typing import Dict, Optional

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from sitegate.utils.logs import logger

DEFAULT_MESSAGES = {
    400: "Bad request",
    401: "Access token required",
    403: "Forbidden",
    404: "Not found",
    405: "Method not allowed",
    413: "File too large",
    429: "Too many requests",
    500: "Internal server error",
}


class ApiValidationError(Exception):
    """Request payload rejected; answered with 400 and a per-field ``errors`` map."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


def error_response(status: int, message: Optional[str] = None, **extra):
    body = {"success": False, "message": message or DEFAULT_MESSAGES.get(status, "Error")}
    body.update({key: value for key, value in extra.items() if value is not None})
    return jsonify(body), status


def _handle_validation(error: ApiValidationError):
    return error_response(400, error.message, errors=error.errors or None)


def _handle_http(error: HTTPException):
    status = error.code or 500
    if status >= 500:
        logger.error("Erro HTTP %s em %s %s", status, request.method, request.path)
    return error_response(status, DEFAULT_MESSAGES.get(status, error.name))


def _handle_unexpected(error: Exception):
    logger.exception("Erro inesperado em %s %s", request.method, request.path)
    detail = None
    if current_app.config.get("EXPOSE_ERRORS"):
        detail = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return error_response(500, error=str(error) if detail else None, traceback=detail)


def register_error_handlers(app: Flask) -> None:
    app.register_error_handler(ApiValidationError, _handle_validation)
    app.register_error_handler(HTTPException, _handle_http)
    app.register_error_handler(Exception, _handle_unexpected)


__all__ = ["ApiValidationError", "error_response", "register_error_handlers"]
