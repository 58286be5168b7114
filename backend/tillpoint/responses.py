# Overview: JSON response envelope and error-to-status mapping.

from flask import Flask, current_app, jsonify
from werkzeug.exceptions import HTTPException

from .errors import DomainError, ErrorKind
from .validation import ValidationError


def success(data=None, status: int = 200):
    return jsonify({"success": True, "message": "Success", "data": data}), status


def failure(messages: list[str], status: int):
    return jsonify({"success": False, "messages": messages}), status


def paginated(key: str, items: list, *, skip: int, limit: int):
    """List payload: {"meta": {...}, key: items}."""
    return success({
        "meta": {"total": len(items), "limit": limit, "skip": skip},
        key: items,
    })


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return failure([e.kind.message], e.status_code)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return failure(e.messages, 400)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return failure([e.description or e.name], e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        current_app.logger.exception("Unhandled error")
        return failure([ErrorKind.INTERNAL.message], ErrorKind.INTERNAL.status_code)
