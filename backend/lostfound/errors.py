from __future__ import annotations

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from .extensions import db


class ApiError(Exception):
    """Base class for errors that map onto a JSON error response."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None, fields: dict | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.fields = fields

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message}
        if self.fields:
            payload["fields"] = self.fields
        return payload


class ValidationError(ApiError):
    status_code = 400
    message = "All required fields must be provided"


class InvalidAction(ApiError):
    status_code = 400
    message = "Unknown action"


class InvalidStatus(ApiError):
    status_code = 400
    message = "Invalid status"


class Unauthorized(ApiError):
    status_code = 401
    message = "Unauthorized"


class Forbidden(ApiError):
    status_code = 403
    message = "Forbidden"


class NotFound(ApiError):
    status_code = 404
    message = "Not found"


class PayloadTooLarge(ApiError):
    status_code = 413
    message = "File too large"


class UnsupportedMediaType(ApiError):
    status_code = 415
    message = "Only JPEG/PNG/WEBP images allowed"


class TooManyRequests(ApiError):
    status_code = 429
    message = "Too many requests, please try again later"


def json_object() -> dict:
    """Request body as a dict; an empty or unparsable body counts as ``{}``."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def _api_error(err: ApiError):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        # Routing misses, bad methods and oversized request bodies
        return jsonify({"error": err.description or err.name}), err.code or 500

    @app.errorhandler(Exception)
    def _unexpected(err: Exception):
        db.session.rollback()
        current_app.logger.exception("unhandled error: %s", err)
        return jsonify({"error": "Internal server error"}), 500
