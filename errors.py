# errors.py — request-level error taxonomy for the rooms app
from flask import jsonify, request


class RoomsError(Exception):
    status_code = 500
    error = "server_error"

    def __init__(self, message=None):
        super().__init__(message or self.error)
        self.message = message or self.error


class BadRequest(RoomsError):
    status_code = 400
    error = "bad_request"


class InvalidName(RoomsError):
    status_code = 400
    error = "invalid_name"


class ConfirmationMismatch(RoomsError):
    status_code = 400
    error = "confirmation_mismatch"


class Unauthorized(RoomsError):
    status_code = 403
    error = "admin_only"


class NotFound(RoomsError):
    status_code = 404
    error = "not_found"


class TooLarge(RoomsError):
    status_code = 413
    error = "too_large"


def wants_json() -> bool:
    if request.path.startswith("/api/"):
        return True
    return request.accept_mimetypes.best_match(["text/html", "application/json"]) == "application/json"


def form_field(name) -> str:
    """Form value, else JSON object member, as a stripped string ("" if absent)."""
    value = request.form.get(name)
    if not value:
        data = request.get_json(silent=True)
        value = data.get(name) if isinstance(data, dict) else None
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def error_response(exc: RoomsError):
    if wants_json():
        return jsonify(ok=False, error=exc.error, message=exc.message), exc.status_code
    return exc.message, exc.status_code, {"Content-Type": "text/plain; charset=utf-8"}
