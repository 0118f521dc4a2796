from flask import jsonify


class ApiError(Exception):
    """Base class for errors that map to a fixed HTTP status and a JSON body."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, errors=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.errors = errors

    def to_dict(self):
        body = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class Unauthenticated(ApiError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid request payload"


class Conflict(ApiError):
    status_code = 409
    default_message = "Conflict"


class MethodNotAllowed(ApiError):
    status_code = 405
    default_message = "Method not allowed"


class InternalError(ApiError):
    status_code = 500
    default_message = "Internal server error"


def error_response(error):
    """Render an ApiError as the `{"message": ...}` JSON response."""
    return jsonify(error.to_dict()), error.status_code
