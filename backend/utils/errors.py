"""API error types, mapped onto HTTP responses by the app's error handler."""

from __future__ import annotations

from typing import List, Optional

from pydantic import ValidationError


class ApiError(Exception):
    """Base class for errors that become a JSON error envelope."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[dict]] = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.errors = errors

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.errors is not None:
            body["errors"] = self.errors
        return body


class ValidationFailed(ApiError):
    status_code = 400
    message = "Validation failed"


class AuthError(ApiError):
    """Missing, malformed or expired bearer token."""

    status_code = 401
    message = "No token provided, authorization denied"


class InvalidCredentials(ApiError):
    # 400 rather than 401 and one message for both causes, so the response
    # never tells whether the email exists.
    status_code = 400
    message = "Invalid email or password"


class NotFoundError(ApiError):
    status_code = 404
    message = "Not found"


class ConflictError(ApiError):
    status_code = 400
    message = "User already exists with this email"


def field_errors(exc: ValidationError) -> List[dict]:
    """Flatten pydantic errors into [{"path", "msg"}] items."""
    out = []
    for err in exc.errors():
        path = ".".join(str(p) for p in err.get("loc", ())) or "body"
        msg = err.get("msg", "Invalid value")
        ctx_error = (err.get("ctx") or {}).get("error")
        if err.get("type") == "value_error" and ctx_error is not None:
            msg = str(ctx_error)
        out.append({"path": path, "msg": msg})
    return out


def validation_failed(exc: ValidationError) -> ValidationFailed:
    return ValidationFailed(errors=field_errors(exc))
