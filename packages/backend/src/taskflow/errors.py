"""Application error taxonomy and HTTP rendering.

Learn: Services raise these; the handlers registered in create_app()
turn them into small JSON bodies of the form {"error": "..."}
(plus "errors" for multi-field validation failures). Routes never
build error responses by hand.

- ValidationError     → 400
- AuthenticationError → 401
- NotFoundError       → 404 (also used for ownership mismatch)
- ConflictError       → 409
Anything else is caught by ErrorHandlerMiddleware → 500.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class AppError(Exception):
    """Base class for errors that map to a client-visible response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = 400

    def __init__(self, message: str = "Validation failed.", errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class AuthenticationError(AppError):
    """Missing, invalid or expired token, or wrong credentials."""

    status_code = 401


class NotFoundError(AppError):
    """Resource absent, or present but owned by someone else."""

    status_code = 404


class ConflictError(AppError):
    """A unique field (email, username) is already taken."""

    status_code = 409

    def __init__(self, message: str, field: str):
        super().__init__(message)
        self.field = field


def _format_validation_error(err: dict) -> str:
    # ("body", "email") → "email"
    loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
    field = ".".join(loc) or "request"
    return f"{field}: {err.get('msg', 'invalid value')}"


def register_exception_handlers(app: FastAPI) -> None:
    """Attach JSON renderers for the error taxonomy to the app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        headers = None
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code, content=exc.to_dict(), headers=headers
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [_format_validation_error(e) for e in exc.errors()]
        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed.", "errors": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Route not found: {request.method} {request.url.path}"
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )
