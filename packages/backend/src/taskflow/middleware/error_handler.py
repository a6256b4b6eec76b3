"""Top-level handler for unexpected exceptions.

Learn: Expected failures (validation, auth, not found, conflict) are
AppErrors and never get here. Anything else (a dropped DB connection,
a bcrypt failure) is logged with its full traceback and answered with
a bare 500. The exception text and traceback are only added to the
response body when debug is on.
"""

import traceback

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = structlog.get_logger()


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn unhandled exceptions into a minimal JSON 500."""

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(
                "request.unhandled_error",
                method=request.method,
                path=request.url.path,
                exc_type=type(exc).__name__,
            )
            content = {"error": "Internal server error."}
            if self.debug:
                content["detail"] = str(exc)
                content["traceback"] = traceback.format_exception(exc)
            return JSONResponse(status_code=500, content=content)
