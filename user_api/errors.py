import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INVALID_USER_ID = "Invalid user ID"
INVALID_PAYLOAD = "Invalid request payload"


class QueryError(RuntimeError):
    """A database failure. The message is the driver's own, unmodified."""

    @classmethod
    def from_exception(cls, exc: SQLAlchemyError) -> "QueryError":
        if isinstance(exc, DBAPIError) and exc.orig is not None:
            return cls(str(exc.orig))
        return cls(str(exc))


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _validation_message(exc: RequestValidationError) -> str:
    sources = {error["loc"][0] for error in exc.errors() if error.get("loc")}
    if "path" in sources:
        return INVALID_USER_ID
    if "body" in sources:
        return INVALID_PAYLOAD
    return "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Make every error response share the ``{"error": "..."}`` shape."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(
            "Rejected %s %s: %s", request.method, request.url.path, exc.errors()
        )
        return _error_response(_validation_message(exc), status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled application error", exc_info=exc)
        return _error_response(
            "Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR
        )
