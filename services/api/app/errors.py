"""Service exceptions and their HTTP mappings.

Repository and parameter helpers raise these plain exceptions; route handlers
let them propagate and `register_exception_handlers` turns them into
responses. `ForbiddenAttributes` is not mapped: it signals a
handler that forgot to whitelist parameters and surfaces as a 500.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .logging_config import get_logger

logger = get_logger(__name__)


class QuestionsError(Exception):
    """Base class for questions service errors."""


class RecordNotFound(QuestionsError):
    """No row of `model` has the requested id. Mapped to 404."""

    def __init__(self, model: str, record_id):
        self.model = model
        self.record_id = record_id
        super().__init__(f"Couldn't find {model} with 'id'={record_id}")


class RecordInvalid(QuestionsError):
    """Raised when a record fails presence validation.

    Carries the unsaved record so form handlers can re-render it with the
    submitted values.
    """

    def __init__(self, record, errors: list[str]):
        self.record = record
        self.errors = errors
        super().__init__("Validation failed: " + ", ".join(errors))


class ParameterMissing(QuestionsError):
    """A required request parameter is absent or empty. Mapped to 400."""

    def __init__(self, param: str):
        self.param = param
        super().__init__(f"param is missing or the value is empty: {param}")


class ForbiddenAttributes(QuestionsError):
    """Attributes reached the repository without being permitted first."""

    def __init__(self):
        super().__init__("attributes must be permitted before mass assignment")


class InvalidAuthenticityToken(QuestionsError):
    """An unsafe form submission did not echo the client's token. Mapped to 422."""

    def __init__(self):
        super().__init__("Invalid authenticity token")


def _error_response(request: Request, exc: Exception, status_code: int, detail) -> JSONResponse:
    logger.warning(
        "request_error",
        error=type(exc).__name__,
        detail=str(exc),
        method=request.method,
        path=request.url.path,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content={"detail": detail})


async def record_not_found_handler(request: Request, exc: RecordNotFound) -> JSONResponse:
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, str(exc))


async def parameter_missing_handler(request: Request, exc: ParameterMissing) -> JSONResponse:
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, str(exc))


async def record_invalid_handler(request: Request, exc: RecordInvalid) -> JSONResponse:
    return _error_response(request, exc, 422, exc.errors)


async def invalid_token_handler(request: Request, exc: InvalidAuthenticityToken) -> JSONResponse:
    return _error_response(request, exc, 422, str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the service exception handlers on `app`."""
    app.add_exception_handler(RecordNotFound, record_not_found_handler)
    app.add_exception_handler(ParameterMissing, parameter_missing_handler)
    app.add_exception_handler(RecordInvalid, record_invalid_handler)
    app.add_exception_handler(InvalidAuthenticityToken, invalid_token_handler)
