import logging
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from websustain.platform.response import error_response


class SustainabilityError(Exception):
    """Base error for the analysis pipeline. Carries the HTTP status it maps to."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


# ── Data-source failures (trigger the next fallback) ──────────────────────

class ConfigurationError(SustainabilityError):
    """A credential or setting required by a data source is missing."""


class RemoteServiceError(SustainabilityError):
    """An external service answered with a non-2xx status or an unusable body."""

    def __init__(self, message: str, upstream_status: Optional[int] = None, detail: str = ""):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.detail = detail


class FetchError(SustainabilityError):
    """The target page could not be retrieved."""


class UpstreamTimeoutError(SustainabilityError):
    """A single outbound call exceeded its own timeout."""

    status_code = status.HTTP_504_GATEWAY_TIMEOUT


# ── Terminal failures (surfaced to the caller) ────────────────────────────

class URLValidationError(SustainabilityError):
    status_code = status.HTTP_400_BAD_REQUEST


class ReportTimeoutError(SustainabilityError):
    status_code = status.HTTP_408_REQUEST_TIMEOUT


class ExhaustedFallbackError(SustainabilityError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ReportAssemblyError(SustainabilityError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class AnnotationError(SustainabilityError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def add_exception_handlers(app):
    @app.exception_handler(SustainabilityError)
    async def sustainability_exception_handler(request: Request, exc: SustainabilityError):
        return error_response(exc.message, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(str(exc.detail) or "Error", status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logging.getLogger(__name__).info(f"Rejected malformed request body: {exc.errors()}")
        return error_response("Invalid request body", status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logging.exception(f"Unhandled exception: {exc}")
        return error_response(
            "An unexpected error occurred. Please try again later.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
