"""Application-level exceptions and FastAPI exception handlers."""


import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500, code: str = "UNKNOWN_ERROR"):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)

class NotFoundError(AppException):
    def __init__(self, entity: str, entity_id: str | None = None, code: str = "NOT_FOUND"):
        msg = f"{entity} not found" if not entity_id else f"{entity} '{entity_id}' not found"
        super().__init__(msg, status_code=404, code=code)

class ForbiddenError(AppException):
    def __init__(self, message: str = "Access denied", code: str = "FORBIDDEN"):
        super().__init__(message, status_code=403, code=code)

class UnauthorizedError(AppException):
    def __init__(self, message: str = "Authentication required", code: str = "UNAUTHORIZED"):
        super().__init__(message, status_code=401, code=code)

class ConflictError(AppException):
    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message, status_code=409, code=code)

class InvalidInputError(AppException):
    def __init__(self, message: str, code: str = "INVALID_INPUT"):
        super().__init__(message, status_code=400, code=code)

class OutcomeError(AppException):
    """A rejected business outcome reported as 200 with ``success: false``."""

    def __init__(self, message: str, code: str):
        super().__init__(message, status_code=200, code=code)

class ServiceConfigurationError(AppException):
    """A required secret or provider setting is missing; the operation is denied."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500, code="SERVICE_CONFIGURATION_ERROR")

class AuditWriteError(AppException):
    """Raised when an audit event cannot be appended; the triggering mutation must fail."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500, code="AUDIT_WRITE_FAILED")

# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def error_body(code: str, message: str | None = None) -> dict:
    body: dict = {"success": False, "error": code}
    if message:
        body["message"] = message
    return body

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.code, exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("INVALID_REQUEST", "Request body or parameters are invalid"),
        )

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content=error_body("NOT_FOUND", "Resource not found"),
        )

    @app.exception_handler(Exception)
    async def unknown_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_body("UNKNOWN_ERROR", "An unexpected error occurred"),
        )
