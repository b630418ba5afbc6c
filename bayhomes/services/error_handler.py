"""
Error envelope for the listing API.

Every failed request is answered with::

    {"success": false, "message": "...", "error": {"code", "timestamp", "request_id", "details"?}}

The handlers are static so the request middleware can reuse them for errors
raised before routing.
"""

from typing import Dict, Any, Optional, List, Tuple
from datetime import datetime, timezone
from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from pydantic import ValidationError as PydanticValidationError
from bayhomes.utils.exceptions import APIException, ValidationError
import logging
import uuid

logger = logging.getLogger(__name__)

# Substring of the driver message -> client-facing explanation
CONSTRAINT_MESSAGES: Tuple[Tuple[str, str], ...] = (
    ("unique", "Duplicate value for unique field"),
    ("foreign key", "Referenced record does not exist"),
    ("not null", "Required field cannot be empty"),
    ("check constraint", "Value does not meet validation requirements"),
)


class ErrorHandlerService:
    """Turns exceptions into logged, uniformly shaped JSON responses."""

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Build the error envelope.

        Args:
            error_code: Machine-readable code, e.g. ``RELATED_ENTITY_NOT_FOUND``
            message: Human-readable message
            details: Field errors; omitted from the envelope when empty
            request_id: Id assigned by the request middleware

        Returns:
            Envelope dictionary ready for JSONResponse
        """
        error: Dict[str, Any] = {
            "code": error_code,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "request_id": request_id,
        }
        if details:
            error["details"] = details
        return {"success": False, "message": message, "error": error}

    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Domain errors raised by services and dependencies."""
        code = exception.error_code or "API_ERROR"
        details = exception.field_errors if isinstance(exception, ValidationError) else None
        level = logging.ERROR if exception.status_code >= 500 else logging.WARNING

        return ErrorHandlerService._respond(
            request,
            status_code=exception.status_code,
            code=code,
            message=exception.detail,
            details=details,
            headers=exception.headers,
            level=level,
            log_line=f"{code} - {exception.detail}"
        )

    @staticmethod
    def handle_validation_error(
        exception: Any,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Request body, query and path validation failures.

        Input values are never echoed back since a rejected field may hold a
        multi-megabyte image payload. The first problem is folded into the
        message so the dashboard can show it as a single toast.

        Args:
            exception: RequestValidationError or pydantic ValidationError
            request: Current request, when there is one
        """
        details = []
        for error in exception.errors():
            location = [str(part) for part in error["loc"] if part != "body"]
            details.append({
                "field": " -> ".join(location) or None,
                "message": error["msg"],
                "type": error["type"],
            })

        message = "Request validation failed"
        if details:
            first = details[0]
            message += f": {first['field']}: {first['message']}" if first["field"] else f": {first['message']}"

        return ErrorHandlerService._respond(
            request,
            status_code=422,
            code="VALIDATION_ERROR",
            message=message,
            details=details,
            level=logging.WARNING,
            log_line=f"{len(details)} invalid field(s)"
        )

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Storage failures; the owning transaction has been rolled back already."""
        if isinstance(exception, IntegrityError):
            status_code, code = 409, "INTEGRITY_ERROR"
            reason = ErrorHandlerService._extract_constraint_info(exception)
            message = f"Constraint violation: {reason}" if reason else "Data integrity constraint violation"
        else:
            status_code, code = 500, "DATABASE_ERROR"
            message = "Database operation failed"

        return ErrorHandlerService._respond(
            request,
            status_code=status_code,
            code=code,
            message=message,
            level=logging.ERROR,
            log_line=f"{type(exception).__name__}: {exception}",
            exc_info=True
        )

    @staticmethod
    def handle_http_exception(
        exception: HTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Framework errors such as unknown routes and unsupported methods."""
        return ErrorHandlerService._respond(
            request,
            status_code=exception.status_code,
            code=f"HTTP_{exception.status_code}",
            message=str(exception.detail),
            headers=getattr(exception, "headers", None),
            level=logging.WARNING,
            log_line=f"{exception.status_code} - {exception.detail}"
        )

    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Anything else; the traceback goes to the log only."""
        return ErrorHandlerService._respond(
            request,
            status_code=500,
            code="INTERNAL_SERVER_ERROR",
            message=str(exception) or "An unexpected error occurred",
            level=logging.ERROR,
            log_line=f"{type(exception).__name__}: {exception}",
            exc_info=True
        )

    @staticmethod
    def _respond(
        request: Optional[Request],
        *,
        status_code: int,
        code: str,
        message: str,
        level: int,
        log_line: str,
        details: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
        exc_info: bool = False
    ) -> JSONResponse:
        request_id = ErrorHandlerService._request_id(request)
        path = request.url.path if request is not None else None

        logger.log(
            level,
            f"[{request_id}] {path or '-'} -> {status_code} {log_line}",
            extra={"error_code": code, "status_code": status_code, "request_id": request_id, "path": path},
            exc_info=exc_info
        )

        return JSONResponse(
            status_code=status_code,
            content=ErrorHandlerService.format_error_response(code, message, details, request_id),
            headers=headers
        )

    @staticmethod
    def _request_id(request: Optional[Request]) -> str:
        """Id set by RequestContextMiddleware, or a fresh one outside a request."""
        request_id = getattr(request.state, "request_id", None) if request is not None else None
        return request_id or uuid.uuid4().hex[:8]

    @staticmethod
    def _extract_constraint_info(exception: IntegrityError) -> Optional[str]:
        driver_message = str(exception.orig).lower()
        for needle, explanation in CONSTRAINT_MESSAGES:
            if needle in driver_message:
                return explanation
        return None


def register_exception_handlers(app) -> None:
    """Attach the handlers to a FastAPI application."""

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        return ErrorHandlerService.handle_api_exception(exc, request)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(PydanticValidationError)
    async def pydantic_validation_handler(request: Request, exc: PydanticValidationError):
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        return ErrorHandlerService.handle_database_error(exc, request)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return ErrorHandlerService.handle_http_exception(exc, request)

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        return ErrorHandlerService.handle_unexpected_error(exc, request)
