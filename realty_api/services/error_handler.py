"""
Error handling service for consistent error response formatting and logging.
Every failure leaves the API as the same JSON envelope under an "error" key.
"""

from typing import Dict, Any, Optional, List, Sequence
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from pydantic import ValidationError as PydanticValidationError
from realty_api.config import settings
from realty_api.utils.exceptions import APIException
from datetime import datetime, timezone
import logging
import traceback
import uuid

logger = logging.getLogger(__name__)


class ErrorHandlerService:
    """
    Service for handling and formatting errors consistently across the application.
    Provides structured error responses with appropriate logging and error codes.
    """

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None,
        stack: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Format error response in a consistent structure.

        Args:
            error_code: Error code identifier
            message: Human-readable error message
            details: Optional list of detailed error information
            request_id: Optional request identifier for tracking
            stack: Optional formatted traceback, never sent in production

        Returns:
            Formatted error response dictionary
        """
        response = {
            "error": {
                "code": error_code,
                "message": message,
                "timestamp": ErrorHandlerService._get_current_timestamp(),
            }
        }

        if details:
            response["error"]["details"] = details

        if request_id:
            response["error"]["request_id"] = request_id

        if stack:
            response["error"]["stack"] = stack

        return response

    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle custom API exceptions with structured response."""
        request_id = ErrorHandlerService._get_request_id(request)

        logger.warning(
            f"API Exception [{request_id}]: {exception.error_code} - {exception.detail}",
            extra={
                "error_code": exception.error_code,
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code=exception.error_code or "API_ERROR",
            message=exception.detail,
            request_id=request_id
        )

        return JSONResponse(
            status_code=exception.status_code,
            content=error_response,
            headers=exception.headers
        )

    @staticmethod
    def handle_validation_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle request and schema validation errors with field information.
        Accepts both FastAPI's RequestValidationError and pydantic's ValidationError.
        """
        request_id = ErrorHandlerService._get_request_id(request)

        validation_details = ErrorHandlerService.extract_field_errors(exception.errors())
        message = ", ".join(detail["message"] for detail in validation_details)

        logger.warning(
            f"Validation Error [{request_id}]: {message}",
            extra={
                "error_count": len(validation_details),
                "request_id": request_id,
                "path": request.url.path if request else None,
            }
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code="VALIDATION_ERROR",
            message=message or "Request validation failed",
            details=validation_details,
            request_id=request_id
        )

        return JSONResponse(status_code=400, content=error_response)

    @staticmethod
    def extract_field_errors(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
        """Flatten pydantic error dicts into {field, message, type} entries."""
        details = []
        for error in errors:
            # Skip the request section prefix ("body", "query", "path")
            location = [str(loc) for loc in error.get("loc", ())]
            if len(location) > 1 and location[0] in ("body", "query", "path", "header", "form"):
                location = location[1:]
            field = ".".join(location)
            raw_message = str(error.get("msg", "Invalid value"))
            # Pydantic prefixes messages raised from validators
            if raw_message.startswith("Value error, "):
                raw_message = raw_message[len("Value error, "):]
            if error.get("type") == "missing":
                raw_message = f"{field} is required" if field else raw_message
            details.append({
                "field": field,
                "message": raw_message,
                "type": str(error.get("type", "value_error")),
            })
        return details

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle database errors; unique violations become duplicate-key responses."""
        request_id = ErrorHandlerService._get_request_id(request)

        if isinstance(exception, IntegrityError):
            status_code = 400
            constraint_info = ErrorHandlerService._extract_constraint_info(exception)
            if constraint_info == "unique":
                error_code = "DUPLICATE_KEY"
                message = "Duplicate value for unique field"
            else:
                error_code = "INTEGRITY_ERROR"
                message = "Data integrity constraint violation"
        else:
            error_code = "DATABASE_ERROR"
            message = "Database operation failed"
            status_code = 500

        logger.error(
            f"Database Error [{request_id}]: {error_code} - {str(exception)}",
            extra={
                "error_code": error_code,
                "request_id": request_id,
                "path": request.url.path if request else None,
                "exception_type": type(exception).__name__
            },
            exc_info=True
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code=error_code,
            message=message,
            request_id=request_id,
            stack=ErrorHandlerService._format_stack(exception)
        )

        return JSONResponse(status_code=status_code, content=error_response)

    @staticmethod
    def handle_http_exception(
        exception: StarletteHTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle framework HTTP exceptions such as 404 and 405."""
        if isinstance(exception, APIException):
            return ErrorHandlerService.handle_api_exception(exception, request)

        request_id = ErrorHandlerService._get_request_id(request)

        logger.warning(
            f"HTTP Exception [{request_id}]: {exception.status_code} - {exception.detail}",
            extra={
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code=f"HTTP_{exception.status_code}",
            message=str(exception.detail),
            request_id=request_id
        )

        return JSONResponse(
            status_code=exception.status_code,
            content=error_response,
            headers=getattr(exception, "headers", None)
        )

    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle unexpected errors; the traceback is only exposed outside production."""
        request_id = ErrorHandlerService._get_request_id(request)

        logger.error(
            f"Unexpected Error [{request_id}]: {type(exception).__name__} - {str(exception)}",
            extra={
                "request_id": request_id,
                "path": request.url.path if request else None,
                "exception_type": type(exception).__name__,
            },
            exc_info=exception
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code="INTERNAL_SERVER_ERROR",
            message=str(exception) or "An unexpected error occurred. Please try again later.",
            request_id=request_id,
            stack=ErrorHandlerService._format_stack(exception)
        )

        return JSONResponse(status_code=500, content=error_response)

    @staticmethod
    def _format_stack(exception: Exception) -> Optional[str]:
        """Formatted traceback for non-production environments."""
        if settings.is_production:
            return None
        return "".join(
            traceback.format_exception(type(exception), exception, exception.__traceback__)
        )

    @staticmethod
    def _get_request_id(request: Optional[Request] = None) -> str:
        """Reuse the id assigned by the timing middleware, or generate one."""
        if request is not None:
            request_id = getattr(request.state, "request_id", None)
            if request_id:
                return request_id
        return str(uuid.uuid4())[:8]

    @staticmethod
    def _get_current_timestamp() -> str:
        """Get current timestamp in ISO format."""
        return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    @staticmethod
    def _extract_constraint_info(exception: IntegrityError) -> Optional[str]:
        """Classify the violated constraint from the driver message."""
        error_msg = str(exception.orig).lower()

        if "unique" in error_msg or "duplicate" in error_msg:
            return "unique"
        if "foreign key" in error_msg:
            return "foreign_key"
        if "not null" in error_msg:
            return "not_null"
        if "check constraint" in error_msg:
            return "check"
        return None


def register_exception_handlers(app) -> None:
    """Attach the envelope handlers to the application."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return ErrorHandlerService.handle_http_exception(exc, request)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(PydanticValidationError)
    async def pydantic_validation_handler(request: Request, exc: PydanticValidationError):
        return ErrorHandlerService.handle_validation_error(exc, request)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        return ErrorHandlerService.handle_database_error(exc, request)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        return ErrorHandlerService.handle_unexpected_error(exc, request)


# Error response schemas for documentation
ERROR_RESPONSES = {
    400: {
        "description": "Bad Request",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "VALIDATION_ERROR",
                        "message": "title is required, price is required",
                        "timestamp": "2024-01-01T00:00:00Z",
                        "request_id": "abc12345"
                    }
                }
            }
        }
    },
    404: {
        "description": "Not Found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "NOT_FOUND",
                        "message": "Property not found",
                        "timestamp": "2024-01-01T00:00:00Z",
                        "request_id": "abc12345"
                    }
                }
            }
        }
    },
    500: {
        "description": "Internal Server Error",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INTERNAL_SERVER_ERROR",
                        "message": "An unexpected error occurred",
                        "timestamp": "2024-01-01T00:00:00Z",
                        "request_id": "abc12345"
                    }
                }
            }
        }
    }
}
