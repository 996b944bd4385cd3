# storefront/core/error_handlers.py

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
import logging
import traceback
import uuid

from .exceptions import StorefrontError, ConcurrentModificationError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_CODE_MAP = {
    ErrorCode.PRODUCT_NOT_FOUND: 400,
    ErrorCode.CATEGORY_EXISTS: 400,
    ErrorCode.CATEGORY_IN_USE: 400,
    ErrorCode.PRODUCT_IN_USE: 400,
    ErrorCode.INSUFFICIENT_STOCK: 400,
    ErrorCode.INVALID_QUANTITY: 400,
    ErrorCode.EMPTY_CART: 400,
    ErrorCode.INVALID_STATE: 400,
    ErrorCode.INVALID_TRANSITION: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.CONCURRENT_MODIFICATION: 409,
    ErrorCode.INTERNAL_SERVER_ERROR: 500,
}


def _error_response(status_code: int, code: str, message, context=None, headers=None, **extra) -> JSONResponse:
    body = {"code": code, "message": message, "context": context or {}}
    body.update(extra)
    return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


def _request_info(request: Request) -> dict:
    return {
        "request_id": getattr(request.state, "request_id", None),
        "request_url": str(request.url),
        "request_method": request.method,
    }


def setup_error_handlers(app: FastAPI):
    """Register the JSON error format for domain, database, validation and unexpected errors."""

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        status_code = STATUS_CODE_MAP.get(exc.code, 400)
        logger.warning(
            f"{exc.code.value}: {exc.user_message}",
            extra={
                "error_code": exc.code.value,
                "technical_details": exc.technical_details,
                "error_context": exc.context,
                **_request_info(request),
            },
        )
        # Bearer challenge, as OAuth2PasswordBearer would send it
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(status_code=status_code, content=exc.to_response(), headers=headers)

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        """Unique or foreign-key violation, usually two requests racing for the same row."""
        logger.warning(f"Integrity error: {exc.orig}", extra=_request_info(request))
        error = ConcurrentModificationError(str(exc.orig))
        return JSONResponse(status_code=STATUS_CODE_MAP[error.code], content=error.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        logger.warning("Validation error", extra={"validation_errors": errors, **_request_info(request)})
        return _error_response(422, "VALIDATION_ERROR", "Request validation failed", details=errors)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # Detail already in the {"error": ...} format
        if isinstance(exc.detail, dict) and "error" in exc.detail:
            return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)
        return _error_response(exc.status_code, f"HTTP_{exc.status_code}", exc.detail, headers=exc.headers)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {exc}",
            extra={"traceback": traceback.format_exc(), **_request_info(request)},
        )
        # Internal details stay in the log. This handler runs outside the
        # request-id middleware, so the header is set here.
        request_id = (
            getattr(request.state, "request_id", None)
            or request.headers.get("X-Request-ID")
            or str(uuid.uuid4())
        )
        return _error_response(
            500,
            ErrorCode.INTERNAL_SERVER_ERROR.value,
            "An internal server error occurred. Please try again later.",
            headers={"X-Request-ID": request_id},
        )


async def add_request_id_middleware(request: Request, call_next):
    """Tag the request and its response with an X-Request-ID (reused when the client sends one)."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response
