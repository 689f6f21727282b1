# app/middleware/error_handler.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError
from jose.exceptions import ExpiredSignatureError
import logging

from app.config import settings
from app.errors import (
    AppError,
    ErrorKind,
    AuthenticationError,
    InvalidEndpointError,
    InvalidParametersError,
    InvalidRequestError,
    MissingFieldsError,
    QueryError,
    UncaughtError,
)
from app.schemas.response import envelope

logger = logging.getLogger(__name__)

MISSING_ERROR_TYPES = {"missing"}
MALFORMED_BODY_ERROR_TYPES = {"json_invalid", "model_attributes_type", "dict_type"}


def _dev_response(err: AppError, cause: Exception | None = None) -> JSONResponse:
    source = cause or err
    payload = envelope(
        err.status_code,
        err.message,
        error=err.name,
        err={"type": type(source).__name__, "detail": str(source)},
    )
    return JSONResponse(status_code=err.status_code, content=payload)


def _prod_response(err: AppError) -> JSONResponse:
    payload = envelope(
        err.status_code,
        err.message if err.is_operational else "Something went wrong",
        error=err.name if err.is_operational else "SERVER_ERROR",
    )
    return JSONResponse(status_code=err.status_code, content=payload)


def send_error(err: AppError, cause: Exception | None = None) -> JSONResponse:
    """Render an AppError, hiding internals in production."""
    if settings.is_production:
        return _prod_response(err)
    return _dev_response(err, cause)


def classify_validation_error(exc: RequestValidationError) -> AppError:
    """Map pydantic validation errors onto the error taxonomy."""
    errors = exc.errors()

    for err in errors:
        if err.get("type") in MALFORMED_BODY_ERROR_TYPES:
            return InvalidRequestError("Request body is malformed")

    missing = [err for err in errors if err.get("type") in MISSING_ERROR_TYPES]
    if missing:
        if any(tuple(err.get("loc", ())) == ("body",) for err in missing):
            return MissingFieldsError("Request body is empty")
        fields = ", ".join(str(err["loc"][-1]) for err in missing)
        return MissingFieldsError(f"Missing required field(s): {fields}")

    details = "; ".join(
        f"{'.'.join(str(loc) for loc in err.get('loc', ())[1:]) or 'body'}: {err.get('msg', 'Invalid input')}"
        for err in errors
    )
    return InvalidParametersError(details or "Invalid parameters")


async def _app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"app_error | method={request.method} url={request.url.path} error={exc!r}")
    else:
        logger.warning(f"app_error | method={request.method} url={request.url.path} error={exc!r}")
    return send_error(exc)


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    err = classify_validation_error(exc)
    logger.warning(f"validation_error | method={request.method} url={request.url.path} kind={err.name} errors={exc.errors()}")
    return send_error(err, exc)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        err = InvalidEndpointError(f"Route ({request.url.path}) not found")
        return JSONResponse(status_code=err.status_code, content=envelope(err.status_code, err.message, error=err.name))
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        err = AppError(f"Method {request.method} not allowed on {request.url.path}", ErrorKind.INVALID_REQUEST, 405)
        return send_error(err, exc)

    err = AppError(str(exc.detail), ErrorKind.UNCAUGHT_ERROR, exc.status_code)
    return send_error(err, exc)


async def _expired_token_handler(request: Request, exc: ExpiredSignatureError):
    return send_error(AuthenticationError("Token expired"), exc)


async def _database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"query_error | method={request.method} url={request.url.path} error={exc}", exc_info=True)
    return send_error(QueryError(str(exc), is_operational=False), exc)


async def _general_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"unhandled_exception | method={request.method} url={request.url.path} "
        f"exception_type={type(exc).__name__} exception_message={exc}",
        exc_info=True,
    )
    return send_error(UncaughtError(str(exc), is_operational=False), exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the given FastAPI instance."""
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(ExpiredSignatureError, _expired_token_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)
    app.add_exception_handler(Exception, _general_exception_handler)
