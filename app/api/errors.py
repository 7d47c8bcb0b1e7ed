# app/api/errors.py
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.domain.errors import AppError
from app.utils.logging import get_logger

logger = get_logger(__name__)


def error_response(error: str, status_code: int, data=None) -> JSONResponse:
    body = {"success": False, "error": error}
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=body)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    data = {"details": jsonable_encoder(exc.details)} if exc.details is not None else None
    return error_response(exc.message, exc.status_code, data)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    in_query = all((e.get("loc") or [None])[0] == "query" for e in errors)
    message = "Invalid query parameters" if errors and in_query else "Invalid input data"
    return error_response(message, 400, {"details": errors})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(str(exc.detail), exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # szczegoly tylko w logach, klient dostaje ogolny komunikat
    logger.exception(f"{request.method} {request.url.path} unhandled error: {exc}")
    return error_response("Internal server error", 500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
