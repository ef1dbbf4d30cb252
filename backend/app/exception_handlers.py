"""Map service and framework errors to structured JSON responses."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import TaskServiceError
from app.settings import get_settings

logger = logging.getLogger(__name__)


def _task_service_error_handler(request: Request, exc: TaskServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body") or None
    return JSONResponse(
        status_code=400,
        content={
            "ok": False,
            "error": "validation_error",
            "message": first.get("msg", "Request validation failed"),
            "details": {"field": field, "errors": [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in errors
            ]},
        },
    )


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": "http_error", "message": exc.detail, "details": {}},
        headers=getattr(exc, "headers", None),
    )


def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    detail: Any = str(exc) if get_settings().APP_DEBUG else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": "internal_error", "message": detail, "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskServiceError, _task_service_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
