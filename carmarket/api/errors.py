# carmarket/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from carmarket.utils.logging import get_logger

logger = get_logger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # every error body is {"message": ..., **extra}
    if isinstance(exc.detail, dict):
        content = dict(exc.detail)
    else:
        content = {"message": exc.detail}
    return JSONResponse(content, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse({"message": "Invalid request"}, status_code=400)

    first = errors[0]
    ctx_error = (first.get("ctx") or {}).get("error")
    message = str(ctx_error) if first.get("type") == "value_error" and ctx_error else first.get("msg")
    loc = first.get("loc") or ()
    field = str(loc[-1]) if loc else None
    return JSONResponse({"message": message, "field": field}, status_code=400)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse({"message": "Internal server error"}, status_code=500)


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
