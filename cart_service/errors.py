"""Render every failure in the response envelope"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront_shared.cart.errors import CartError, ValidationError
from storefront_shared.cart.models import ApiResponse

logger = logging.getLogger(__name__)

_CODES_BY_STATUS = {
    401: "not_authenticated",
    404: "not_found",
    405: "method_not_allowed",
}


def error_response(status_code: int, error: str, code: str, message: Optional[str] = None) -> JSONResponse:
    body = ApiResponse(success=False, error=error, code=code, message=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


async def cart_error_handler(request: Request, exc: CartError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{request.method} {request.url.path} failed: {exc.code} - {exc.message}")
    return error_response(exc.status_code, exc.message, exc.code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    logger.warning(f"{request.method} {request.url.path} rejected: {details}")
    return error_response(400, "Validation failed", ValidationError.code, details)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(
        exc.status_code,
        str(exc.detail),
        _CODES_BY_STATUS.get(exc.status_code, "http_error"),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return error_response(500, "Internal server error", "internal_error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CartError, cart_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
