"""
Exception handlers.

Every error response has the body ``{"error": message, "code": code}``.
Request validation failures are reported as 400 with a code derived from
the offending field.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from tableside_shared.config.logging import api_logger as logger
from tableside_shared.security.rate_limit import rate_limit_exceeded_handler
from tableside_shared.utils.exceptions import INTERNAL_ERROR_PREFIX


# Request field (camelCase, as sent by clients) -> error code
FIELD_ERROR_CODES: dict[str, str] = {
    "dishId": "INVALID_DISH_ID",
    "categoryId": "INVALID_CATEGORY_ID",
    "optionGroupId": "INVALID_OPTION_GROUP_ID",
    "selectionType": "INVALID_SELECTION_TYPE",
    "isRequired": "INVALID_IS_REQUIRED",
    "enableNote": "INVALID_ENABLE_NOTE",
    "extraPrice": "INVALID_EXTRA_PRICE",
    "isAvailable": "INVALID_IS_AVAILABLE",
    "displayOrder": "INVALID_DISPLAY_ORDER",
    "name": "INVALID_NAME",
    "price": "INVALID_PRICE",
    "quantity": "INVALID_QUANTITY",
    "comment": "INVALID_COMMENT",
    "selections": "INVALID_SELECTION",
    "tableNumber": "INVALID_TABLE_NUMBER",
    "expectedTotal": "INVALID_EXPECTED_TOTAL",
    "limit": "INVALID_PAGINATION",
    "offset": "INVALID_PAGINATION",
}

DEFAULT_STATUS_CODES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_409_CONFLICT: "CONFLICT",
    status.HTTP_429_TOO_MANY_REQUESTS: "RATE_LIMITED",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "INTERNAL_ERROR",
}


def error_body(message: str, code: str | None) -> dict[str, Any]:
    return {"error": message, "code": code}


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc[1:] if not isinstance(p, int)]
    return parts[0] if parts else str(loc[0]) if loc else "body"


def validation_error_code(errors: list[dict[str, Any]]) -> tuple[str, str]:
    """
    Reduce pydantic errors to one (code, message) pair.

    Missing fields win over malformed ones; otherwise the first error
    decides the code.
    """
    missing = [_field_name(tuple(e.get("loc", ()))) for e in errors if e.get("type") == "missing"]
    if missing:
        return "MISSING_REQUIRED_FIELDS", f"Missing required fields: {', '.join(missing)}"

    first = errors[0]
    loc = tuple(first.get("loc", ()))
    field_name = _field_name(loc)

    if first.get("type") == "json_invalid":
        return "INVALID_JSON", "Request body is not valid JSON"
    if loc and loc[0] == "path":
        return "INVALID_ID", f"Invalid {field_name}: must be an integer"

    return FIELD_ERROR_CODES.get(field_name, "VALIDATION_ERROR"), f"Invalid {field_name}: {first.get('msg')}"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = getattr(exc, "code", None) or DEFAULT_STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), code),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = list(exc.errors())
    code, message = validation_error_code(errors)
    logger.warning(
        "Request validation failed",
        path=request.url.path,
        code=code,
        fields=[".".join(str(p) for p in e.get("loc", ())) for e in errors],
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message, code))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(f"{INTERNAL_ERROR_PREFIX}{exc}", "INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
