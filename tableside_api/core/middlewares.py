"""
HTTP middlewares: security headers and the JSON body guard.
"""

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from tableside_shared.config.settings import settings


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}
HSTS_HEADER = "max-age=31536000; includeSubDomains"

# Carts, orders and back-office data must never be served from a cache
NO_STORE_PREFIXES = ("/api/diner", "/api/admin", "/api/auth")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        if request.url.path.startswith(NO_STORE_PREFIXES):
            response.headers["Cache-Control"] = "no-store"
        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = HSTS_HEADER
        return response


class ContentTypeValidationMiddleware(BaseHTTPMiddleware):
    """415 for POST/PUT/PATCH bodies declared as anything but JSON."""

    METHODS_WITH_BODY = frozenset({"POST", "PUT", "PATCH"})

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method in self.METHODS_WITH_BODY:
            media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
            if media_type and media_type != "application/json":
                return JSONResponse(
                    status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                    content={
                        "error": f"Unsupported media type {media_type}; send application/json",
                        "code": "UNSUPPORTED_MEDIA_TYPE",
                    },
                )
        return await call_next(request)


def register_middlewares(app: FastAPI) -> None:
    app.add_middleware(ContentTypeValidationMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
