"""
CORS configuration.

``ALLOWED_ORIGINS`` (comma-separated) wins when set; otherwise the local
diner and back-office dev servers are allowed.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tableside_shared.config.settings import settings
from tableside_shared.infrastructure.correlation import REQUEST_ID_HEADER


DEV_ORIGINS = [
    f"http://{host}:{port}"
    for host in ("localhost", "127.0.0.1")
    for port in (3000, 5173)
]

CLIENT_HEADERS = [
    "Accept",
    "Accept-Language",
    "Authorization",
    "Content-Type",
    "X-Table-Token",
    REQUEST_ID_HEADER,
]


def get_cors_origins() -> list[str]:
    configured = [origin.strip() for origin in settings.allowed_origins.split(",")]
    return [origin for origin in configured if origin] or DEV_ORIGINS


def configure_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=CLIENT_HEADERS,
        expose_headers=[REQUEST_ID_HEADER, "Retry-After"],
        max_age=0 if settings.environment == "development" else 600,
    )
