"""
Structured logging for Tableside.

Loggers accept keyword context next to the message:

    logger.info("Order submitted", order_id=12, total=5800)

Production writes one JSON object per line; other environments get a
coloured single-line format. Every record carries the request correlation
ID when one is set.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from tableside_shared.config.settings import settings

SERVICE_NAME = "tableside-api"

# Third-party loggers and the level they are held at
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "slowapi": logging.WARNING,
}


def _request_id(record: logging.LogRecord) -> str | None:
    request_id = getattr(record, "request_id", None)
    if not request_id or request_id == "-":
        return None
    return request_id


def _context(record: logging.LogRecord) -> dict[str, Any] | None:
    return getattr(record, "context", None) or None


class JsonFormatter(logging.Formatter):
    """One JSON document per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "env": settings.environment,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        request_id = _request_id(record)
        if request_id:
            entry["request_id"] = request_id

        context = _context(record)
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if settings.debug:
            entry["at"] = f"{record.pathname}:{record.lineno} in {record.funcName}"

        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Coloured single-line records for local development."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        parts = [f"{color}{clock} {record.levelname:<8}{self.RESET}"]
        request_id = _request_id(record)
        if request_id:
            parts.append(f"{self.DIM}{request_id[:8]}{self.RESET}")
        parts.append(f"{record.name}: {record.getMessage()}")

        line = " ".join(parts)
        context = _context(record)
        if context:
            line += "  " + " ".join(f"{key}={value}" for key, value in context.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods take keyword context."""

    def log_with_context(
        self,
        level: int,
        msg: str,
        args: tuple = (),
        exc_info: Any = None,
        **context: Any,
    ) -> None:
        if self.isEnabledFor(level):
            self._log(level, msg, args, exc_info=exc_info, extra={"context": context})

    def debug(self, msg: str, *args: Any, **context: Any) -> None:
        self.log_with_context(logging.DEBUG, msg, args, **context)

    def info(self, msg: str, *args: Any, **context: Any) -> None:
        self.log_with_context(logging.INFO, msg, args, **context)

    def warning(self, msg: str, *args: Any, **context: Any) -> None:
        self.log_with_context(logging.WARNING, msg, args, **context)

    def error(self, msg: str, *args: Any, exc_info: Any = None, **context: Any) -> None:
        self.log_with_context(logging.ERROR, msg, args, exc_info=exc_info, **context)

    def critical(self, msg: str, *args: Any, exc_info: Any = None, **context: Any) -> None:
        self.log_with_context(logging.CRITICAL, msg, args, exc_info=exc_info, **context)


logging.setLoggerClass(StructuredLogger)


def setup_logging() -> None:
    """Install the stdout handler on the root logger. Call once at startup."""
    from tableside_shared.infrastructure.correlation import CorrelationIdFilter

    level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(JsonFormatter() if settings.environment == "production" else ConsoleFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> StructuredLogger:
    """
    Usage:
        logger = get_logger(__name__)
        logger.warning("Cart conflict", session_id=41)
    """
    return logging.getLogger(name)  # type: ignore[return-value]


def mask_email(email: str | None) -> str:
    """Mask an address for logs: waiter@example.com becomes wa***@example.com."""
    if not email:
        return "<no-email>"
    local, sep, domain = email.partition("@")
    if not sep or not local:
        return "***@invalid"
    return f"{local[:2] if len(local) > 2 else local[:1]}***@{domain}"


api_logger = get_logger("tableside_api")
diner_logger = get_logger("tableside_api.diner")
auth_logger = get_logger("tableside_api.auth")

security_audit_logger = get_logger("security.audit")


def audit_auth_event(
    event_type: str,
    user_id: int | str | None = None,
    email: str | None = None,
    success: bool = True,
    reason: str | None = None,
    ip_address: str | None = None,
    **extra: Any,
) -> None:
    """
    Record an authentication event (LOGIN, TOKEN_REJECTED, ...) on the
    security audit logger. Failures log at WARNING.
    """
    security_audit_logger.log_with_context(
        logging.INFO if success else logging.WARNING,
        f"AUTH_AUDIT: {event_type}",
        event_type=event_type,
        user_id=user_id,
        email=mask_email(email),
        success=success,
        reason=reason,
        ip_address=ip_address,
        **extra,
    )
