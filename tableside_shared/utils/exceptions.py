"""
Centralized HTTP exceptions for consistent error handling.

Every exception carries a stable ``code`` so clients can react
programmatically. The error handlers in ``tableside_api.core.errors``
render them as ``{"error": detail, "code": code}``.

Usage:
    from tableside_shared.utils.exceptions import NotFoundError, ValidationError

    raise NotFoundError("Option group")
    raise ValidationError("selectionType must be 'single' or 'multiple'", code="INVALID_SELECTION_TYPE")
"""

from typing import Any

from fastapi import HTTPException, status

from tableside_shared.config.logging import get_logger

logger = get_logger(__name__)


INTERNAL_ERROR_PREFIX = "Internal server error: "


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    default_code: str | None = None

    def __init__(
        self,
        status_code: int,
        detail: str,
        code: str | None = None,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        self.code = code or self.default_code

        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, code=self.code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 401 / 403
# =============================================================================


class UnauthorizedError(AppException):
    """Missing or invalid credentials (401)."""

    default_code = "UNAUTHORIZED"

    def __init__(self, detail: str = "Authentication required", code: str | None = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            code=code,
            log_level="warning",
            **log_context,
        )


class ForbiddenError(AppException):
    """
    Authorization/permission error (403).

    Usage:
        raise ForbiddenError("edit the catalog")
    """

    default_code = "FORBIDDEN"

    def __init__(self, action: str | None = None, **log_context: Any):
        if action:
            detail = f"Not allowed to {action}"
        else:
            detail = "Access denied"

        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            log_level="warning",
            action=action,
            **log_context,
        )


class InsufficientRoleError(ForbiddenError):
    """User doesn't have the required role."""

    def __init__(self, required_roles: list[str], **log_context: Any):
        roles_str = ", ".join(sorted(required_roles))
        super().__init__(
            f"perform this action (requires role: {roles_str})",
            required_roles=sorted(required_roles),
            **log_context,
        )


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    The message never includes the id so clients get a stable text:

        raise NotFoundError("Option group", group_id)  # "Option group not found"
    """

    default_code = "NOT_FOUND"

    def __init__(
        self,
        entity: str,
        entity_id: int | str | None = None,
        code: str | None = None,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{entity} not found",
            code=code,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Quantity must be zero or positive", code="INVALID_QUANTITY", quantity=-1)
    """

    default_code = "VALIDATION_ERROR"

    def __init__(self, detail: str, code: str | None = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code=code,
            log_level="warning",
            **log_context,
        )


class InvalidStatusError(ValidationError):
    """Unknown status value."""

    default_code = "INVALID_STATUS"

    def __init__(self, entity: str, value: str, allowed: list[str], **log_context: Any):
        detail = f"Invalid {entity} status '{value}', expected one of: {', '.join(allowed)}"
        super().__init__(detail, entity=entity, value=value, **log_context)


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409).

    Usage:
        raise ConflictError("Category already exists", code="DUPLICATE_CATEGORY")
    """

    default_code = "CONFLICT"

    def __init__(self, detail: str, code: str | None = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            code=code,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    The underlying message is appended for diagnostics:

        raise InternalError("connection reset")  # "Internal server error: connection reset"
    """

    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str = "unexpected failure", code: str | None = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{INTERNAL_ERROR_PREFIX}{message}",
            code=code,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """Database operation failed."""

    default_code = "DATABASE_ERROR"

    def __init__(self, operation: str, error: Exception | str | None = None, **log_context: Any):
        message = f"database error during {operation}"
        if error is not None:
            message = f"{message}: {error}"
        super().__init__(message, operation=operation, **log_context)
