"""
Diner dependencies: resolve the X-Table-Token header to a usable session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from tableside_api.models import TableSession
from tableside_api.services.domain import TableSessionService
from tableside_shared.infrastructure.db import get_db
from tableside_shared.security.auth import current_table_context


def current_table_session(
    table_ctx: dict[str, int] = Depends(current_table_context),
    db: Session = Depends(get_db),
) -> TableSession:
    """
    FastAPI dependency returning the open session behind the table token.

    Raises 401 SESSION_EXPIRED once the session is closed or expired.
    """
    return TableSessionService(db).get_usable_session(table_ctx)
