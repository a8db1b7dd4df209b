"""
Table Session Service.

A scan of a table's code opens a fresh session and returns a table token
bound to it. Every diner request resolves the token back to a usable
session; an expired one is closed and its cart purged on detection.

Usage:
    service = TableSessionService(db)
    opened = service.open_session(table_number=7)
    session = service.get_usable_session(table_ctx)
"""

from __future__ import annotations

from datetime import timedelta

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tableside_api.models import Cart, Table, TableSession, as_utc, utcnow
from tableside_shared.config.constants import SessionStatus
from tableside_shared.config.logging import diner_logger as logger
from tableside_shared.config.settings import settings
from tableside_shared.infrastructure.db import get_db_context, safe_commit
from tableside_shared.security.auth import sign_table_token
from tableside_shared.utils.exceptions import DatabaseError, NotFoundError, UnauthorizedError
from tableside_shared.utils.schemas import SessionOutput


class SessionExpiredError(UnauthorizedError):
    """The table session is closed or past its expiry."""

    def __init__(self, session_id: int | None = None):
        super().__init__(
            "Table session has expired, please scan the table code again",
            code="SESSION_EXPIRED",
            session_id=session_id,
        )


class TableSessionService:
    """
    Business rules:
    - Only active tables can be scanned
    - Each scan opens its own session; sessions are never shared
    - A session expires table_session_ttl_minutes after opening
    - A closed or expired session has no cart
    """

    def __init__(self, db: Session):
        self._db = db

    def open_session(self, table_number: int) -> SessionOutput:
        table = self._db.scalar(
            select(Table).where(Table.number == table_number, Table.is_active.is_(True))
        )
        if table is None:
            raise NotFoundError("Table", table_number, code="TABLE_NOT_FOUND")

        now = utcnow()
        session = TableSession(
            table_id=table.id,
            status=SessionStatus.OPEN,
            opened_at=now,
            expires_at=now + timedelta(minutes=settings.table_session_ttl_minutes),
        )
        self._db.add(session)
        self._commit("open table session", table_id=table.id)
        self._db.refresh(session)

        expires_at = as_utc(session.expires_at)
        logger.info("Table session opened", table_id=table.id, session_id=session.id)
        return SessionOutput(
            table_token=sign_table_token(table.id, session.id, expires_at),
            session_id=session.id,
            table_id=table.id,
            table_number=table.number,
            expires_at=expires_at,
        )

    def get_usable_session(self, table_ctx: dict[str, int]) -> TableSession:
        """
        Resolve a verified table token to its open session.

        Raises:
            UnauthorizedError: INVALID_TOKEN when the session does not match.
            SessionExpiredError: When the session is closed or expired.
        """
        session = self._db.get(TableSession, table_ctx["session_id"])
        if session is None or session.table_id != table_ctx["table_id"]:
            raise UnauthorizedError("Invalid table token", code="INVALID_TOKEN")

        if not session.is_usable():
            if session.status == SessionStatus.OPEN:
                self._end(session)
                self._commit("expire table session", session_id=session.id)
                logger.info("Table session expired", session_id=session.id)
            raise SessionExpiredError(session.id)
        return session

    def close_session(self, session: TableSession) -> None:
        self._end(session)
        self._commit("close table session", session_id=session.id)
        logger.info("Table session closed", session_id=session.id)

    def purge_expired(self) -> int:
        """Close every open session past its expiry. Returns the number closed."""
        now = utcnow()
        expired = [
            s
            for s in self._db.scalars(
                select(TableSession).where(TableSession.status == SessionStatus.OPEN)
            ).all()
            if not s.is_usable(now)
        ]
        for session in expired:
            self._end(session)
        if expired:
            self._commit("purge expired sessions", count=len(expired))
        return len(expired)

    # =========================================================================

    def _end(self, session: TableSession) -> None:
        session.status = SessionStatus.CLOSED
        session.closed_at = utcnow()
        self._db.execute(delete(Cart).where(Cart.session_id == session.id))

    def _commit(self, operation: str, **log_context) -> None:
        try:
            safe_commit(self._db)
        except SQLAlchemyError as e:
            logger.error(f"Failed to {operation}", error=str(e), **log_context)
            raise DatabaseError(operation, e)


def purge_expired_sessions() -> int:
    """Close expired sessions in a session of its own. Used by the CLI and the background sweep."""
    with get_db_context() as db:
        closed = TableSessionService(db).purge_expired()
    if closed:
        logger.info("Expired table sessions purged", count=closed)
    return closed
