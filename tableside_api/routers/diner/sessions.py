"""
Table scan endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tableside_api.models import TableSession
from tableside_api.routers.diner._deps import current_table_session
from tableside_api.services.domain import TableSessionService
from tableside_shared.infrastructure.db import get_db
from tableside_shared.utils.admin_schemas import DeleteResponse
from tableside_shared.utils.schemas import OpenSessionRequest, SessionOutput


router = APIRouter(tags=["diner-sessions"])


@router.post("/sessions", response_model=SessionOutput, status_code=status.HTTP_201_CREATED)
def open_session(body: OpenSessionRequest, db: Session = Depends(get_db)) -> SessionOutput:
    """
    Open a session for the scanned table. Each scan gets its own session
    and cart; send the returned token as X-Table-Token afterwards.
    """
    return TableSessionService(db).open_session(body.table_number)


@router.delete("/sessions/current", response_model=DeleteResponse)
def close_session(
    session: TableSession = Depends(current_table_session),
    db: Session = Depends(get_db),
) -> DeleteResponse:
    """Close the current session and discard its cart."""
    TableSessionService(db).close_session(session)
    return DeleteResponse(message="Session closed", id=session.id)
