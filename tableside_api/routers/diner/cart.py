"""
Cart endpoints. The cart lives on the server, keyed by the table session.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tableside_api.models import TableSession
from tableside_api.routers.diner._deps import current_table_session
from tableside_api.services.domain import CartService
from tableside_shared.infrastructure.db import get_db
from tableside_shared.utils.schemas import (
    AddCartItemRequest,
    CartOutput,
    SelectionInput,
    UpdateCartLineRequest,
)


router = APIRouter(tags=["diner-cart"])


@router.get("/cart", response_model=CartOutput)
def get_cart(
    session: TableSession = Depends(current_table_session),
    db: Session = Depends(get_db),
) -> CartOutput:
    return CartService(db).get_cart(session)


@router.delete("/cart", response_model=CartOutput)
def clear_cart(
    session: TableSession = Depends(current_table_session),
    db: Session = Depends(get_db),
) -> CartOutput:
    return CartService(db).clear(session)


@router.post("/cart/items", response_model=CartOutput, status_code=status.HTTP_201_CREATED)
def add_cart_item(
    body: AddCartItemRequest,
    session: TableSession = Depends(current_table_session),
    db: Session = Depends(get_db),
) -> CartOutput:
    """
    Add one unit of a dish. Selections are checked against the dish's
    option groups; plain additions of the same dish merge.
    """
    return CartService(db).add_item(session, body)


@router.put("/cart/items/{index}", response_model=CartOutput)
def update_cart_item(
    index: int,
    body: UpdateCartLineRequest,
    session: TableSession = Depends(current_table_session),
    db: Session = Depends(get_db),
) -> CartOutput:
    """Set a line's quantity (0 removes it) and optionally its comment."""
    return CartService(db).update_line(session, index, body)


@router.post("/cart/items/{index}/options", response_model=CartOutput)
def toggle_cart_item_option(
    index: int,
    body: SelectionInput,
    session: TableSession = Depends(current_table_session),
    db: Session = Depends(get_db),
) -> CartOutput:
    """Switch one option of a line on or off. Single-choice groups swap their pick."""
    return CartService(db).toggle_line_option(session, index, body)


@router.delete("/cart/items/{index}", response_model=CartOutput)
def remove_cart_item(
    index: int,
    session: TableSession = Depends(current_table_session),
    db: Session = Depends(get_db),
) -> CartOutput:
    return CartService(db).remove_line(session, index)
