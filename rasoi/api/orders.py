# rasoi/api/orders.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from rasoi.db.engine import get_engine
from rasoi.models.orders import (
    OrderIn,
    OrderOut,
    OrderStatus,
    OrderStatusIn,
    OrderUpdate,
)
from rasoi.security import CurrentUser, get_current_user
from rasoi.services import orders as order_service

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderIn, user: CurrentUser = Depends(get_current_user)
) -> OrderOut:
    """
    Create an order, snapshotting item names and rates and reserving stock.
    Nothing is written if any line cannot be reserved.
    """
    engine = get_engine()
    with engine.begin() as conn:
        order_id = order_service.create_order(conn, payload, created_by=user.id)
        return OrderOut.model_validate(order_service.fetch_order(conn, order_id))


@router.get("", response_model=List[OrderOut])
def list_orders(
    status: Optional[OrderStatus] = Query(default=None, description="upcoming | pending | completed"),
    user: CurrentUser = Depends(get_current_user),
) -> List[OrderOut]:
    """
    Return orders newest first, with their lines and the creator's name.
    """
    engine = get_engine()
    with engine.connect() as conn:
        rows = order_service.list_orders(conn, status)
    return [OrderOut.model_validate(row) for row in rows]


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, user: CurrentUser = Depends(get_current_user)) -> OrderOut:
    engine = get_engine()
    with engine.connect() as conn:
        return OrderOut.model_validate(order_service.fetch_order(conn, order_id))


@router.put("/{order_id}", response_model=OrderOut)
def update_order(
    order_id: int,
    payload: OrderUpdate,
    user: CurrentUser = Depends(get_current_user),
) -> OrderOut:
    """
    Edit customer and schedule details. Lines, amounts and status are not
    editable here.
    """
    engine = get_engine()
    with engine.begin() as conn:
        order_service.update_details(conn, order_id, payload)
        return OrderOut.model_validate(order_service.fetch_order(conn, order_id))


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    user: CurrentUser = Depends(get_current_user),
) -> OrderOut:
    """
    Move an order forward. Completing it returns its items to stock;
    repeating the current status changes nothing.
    """
    engine = get_engine()
    with engine.begin() as conn:
        order_service.change_status(conn, order_id, payload.status)
        return OrderOut.model_validate(order_service.fetch_order(conn, order_id))
