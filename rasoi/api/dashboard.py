# rasoi/api/dashboard.py

from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy import func, select

from rasoi.db.engine import get_engine
from rasoi.db.schema import inventory_items, orders
from rasoi.models.dashboard import DashboardSummaryOut
from rasoi.security import CurrentUser, get_current_user
from rasoi.services.money import to_money

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummaryOut)
def summary(user: CurrentUser = Depends(get_current_user)) -> DashboardSummaryOut:
    """
    Order counts per status plus billed, collected and outstanding totals.
    """
    engine = get_engine()
    with engine.connect() as conn:
        status_rows = conn.execute(
            select(orders.c.status, func.count().label("n")).group_by(orders.c.status)
        ).all()

        totals = conn.execute(
            select(
                func.coalesce(func.sum(orders.c.total_amount), 0).label("billed"),
                func.coalesce(func.sum(orders.c.paid_amount), 0).label("collected"),
            )
        ).first()

        n_items = conn.execute(
            select(func.count()).select_from(inventory_items)
        ).scalar_one()

    by_status = {row.status: row.n for row in status_rows}
    billed = to_money(totals.billed or Decimal("0"))
    collected = to_money(totals.collected or Decimal("0"))

    return DashboardSummaryOut(
        total_orders=sum(by_status.values()),
        upcoming_orders=by_status.get("upcoming", 0),
        pending_orders=by_status.get("pending", 0),
        completed_orders=by_status.get("completed", 0),
        inventory_items=n_items,
        total_billed=billed,
        total_collected=collected,
        outstanding=billed - collected,
    )
