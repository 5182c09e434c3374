# rasoi/services/orders.py
"""
Order lifecycle: creation with stock reservation, forward-only status
changes, and stock release on completion.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import Connection

from rasoi.db.schema import inventory_items, order_items, orders, users
from rasoi.errors import InvalidTransition, NotFound, ValidationFailed
from rasoi.models.orders import OrderIn, OrderUpdate
from rasoi.services import ledger
from rasoi.services.money import TOLERANCE, ZERO, line_total, to_money
from rasoi.services.numbering import ORDER_PREFIX, next_number

logger = logging.getLogger(__name__)

STATUS_FLOW = ("upcoming", "pending", "completed")
INITIAL_STATUS = STATUS_FLOW[0]
FINAL_STATUS = STATUS_FLOW[-1]


def check_transition(current: str, target: str) -> bool:
    """
    Returns True if moving ``current`` -> ``target`` changes anything.

    Forward moves (skipping steps is fine) return True, repeating the current
    status returns False, anything else raises InvalidTransition.
    """
    if target not in STATUS_FLOW:
        raise InvalidTransition(f"Unknown status {target!r}", field="status")
    if current == target:
        return False
    if current == FINAL_STATUS:
        raise InvalidTransition("Completed orders cannot change status", field="status")
    if STATUS_FLOW.index(target) < STATUS_FLOW.index(current):
        raise InvalidTransition(
            f"Cannot move order back from {current} to {target}", field="status"
        )
    return True


def _snapshot_lines(conn: Connection, payload: OrderIn) -> List[dict]:
    ids = {line.item_id for line in payload.items}
    rows = conn.execute(
        select(inventory_items.c.id, inventory_items.c.name, inventory_items.c.price)
        .where(inventory_items.c.id.in_(ids))
    ).mappings().all()
    catalog = {row["id"]: row for row in rows}

    lines = []
    for line in payload.items:
        item = catalog.get(line.item_id)
        if item is None:
            raise NotFound(f"Inventory item {line.item_id} not found", field="items")
        rate = to_money(line.rate if line.rate is not None else item["price"])
        lines.append(
            {
                "item_id": item["id"],
                "item_name": item["name"],
                "rate": rate,
                "quantity": line.quantity,
            }
        )
    return lines


def compute_total(lines) -> Decimal:
    total = ZERO
    for line in lines:
        total += line_total(line["quantity"], line["rate"])
    return to_money(total)


def create_order(conn: Connection, payload: OrderIn, created_by: Optional[int]) -> int:
    """
    Insert an order with its line snapshots and reserve stock for every line.

    Must run inside a transaction: a failed reservation on any line raises,
    and the caller's rollback undoes the earlier lines.
    """
    lines = _snapshot_lines(conn, payload)
    total = compute_total(lines)

    if payload.total_amount is not None and abs(to_money(payload.total_amount) - total) > TOLERANCE:
        raise ValidationFailed(
            f"totalAmount {payload.total_amount} does not match the sum of items ({total})",
            field="totalAmount",
        )

    paid = to_money(payload.paid_amount)
    if paid > total:
        raise ValidationFailed("paidAmount cannot exceed totalAmount", field="paidAmount")

    order_number = next_number(conn, orders, ORDER_PREFIX)

    order_id = conn.execute(
        insert(orders).values(
            order_number=order_number,
            customer_name=payload.customer_name,
            phone=payload.phone,
            address=payload.address,
            event_date=payload.event_date,
            return_date=payload.return_date,
            status=INITIAL_STATUS,
            total_amount=total,
            paid_amount=paid,
            created_by=created_by,
        )
    ).inserted_primary_key[0]

    conn.execute(
        insert(order_items),
        [{"order_id": order_id, **line} for line in lines],
    )

    for line in lines:
        ledger.reserve(conn, line["item_id"], line["quantity"])

    logger.info(
        "Created order %s for %s: %s lines, total %s",
        order_number, payload.customer_name, len(lines), total,
    )
    return order_id


def change_status(conn: Connection, order_id: int, status: str) -> bool:
    """
    Move an order to ``status``; on entering ``completed`` every line's
    quantity goes back into stock. Returns False for a repeated status.
    """
    row = conn.execute(
        select(orders.c.order_number, orders.c.status).where(orders.c.id == order_id)
    ).first()
    if row is None:
        raise NotFound("Order not found")

    if not check_transition(row.status, status):
        return False

    # Guard on the status we read so a concurrent change cannot release twice
    result = conn.execute(
        update(orders)
        .where(orders.c.id == order_id, orders.c.status == row.status)
        .values(status=status, updated_at=func.now())
    )
    if result.rowcount == 0:
        raise InvalidTransition("Order status changed concurrently, reload and retry")

    if status == FINAL_STATUS:
        lines = conn.execute(
            select(order_items.c.item_id, order_items.c.quantity)
            .where(order_items.c.order_id == order_id)
        ).all()
        for line in lines:
            ledger.release(conn, line.item_id, line.quantity)

    logger.info("Order %s moved from %s to %s", row.order_number, row.status, status)
    return True


def update_details(conn: Connection, order_id: int, payload: OrderUpdate) -> None:
    current = conn.execute(
        select(orders.c.event_date, orders.c.return_date).where(orders.c.id == order_id)
    ).first()
    if current is None:
        raise NotFound("Order not found")

    updates = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        return

    event_date = updates.get("event_date", current.event_date)
    return_date = updates.get("return_date", current.return_date)
    if return_date < event_date:
        raise ValidationFailed("returnDate must be on or after eventDate", field="returnDate")

    updates["updated_at"] = func.now()
    conn.execute(update(orders).where(orders.c.id == order_id).values(**updates))


def _lines_by_order(conn: Connection, order_ids: List[int]) -> Dict[int, List[dict]]:
    grouped: Dict[int, List[dict]] = {order_id: [] for order_id in order_ids}
    if not order_ids:
        return grouped

    rows = conn.execute(
        select(order_items)
        .where(order_items.c.order_id.in_(order_ids))
        .order_by(order_items.c.id)
    ).mappings().all()

    for row in rows:
        grouped[row["order_id"]].append(
            {
                "id": row["id"],
                "item_id": row["item_id"],
                "item_name": row["item_name"],
                "rate": row["rate"],
                "quantity": row["quantity"],
                "line_total": line_total(row["quantity"], row["rate"]),
            }
        )
    return grouped


def _order_query():
    return (
        select(
            orders,
            users.c.name.label("creator_name"),
        )
        .select_from(orders.outerjoin(users, orders.c.created_by == users.c.id))
    )


def _row_to_order(row, lines: List[dict]) -> dict:
    total = to_money(row["total_amount"])
    paid = to_money(row["paid_amount"])
    creator = None
    if row["created_by"] is not None and row["creator_name"] is not None:
        creator = {"id": row["created_by"], "name": row["creator_name"]}
    return {
        "id": row["id"],
        "order_number": row["order_number"],
        "customer_name": row["customer_name"],
        "phone": row["phone"],
        "address": row["address"],
        "event_date": row["event_date"],
        "return_date": row["return_date"],
        "items": lines,
        "total_amount": total,
        "paid_amount": paid,
        "balance_due": total - paid,
        "status": row["status"],
        "created_by": creator,
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }


def fetch_order(conn: Connection, order_id: int) -> dict:
    row = conn.execute(_order_query().where(orders.c.id == order_id)).mappings().first()
    if row is None:
        raise NotFound("Order not found")
    lines = _lines_by_order(conn, [order_id])
    return _row_to_order(row, lines[order_id])


def list_orders(conn: Connection, status: Optional[str] = None) -> List[dict]:
    stmt = _order_query().order_by(orders.c.created_at.desc(), orders.c.id.desc())
    if status is not None:
        stmt = stmt.where(orders.c.status == status)
    rows = conn.execute(stmt).mappings().all()
    lines = _lines_by_order(conn, [row["id"] for row in rows])
    return [_row_to_order(row, lines[row["id"]]) for row in rows]
