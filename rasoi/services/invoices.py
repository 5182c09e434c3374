# rasoi/services/invoices.py
"""
Invoices derived from completed orders, and the payments recorded against them.

The paid amount lives on the order; an invoice's status is always derived
from the order's paid and total amounts.
"""

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import insert, select, update, func
from sqlalchemy.engine import Connection
from zoneinfo import ZoneInfo

from rasoi import config
from rasoi.db.schema import invoices, orders
from rasoi.errors import Conflict, NotFound, Overpayment, ValidationFailed
from rasoi.services.money import ZERO, to_money
from rasoi.services.numbering import INVOICE_PREFIX, next_number
from rasoi.services.orders import FINAL_STATUS, fetch_order

logger = logging.getLogger(__name__)


def today() -> date:
    return datetime.now(ZoneInfo(config.TIMEZONE)).date()


def derive_status(paid: Decimal, total: Decimal) -> str:
    paid = to_money(paid)
    total = to_money(total)
    if paid >= total:
        return "paid"
    if paid > ZERO:
        return "partial"
    return "unpaid"


def add_payment(paid: Decimal, amount: Decimal, total: Decimal) -> Decimal:
    """New paid amount after ``amount`` more comes in. Overpaying is an error."""
    amount = to_money(amount)
    if amount < ZERO:
        raise ValidationFailed("Payment amount cannot be negative", field="amount")
    new_paid = to_money(paid) + amount
    balance = to_money(total) - to_money(paid)
    if new_paid > to_money(total):
        raise Overpayment(
            f"Payment of {amount} exceeds the balance due ({balance})", field="amount"
        )
    return new_paid


def resolve_payment(
    status: Optional[str], paid_amount: Optional[Decimal], total: Decimal
) -> Optional[Decimal]:
    """
    Paid amount for a direct edit of an invoice.

    ``paid_amount`` wins when given, and ``status`` (if also given) has to
    agree with it. ``status`` alone means: paid settles the total, unpaid
    resets to zero. Returns None when neither is given.
    """
    total = to_money(total)

    if paid_amount is not None:
        paid = to_money(paid_amount)
        if paid > total:
            raise Overpayment(
                f"paidAmount {paid} exceeds the order total ({total})", field="paidAmount"
            )
        if status is not None and derive_status(paid, total) != status:
            raise ValidationFailed(
                f"status {status!r} does not match paidAmount {paid} of {total}",
                field="status",
            )
        return paid

    if status is None:
        return None
    if status == "paid":
        return total
    if status == "unpaid":
        return ZERO
    raise ValidationFailed("A partial status needs a paidAmount", field="paidAmount")


def _set_order_paid(conn: Connection, order_id: int, paid: Decimal) -> None:
    conn.execute(
        update(orders)
        .where(orders.c.id == order_id)
        .values(paid_amount=paid, updated_at=func.now())
    )


def _load(conn: Connection, invoice_id: int):
    row = conn.execute(
        select(
            invoices.c.id,
            invoices.c.invoice_number,
            invoices.c.order_id,
            invoices.c.issued_date,
            orders.c.total_amount,
            orders.c.paid_amount,
        )
        .select_from(invoices.join(orders))
        .where(invoices.c.id == invoice_id)
    ).first()
    if row is None:
        raise NotFound("Invoice not found")
    return row


def create_invoice(
    conn: Connection,
    order_id: int,
    due_date: Optional[date] = None,
    status: Optional[str] = None,
) -> int:
    order = conn.execute(
        select(
            orders.c.order_number,
            orders.c.status,
            orders.c.total_amount,
            orders.c.paid_amount,
        ).where(orders.c.id == order_id)
    ).first()
    if order is None:
        raise NotFound("Order not found", field="order")
    if order.status != FINAL_STATUS:
        raise ValidationFailed(
            f"Order {order.order_number} is {order.status}; only completed orders can be invoiced",
            field="order",
        )

    existing = conn.execute(
        select(invoices.c.invoice_number).where(invoices.c.order_id == order_id)
    ).first()
    if existing is not None:
        raise Conflict(
            f"Order {order.order_number} already has invoice {existing.invoice_number}",
            field="order",
        )

    issued = today()
    if due_date is None:
        due_date = issued + timedelta(days=config.INVOICE_DUE_DAYS)
    if due_date < issued:
        raise ValidationFailed("dueDate cannot be before the issued date", field="dueDate")

    derived = derive_status(order.paid_amount, order.total_amount)
    if status is not None and status != derived:
        raise ValidationFailed(
            f"status {status!r} does not match the order's payments ({derived})",
            field="status",
        )

    invoice_number = next_number(conn, invoices, INVOICE_PREFIX)
    invoice_id = conn.execute(
        insert(invoices).values(
            invoice_number=invoice_number,
            order_id=order_id,
            issued_date=issued,
            due_date=due_date,
            status=derived,
        )
    ).inserted_primary_key[0]

    logger.info(
        "Issued invoice %s for order %s, due %s (%s)",
        invoice_number, order.order_number, due_date, derived,
    )
    return invoice_id


def record_payment(conn: Connection, invoice_id: int, amount: Decimal) -> str:
    """
    Add ``amount`` to the order's paid amount and re-derive the invoice status.

    The increment is a single guarded UPDATE, so concurrent payments add up
    and together can never push the paid amount past the total.
    """
    row = _load(conn, invoice_id)
    amount = to_money(amount)
    # Balance check for the error message; the guarded UPDATE is authoritative
    add_payment(row.paid_amount, amount, row.total_amount)

    new_paid = func.round(orders.c.paid_amount + amount, 2)
    result = conn.execute(
        update(orders)
        .where(orders.c.id == row.order_id, new_paid <= orders.c.total_amount)
        .values(paid_amount=new_paid, updated_at=func.now())
    )
    if result.rowcount == 0:
        logger.warning(
            "Payment of %s on invoice %s rejected, balance changed concurrently",
            amount, row.invoice_number,
        )
        raise Overpayment(f"Payment of {amount} exceeds the balance due", field="amount")

    current = conn.execute(
        select(orders.c.paid_amount, orders.c.total_amount).where(orders.c.id == row.order_id)
    ).one()
    paid = to_money(current.paid_amount)
    status = derive_status(paid, current.total_amount)
    conn.execute(update(invoices).where(invoices.c.id == invoice_id).values(status=status))

    logger.info(
        "Payment of %s on invoice %s, paid %s of %s (%s)",
        amount, row.invoice_number, paid, to_money(current.total_amount), status,
    )
    return status


def edit_invoice(
    conn: Connection,
    invoice_id: int,
    status: Optional[str] = None,
    paid_amount: Optional[Decimal] = None,
    due_date: Optional[date] = None,
) -> None:
    row = _load(conn, invoice_id)

    if due_date is not None:
        if due_date < row.issued_date:
            raise ValidationFailed("dueDate cannot be before the issued date", field="dueDate")
        conn.execute(update(invoices).where(invoices.c.id == invoice_id).values(due_date=due_date))

    paid = resolve_payment(status, paid_amount, row.total_amount)
    if paid is None:
        return

    new_status = derive_status(paid, row.total_amount)
    _set_order_paid(conn, row.order_id, paid)
    conn.execute(update(invoices).where(invoices.c.id == invoice_id).values(status=new_status))
    logger.info(
        "Invoice %s set to paid %s of %s (%s)",
        row.invoice_number, paid, to_money(row.total_amount), new_status,
    )


def _row_to_invoice(conn: Connection, row) -> dict:
    order = fetch_order(conn, row["order_id"])
    return {
        "id": row["id"],
        "invoice_number": row["invoice_number"],
        "order": order,
        "issued_date": row["issued_date"],
        "due_date": row["due_date"],
        "status": row["status"],
        "total_amount": order["total_amount"],
        "paid_amount": order["paid_amount"],
        "balance_due": order["balance_due"],
        "created_at": row["created_at"],
    }


def fetch_invoice(conn: Connection, invoice_id: int) -> dict:
    row = conn.execute(select(invoices).where(invoices.c.id == invoice_id)).mappings().first()
    if row is None:
        raise NotFound("Invoice not found")
    return _row_to_invoice(conn, row)


def list_invoices(conn: Connection, status: Optional[str] = None) -> List[dict]:
    stmt = select(invoices).order_by(invoices.c.created_at.desc(), invoices.c.id.desc())
    if status is not None:
        stmt = stmt.where(invoices.c.status == status)
    rows = conn.execute(stmt).mappings().all()
    return [_row_to_invoice(conn, row) for row in rows]
