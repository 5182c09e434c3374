# rasoi/api/invoices.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from rasoi.db.engine import get_engine
from rasoi.models.invoices import (
    InvoiceIn,
    InvoiceOut,
    InvoiceStatus,
    InvoiceUpdate,
    PaymentIn,
)
from rasoi.security import CurrentUser, get_current_user, require_admin
from rasoi.services import invoices as invoice_service

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("", response_model=InvoiceOut, status_code=201)
def create_invoice(
    payload: InvoiceIn, user: CurrentUser = Depends(get_current_user)
) -> InvoiceOut:
    """
    Issue the invoice for a completed order. Each order gets at most one.
    """
    engine = get_engine()
    with engine.begin() as conn:
        invoice_id = invoice_service.create_invoice(
            conn, payload.order_id, due_date=payload.due_date, status=payload.status
        )
        return InvoiceOut.model_validate(invoice_service.fetch_invoice(conn, invoice_id))


@router.get("", response_model=List[InvoiceOut])
def list_invoices(
    status: Optional[InvoiceStatus] = Query(default=None, description="unpaid | partial | paid"),
    user: CurrentUser = Depends(get_current_user),
) -> List[InvoiceOut]:
    engine = get_engine()
    with engine.connect() as conn:
        rows = invoice_service.list_invoices(conn, status)
    return [InvoiceOut.model_validate(row) for row in rows]


@router.get("/{invoice_id}", response_model=InvoiceOut)
def get_invoice(invoice_id: int, user: CurrentUser = Depends(get_current_user)) -> InvoiceOut:
    """
    Look up a single invoice with everything needed to print it.
    """
    engine = get_engine()
    with engine.connect() as conn:
        return InvoiceOut.model_validate(invoice_service.fetch_invoice(conn, invoice_id))


@router.put("/{invoice_id}", response_model=InvoiceOut)
def update_invoice(
    invoice_id: int,
    payload: InvoiceUpdate,
    user: CurrentUser = Depends(require_admin),
) -> InvoiceOut:
    """
    Set the paid amount and/or status directly, or move the due date.
    """
    engine = get_engine()
    with engine.begin() as conn:
        invoice_service.edit_invoice(
            conn,
            invoice_id,
            status=payload.status,
            paid_amount=payload.paid_amount,
            due_date=payload.due_date,
        )
        return InvoiceOut.model_validate(invoice_service.fetch_invoice(conn, invoice_id))


@router.post("/{invoice_id}/payments", response_model=InvoiceOut)
def record_payment(
    invoice_id: int,
    payload: PaymentIn,
    user: CurrentUser = Depends(get_current_user),
) -> InvoiceOut:
    """
    Add a payment to the invoice's order. Paying more than the balance due
    is rejected.
    """
    engine = get_engine()
    with engine.begin() as conn:
        invoice_service.record_payment(conn, invoice_id, payload.amount)
        return InvoiceOut.model_validate(invoice_service.fetch_invoice(conn, invoice_id))
