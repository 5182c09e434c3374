# rasoi/models/invoices.py

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import Field

from rasoi.models.common import ApiModel, RequestModel
from rasoi.models.orders import OrderLineOut

InvoiceStatus = Literal["unpaid", "partial", "paid"]


class InvoiceIn(RequestModel):
    order_id: int = Field(..., alias="order", description="Completed order id")
    due_date: Optional[date] = Field(
        None, description="Defaults to the issued date plus the configured term"
    )
    status: Optional[InvoiceStatus] = Field(
        None, description="If given, must agree with the order's payments"
    )


class InvoiceUpdate(RequestModel):
    status: Optional[InvoiceStatus] = None
    paid_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    due_date: Optional[date] = None


class PaymentIn(RequestModel):
    amount: Decimal = Field(..., gt=0, decimal_places=2)


class InvoiceOrderOut(ApiModel):
    id: int
    order_number: str
    customer_name: str
    phone: str
    address: str
    event_date: date
    return_date: date
    items: List[OrderLineOut]
    total_amount: Decimal
    paid_amount: Decimal
    status: str


class InvoiceOut(ApiModel):
    id: int
    invoice_number: str
    order: InvoiceOrderOut
    issued_date: date
    due_date: date
    status: InvoiceStatus
    total_amount: Decimal
    paid_amount: Decimal
    balance_due: Decimal
    created_at: Optional[datetime] = None
