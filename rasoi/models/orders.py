# rasoi/models/orders.py

from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import Field, model_validator

from rasoi.models.common import ApiModel, RequestModel

OrderStatus = Literal["upcoming", "pending", "completed"]


class OrderLineIn(RequestModel):
    item_id: int = Field(..., alias="item", description="Inventory item id")
    quantity: int = Field(..., ge=1)
    rate: Optional[Decimal] = Field(
        None, ge=0, decimal_places=2,
        description="Rate per unit; defaults to the item's current price",
    )
    # Accepted for older clients; the stored name always comes from the catalog
    item_name: Optional[str] = None


class OrderIn(RequestModel):
    customer_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    event_date: date
    return_date: date
    items: List[OrderLineIn] = Field(..., min_length=1)
    total_amount: Optional[Decimal] = Field(None, ge=0)
    paid_amount: Decimal = Field(Decimal("0"), ge=0)

    @model_validator(mode="after")
    def check_dates(self):
        if self.return_date < self.event_date:
            raise ValueError("returnDate must be on or after eventDate")
        return self


class OrderUpdate(RequestModel):
    customer_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = Field(None, min_length=1)
    event_date: Optional[date] = None
    return_date: Optional[date] = None


class OrderStatusIn(RequestModel):
    status: OrderStatus


class OrderLineOut(ApiModel):
    id: int
    item_id: int = Field(..., alias="item")
    item_name: str
    rate: Decimal
    quantity: int
    line_total: Decimal


class CreatorOut(ApiModel):
    id: int
    name: str


class OrderOut(ApiModel):
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
    balance_due: Decimal
    status: OrderStatus
    created_by: Optional[CreatorOut] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
