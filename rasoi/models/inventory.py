# rasoi/models/inventory.py

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from rasoi.models.common import ApiModel, RequestModel


class InventoryItemIn(RequestModel):
    name: str = Field(..., min_length=1, description="Item name")
    name_localized: str = Field(..., min_length=1, description="Item name in Gujarati")
    category: str = Field(..., min_length=1)
    unit: str = Field(..., min_length=1, description="e.g. pcs, set, kg")
    total_quantity: int = Field(0, ge=0, description="Units in stock")
    price: Decimal = Field(..., ge=0, decimal_places=2, description="Rental rate per unit")
    description: Optional[str] = None


class InventoryItemUpdate(RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    name_localized: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    unit: Optional[str] = Field(None, min_length=1)
    total_quantity: Optional[int] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    description: Optional[str] = None


class InventoryItemOut(ApiModel):
    id: int
    name: str
    name_localized: str
    category: str
    unit: str
    total_quantity: int
    price: Decimal
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
