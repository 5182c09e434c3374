# rasoi/models/dashboard.py

from decimal import Decimal

from rasoi.models.common import ApiModel


class DashboardSummaryOut(ApiModel):
    total_orders: int
    upcoming_orders: int
    pending_orders: int
    completed_orders: int
    inventory_items: int
    total_billed: Decimal
    total_collected: Decimal
    outstanding: Decimal
