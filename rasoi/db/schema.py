# rasoi/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, Integer, String, Numeric, Date, DateTime,
    ForeignKey, CheckConstraint, Text, func
)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("email", String, nullable=False, unique=True),
    Column("password_hash", String, nullable=False),
    Column("role", String, nullable=False, server_default="worker"),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint("role IN ('admin', 'worker')", name="ck_users_role"),
)

inventory_items = Table(
    "inventory_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("name_localized", String, nullable=False),
    Column("category", String, nullable=False),
    Column("unit", String, nullable=False),
    Column("total_quantity", Integer, nullable=False, server_default="0"),
    Column("price", Numeric(12, 2), nullable=False),
    Column("description", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint("total_quantity >= 0", name="ck_inventory_quantity_nonneg"),
    CheckConstraint("price >= 0", name="ck_inventory_price_nonneg"),
)

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_number", String, nullable=False, unique=True),
    Column("customer_name", String, nullable=False),
    Column("phone", String, nullable=False),
    Column("address", Text, nullable=False),
    Column("event_date", Date, nullable=False),
    Column("return_date", Date, nullable=False),
    Column("status", String, nullable=False, server_default="upcoming"),
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("paid_amount", Numeric(12, 2), nullable=False, server_default="0"),
    Column("created_by", Integer, ForeignKey("users.id", ondelete="SET NULL")),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint(
        "status IN ('upcoming', 'pending', 'completed')", name="ck_orders_status"
    ),
    CheckConstraint("return_date >= event_date", name="ck_orders_return_after_event"),
    CheckConstraint("total_amount >= 0", name="ck_orders_total_nonneg"),
    CheckConstraint(
        "paid_amount >= 0 AND paid_amount <= total_amount", name="ck_orders_paid_range"
    ),
)

# Line snapshots: item_name and rate are copied at creation time.
# item_id is kept for stock release but is not a foreign key, so removing
# a catalog item never touches historical orders.
order_items = Table(
    "order_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
    Column("item_id", Integer, nullable=False),
    Column("item_name", String, nullable=False),
    Column("rate", Numeric(12, 2), nullable=False),
    Column("quantity", Integer, nullable=False),
    CheckConstraint("quantity >= 1", name="ck_order_items_quantity_positive"),
    CheckConstraint("rate >= 0", name="ck_order_items_rate_nonneg"),
)

invoices = Table(
    "invoices",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("invoice_number", String, nullable=False, unique=True),
    Column("order_id", Integer, ForeignKey("orders.id"), nullable=False, unique=True),
    Column("issued_date", Date, nullable=False),
    Column("due_date", Date, nullable=False),
    Column("status", String, nullable=False, server_default="unpaid"),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint(
        "status IN ('unpaid', 'partial', 'paid')", name="ck_invoices_status"
    ),
    CheckConstraint("due_date >= issued_date", name="ck_invoices_due_after_issue"),
)
