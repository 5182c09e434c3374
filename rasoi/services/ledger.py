# rasoi/services/ledger.py
"""
Inventory ledger: how orders move ``inventory_items.total_quantity``.

Both operations are single UPDATE statements so concurrent requests never
read-then-write the quantity.
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.engine import Connection

from rasoi.db.schema import inventory_items
from rasoi.errors import InsufficientStock, NotFound, ValidationFailed

logger = logging.getLogger(__name__)


def reserve(conn: Connection, item_id: int, quantity: int) -> None:
    """Take ``quantity`` units out of stock, failing if that would go negative."""
    if quantity < 1:
        raise ValidationFailed("Quantity must be at least 1", field="quantity")

    stmt = (
        update(inventory_items)
        .where(
            inventory_items.c.id == item_id,
            inventory_items.c.total_quantity >= quantity,
        )
        .values(
            total_quantity=inventory_items.c.total_quantity - quantity,
            updated_at=func.now(),
        )
    )
    result = conn.execute(stmt)
    if result.rowcount == 1:
        return

    # Nothing matched: either the item is gone or there is not enough of it
    row = conn.execute(
        select(inventory_items.c.name, inventory_items.c.total_quantity)
        .where(inventory_items.c.id == item_id)
    ).first()
    if row is None:
        raise NotFound(f"Inventory item {item_id} not found", field="item")

    logger.warning(
        "Reservation of %s x %s rejected, only %s available",
        quantity, row.name, row.total_quantity,
    )
    raise InsufficientStock(
        f"Insufficient stock for {row.name}: requested {quantity}, "
        f"available {row.total_quantity}",
        field="quantity",
    )


def release(conn: Connection, item_id: int, quantity: int) -> bool:
    """
    Put ``quantity`` units back into stock.

    Returns False when the item no longer exists in the catalog; the
    returned units then have nowhere to go and are only logged.
    """
    stmt = (
        update(inventory_items)
        .where(inventory_items.c.id == item_id)
        .values(
            total_quantity=inventory_items.c.total_quantity + quantity,
            updated_at=func.now(),
        )
    )
    result = conn.execute(stmt)
    if result.rowcount == 0:
        logger.warning("Release of %s units skipped, item %s was deleted", quantity, item_id)
        return False
    return True
