# rasoi/services/numbering.py

from sqlalchemy import func, select
from sqlalchemy.engine import Connection
from sqlalchemy.sql.schema import Table

ORDER_PREFIX = "ORD"
INVOICE_PREFIX = "INV"


def format_number(prefix: str, existing: int) -> str:
    """ORD + (existing + 1) padded to four digits, e.g. ORD0001."""
    return f"{prefix}{existing + 1:04d}"


def next_number(conn: Connection, table: Table, prefix: str) -> str:
    """
    Number for the next row of ``table``, based on how many rows exist now.

    Two transactions counting at the same moment get the same number; the
    unique constraint on the number column turns that into an
    IntegrityError for the later insert.
    """
    existing = conn.execute(select(func.count()).select_from(table)).scalar_one()
    return format_number(prefix, existing)
