# rasoi/api/inventory.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete, func, insert, select, update

from rasoi.db.engine import get_engine
from rasoi.db.schema import inventory_items
from rasoi.models.common import OkOut
from rasoi.models.inventory import (
    InventoryItemIn,
    InventoryItemOut,
    InventoryItemUpdate,
)
from rasoi.security import CurrentUser, get_current_user, require_admin

router = APIRouter(prefix="/inventory", tags=["inventory"])


def _get_item(conn, item_id: int) -> InventoryItemOut:
    row = conn.execute(
        select(inventory_items).where(inventory_items.c.id == item_id)
    ).mappings().first()
    if row is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return InventoryItemOut.model_validate(dict(row))


@router.get("", response_model=List[InventoryItemOut])
def list_items(
    q: Optional[str] = Query(default=None, description="Case-insensitive name search"),
    category: Optional[str] = Query(default=None),
    user: CurrentUser = Depends(get_current_user),
) -> List[InventoryItemOut]:
    """
    Return the catalog, sorted by name. Used to fill the order form dropdowns.
    """
    stmt = select(inventory_items).order_by(inventory_items.c.name)
    if q:
        pattern = f"%{q.lower()}%"
        stmt = stmt.where(
            func.lower(inventory_items.c.name).like(pattern)
            | func.lower(inventory_items.c.name_localized).like(pattern)
        )
    if category:
        stmt = stmt.where(func.lower(inventory_items.c.category) == category.lower())

    engine = get_engine()
    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()

    return [InventoryItemOut.model_validate(dict(row)) for row in rows]


@router.get("/{item_id}", response_model=InventoryItemOut)
def get_item(item_id: int, user: CurrentUser = Depends(get_current_user)) -> InventoryItemOut:
    engine = get_engine()
    with engine.connect() as conn:
        return _get_item(conn, item_id)


@router.post("", response_model=InventoryItemOut, status_code=201)
def create_item(
    payload: InventoryItemIn, user: CurrentUser = Depends(require_admin)
) -> InventoryItemOut:
    engine = get_engine()
    with engine.begin() as conn:
        item_id = conn.execute(
            insert(inventory_items).values(**payload.model_dump())
        ).inserted_primary_key[0]
        return _get_item(conn, item_id)


@router.put("/{item_id}", response_model=InventoryItemOut)
def update_item(
    item_id: int,
    payload: InventoryItemUpdate,
    user: CurrentUser = Depends(require_admin),
) -> InventoryItemOut:
    """
    Edit catalog fields. Setting totalQuantity here is a stock count
    correction; existing orders keep their own name and rate snapshots.
    """
    updates = payload.model_dump(exclude_unset=True, exclude_none=True)

    engine = get_engine()
    with engine.begin() as conn:
        if updates:
            updates["updated_at"] = func.now()
            result = conn.execute(
                update(inventory_items)
                .where(inventory_items.c.id == item_id)
                .values(**updates)
            )
            if result.rowcount == 0:
                raise HTTPException(status_code=404, detail="Item not found")
        return _get_item(conn, item_id)


@router.delete("/{item_id}", response_model=OkOut)
def delete_item(item_id: int, user: CurrentUser = Depends(require_admin)) -> OkOut:
    engine = get_engine()
    with engine.begin() as conn:
        result = conn.execute(delete(inventory_items).where(inventory_items.c.id == item_id))
    if result.rowcount == 0:
        raise HTTPException(status_code=404, detail="Item not found")
    return OkOut()
