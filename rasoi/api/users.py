# rasoi/api/users.py

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, select

from rasoi.api.auth import USER_COLUMNS
from rasoi.db.engine import get_engine
from rasoi.db.schema import users
from rasoi.models.common import OkOut
from rasoi.models.users import UserOut
from rasoi.security import CurrentUser, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserOut])
def list_users(admin: CurrentUser = Depends(require_admin)) -> List[UserOut]:
    engine = get_engine()
    with engine.connect() as conn:
        rows = conn.execute(select(*USER_COLUMNS).order_by(users.c.name)).mappings().all()
    return [UserOut.model_validate(dict(row)) for row in rows]


@router.delete("/{user_id}", response_model=OkOut)
def delete_user(user_id: int, admin: CurrentUser = Depends(require_admin)) -> OkOut:
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    engine = get_engine()
    with engine.begin() as conn:
        result = conn.execute(delete(users).where(users.c.id == user_id))
    if result.rowcount == 0:
        raise HTTPException(status_code=404, detail="User not found")

    logger.info("User %s deleted by user %s", user_id, admin.id)
    return OkOut()
