# rasoi/api/auth.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError

from rasoi.db.engine import get_engine
from rasoi.db.schema import users
from rasoi.models.users import LoginIn, RegisterIn, TokenOut, UserOut
from rasoi.security import (
    CurrentUser,
    create_token,
    get_current_user,
    hash_password,
    require_admin,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

USER_COLUMNS = (users.c.id, users.c.name, users.c.email, users.c.role, users.c.created_at)


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn) -> TokenOut:
    engine = get_engine()
    with engine.connect() as conn:
        row = conn.execute(
            select(*USER_COLUMNS, users.c.password_hash)
            .where(users.c.email == payload.email.lower())
        ).mappings().first()

    if row is None or not verify_password(payload.password, row["password_hash"]):
        logger.warning("Failed login for %s", payload.email)
        raise HTTPException(status_code=400, detail="Invalid email or password")

    token = create_token(row["id"], row["role"])
    return TokenOut(token=token, user=UserOut.model_validate(dict(row)))


@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: RegisterIn, admin: CurrentUser = Depends(require_admin)) -> UserOut:
    """
    Create a staff account. Only admins can add users.
    """
    engine = get_engine()
    try:
        with engine.begin() as conn:
            user_id = conn.execute(
                insert(users).values(
                    name=payload.name,
                    email=payload.email.lower(),
                    password_hash=hash_password(payload.password),
                    role=payload.role,
                )
            ).inserted_primary_key[0]
            row = conn.execute(
                select(*USER_COLUMNS).where(users.c.id == user_id)
            ).mappings().first()
    except IntegrityError:
        raise HTTPException(status_code=400, detail="Email already registered")

    logger.info("User %s registered as %s by user %s", payload.email, payload.role, admin.id)
    return UserOut.model_validate(dict(row))


@router.get("/me", response_model=UserOut)
def me(user: CurrentUser = Depends(get_current_user)) -> UserOut:
    engine = get_engine()
    with engine.connect() as conn:
        row = conn.execute(
            select(*USER_COLUMNS).where(users.c.id == user.id)
        ).mappings().first()
    if row is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserOut.model_validate(dict(row))
