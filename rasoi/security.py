# rasoi/security.py
"""
Password hashing (bcrypt) and bearer tokens (PyJWT).

Tokens carry ``{"userId", "role", "exp"}``. A request without a token gets
401; a token that does not verify or has expired gets 403, as does a user
whose role is not allowed on the route.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rasoi import config

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def create_token(user_id: int, role: str, expires_in: Optional[timedelta] = None) -> str:
    if expires_in is None:
        expires_in = timedelta(hours=config.JWT_EXPIRES_HOURS)
    payload = {
        "userId": user_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> CurrentUser:
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=403, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=403, detail="Invalid token")

    user_id = payload.get("userId")
    role = payload.get("role")
    if not isinstance(user_id, int) or role not in ("admin", "worker"):
        raise HTTPException(status_code=403, detail="Invalid token")
    return CurrentUser(id=user_id, role=role)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=401,
            detail="No authentication token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return decode_token(credentials.credentials)


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        logger.warning("User %s (%s) denied an admin-only route", user.id, user.role)
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
