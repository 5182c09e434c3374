# rasoi/models/users.py

from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field

from rasoi.models.common import ApiModel, RequestModel

Role = Literal["admin", "worker"]


class LoginIn(RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterIn(RequestModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    role: Role = "worker"


class UserOut(ApiModel):
    id: int
    name: str
    email: EmailStr
    role: Role
    created_at: Optional[datetime] = None


class TokenOut(ApiModel):
    token: str
    token_type: str = "bearer"
    user: UserOut
