from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    admin = "admin"
    user = "user"


class User(BaseModel):
    id: int
    email: str
    role: Role = Role.user


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResult(BaseModel):
    token: str = Field(..., min_length=1)
    user: User


@dataclass(frozen=True, slots=True)
class Session:
    token: str
    user: User

    @property
    def is_admin(self) -> bool:
        return self.user.role is Role.admin
