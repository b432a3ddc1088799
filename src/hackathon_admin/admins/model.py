from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Admin:
    admin_id: int
    username: str
    password_hash: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        # Never expose the hash.
        return {"id": self.admin_id, "username": self.username}


@dataclass(frozen=True)
class LoginResult:
    token: str
    admin: Admin

    def to_dict(self) -> dict:
        return {"message": "Login successful", "token": self.token, "admin": self.admin.to_dict()}
