from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Admin
from .repository import AdminRepository


def _row_to_admin(r: dict) -> Admin:
    return Admin(
        admin_id=int(r["id"]),
        username=r["username"],
        password_hash=r["password_hash"],
        created_at=r.get("created_at"),
    )


class MySQLAdminRepository(AdminRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_username(self, username: str) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, username, password_hash, created_at FROM admins WHERE username=%s",
                (username,),
            )
            r = fetchone(cur)
            return _row_to_admin(r) if r else None

    def create(self, *, username: str, password_hash: str) -> Admin:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO admins (username, password_hash) VALUES (%s, %s)",
                (username, password_hash),
            )
            return Admin(admin_id=int(cur.lastrowid), username=username, password_hash=password_hash)

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM admins")
            return int(fetchone(cur)["total"])
