from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import HackathonStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, set_clause
from .model import REQUEST_FIELDS, Hackathon
from .repository import HackathonRepository

_COLUMNS = """
    id, title, client_name, execution_date, executed_by, description,
    registration_link, skills_focused, status, created_at
"""

_SEARCH_COLUMNS = ("title", "client_name", "executed_by", "description", "skills_focused")

_UPDATABLE = tuple(REQUEST_FIELDS.values()) + ("status",)


def _row_to_hackathon(r: dict) -> Hackathon:
    return Hackathon(
        hackathon_id=int(r["id"]),
        title=r["title"],
        description=r["description"],
        status=HackathonStatus(r["status"]),
        client_name=r.get("client_name"),
        execution_date=r.get("execution_date"),
        executed_by=r.get("executed_by"),
        registration_link=r.get("registration_link"),
        skills_focused=r.get("skills_focused"),
        created_at=r.get("created_at"),
    )


def _search_where(term: Optional[str]) -> tuple[str, tuple]:
    if not term or not term.strip():
        return "", ()
    like = f"%{term.strip()}%"
    return "WHERE " + " OR ".join(f"{c} LIKE %s" for c in _SEARCH_COLUMNS), tuple(like for _ in _SEARCH_COLUMNS)


class MySQLHackathonRepository(HackathonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, hackathon_id: int) -> Optional[Hackathon]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM hackathons WHERE id=%s", (int(hackathon_id),))
            r = fetchone(cur)
            return _row_to_hackathon(r) if r else None

    def create(self, *, fields: dict[str, Any], status: HackathonStatus) -> Hackathon:
        values = dict(fields, status=status.value)
        set_clause(values, _UPDATABLE)
        cols = list(values)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO hackathons ({', '.join(cols)}) VALUES ({', '.join(['%s'] * len(cols))})",
                tuple(values[c] for c in cols),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM hackathons WHERE id=%s", (int(cur.lastrowid),))
            return _row_to_hackathon(fetchone(cur))

    def search(self, *, term: Optional[str], limit: int, offset: int) -> Sequence[Hackathon]:
        where, params = _search_where(term)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM hackathons
                {where}
                ORDER BY execution_date DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                params + (int(limit), int(offset)),
            )
            return [_row_to_hackathon(r) for r in fetchall(cur)]

    def count(self, *, term: Optional[str]) -> int:
        where, params = _search_where(term)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM hackathons {where}", params)
            return int(fetchone(cur)["total"])

    def update_fields(self, hackathon_id: int, fields: dict[str, Any]) -> bool:
        assignments, params = set_clause(fields, _UPDATABLE)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE hackathons SET {assignments} WHERE id=%s", params + (int(hackathon_id),))
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM hackathons WHERE id=%s", (int(hackathon_id),))
            return fetchone(cur) is not None

    def list_by_status(self, status: HackathonStatus, *, limit: int, offset: int) -> Sequence[Hackathon]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM hackathons
                WHERE status=%s
                ORDER BY execution_date DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                (status.value, int(limit), int(offset)),
            )
            return [_row_to_hackathon(r) for r in fetchall(cur)]
