from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..candidates.mysql_candidate_repository import row_to_candidate
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Squad
from .repository import SquadRepository

_MEMBER_COLUMNS = """
    sm.squad_id,
    c.id, c.name, c.age, c.degree, c.university, c.batch, c.phone, c.email,
    c.skills, c.qr_code, c.photo_url, c.resume_path, c.selfie_path,
    c.hackathon_id, c.created_at
"""


def _insert_members(cur, squad_id: int, member_ids: Sequence[int]) -> None:
    if member_ids:
        cur.executemany(
            "INSERT INTO squad_members (squad_id, candidate_id) VALUES (%s, %s)",
            [(int(squad_id), int(cid)) for cid in member_ids],
        )


def _load_members(cur, squad_ids: Sequence[int]) -> dict[int, list]:
    members: dict[int, list] = defaultdict(list)
    if not squad_ids:
        return members
    placeholders, params = in_clause(list(squad_ids))
    cur.execute(
        f"""
        SELECT {_MEMBER_COLUMNS}
        FROM squad_members sm
        JOIN candidates c ON c.id = sm.candidate_id
        WHERE sm.squad_id IN ({placeholders})
        ORDER BY c.name ASC, c.id ASC
        """,
        params,
    )
    for r in fetchall(cur):
        members[int(r["squad_id"])].append(row_to_candidate(r))
    return members


class MySQLSquadRepository(SquadRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, name: str, member_ids: Sequence[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO squads (name) VALUES (%s)", (name,))
            squad_id = int(cur.lastrowid)
            _insert_members(cur, squad_id, member_ids)
            return squad_id

    def get_by_id(self, squad_id: int) -> Optional[Squad]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, created_at FROM squads WHERE id=%s", (int(squad_id),))
            r = fetchone(cur)
            if not r:
                return None
            members = _load_members(cur, [int(r["id"])])
            return Squad(
                squad_id=int(r["id"]),
                name=r["name"],
                created_at=r.get("created_at"),
                members=tuple(members[int(r["id"])]),
            )

    def list_all(self) -> Sequence[Squad]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, created_at FROM squads ORDER BY created_at DESC, id DESC")
            rows = fetchall(cur)
            members = _load_members(cur, [int(r["id"]) for r in rows])
            return [
                Squad(
                    squad_id=int(r["id"]),
                    name=r["name"],
                    created_at=r.get("created_at"),
                    members=tuple(members[int(r["id"])]),
                )
                for r in rows
            ]

    def update(self, squad_id: int, *, name: str, member_ids: Optional[Sequence[int]]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock: concurrent roster edits of one squad apply one after another.
            cur.execute("SELECT id FROM squads WHERE id=%s FOR UPDATE", (int(squad_id),))
            if not fetchone(cur):
                return False
            cur.execute("UPDATE squads SET name=%s WHERE id=%s", (name, int(squad_id)))
            if member_ids is not None:
                cur.execute("DELETE FROM squad_members WHERE squad_id=%s", (int(squad_id),))
                _insert_members(cur, squad_id, member_ids)
            return True

    def delete(self, squad_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM squad_members WHERE squad_id=%s", (int(squad_id),))
            cur.execute("DELETE FROM squads WHERE id=%s", (int(squad_id),))
            return cur.rowcount > 0

    def assigned_candidate_ids(self) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT candidate_id FROM squad_members")
            return {int(r["candidate_id"]) for r in fetchall(cur)}
