from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, set_clause
from .model import EDITABLE_FIELDS, Candidate
from .repository import CandidateRepository

_COLUMNS = """
    id, name, age, degree, university, batch, phone, email, skills,
    qr_code, photo_url, resume_path, selfie_path, hackathon_id, created_at
"""

_SEARCH_COLUMNS = ("name", "email", "university", "degree", "skills")

_UPDATABLE = EDITABLE_FIELDS + ("photo_url", "resume_path", "selfie_path", "hackathon_id")


def row_to_candidate(r: dict, *, prefix: str = "") -> Candidate:
    """Build a Candidate from a dict row; ``prefix`` handles aliased joins."""

    def col(name: str):
        return r.get(f"{prefix}{name}")

    age = col("age")
    hackathon_id = col("hackathon_id")
    return Candidate(
        candidate_id=int(col("id")),
        name=col("name"),
        email=col("email"),
        phone=col("phone"),
        university=col("university"),
        degree=col("degree"),
        skills=col("skills"),
        age=int(age) if age is not None else None,
        batch=col("batch"),
        qr_code=col("qr_code"),
        photo_url=col("photo_url"),
        resume_path=col("resume_path"),
        selfie_path=col("selfie_path"),
        hackathon_id=int(hackathon_id) if hackathon_id is not None else None,
        created_at=col("created_at"),
    )


def _search_where(term: Optional[str]) -> tuple[str, tuple]:
    if not term or not term.strip():
        return "", ()
    like = f"%{term.strip()}%"
    where = "WHERE " + " OR ".join(f"{c} LIKE %s" for c in _SEARCH_COLUMNS)
    return where, tuple(like for _ in _SEARCH_COLUMNS)


class MySQLCandidateRepository(CandidateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[Candidate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM candidates WHERE {where}", params)
            r = fetchone(cur)
            return row_to_candidate(r) if r else None

    def get_by_id(self, candidate_id: int) -> Optional[Candidate]:
        return self._get_one("id=%s", (int(candidate_id),))

    def get_by_qr_code(self, qr_code: str) -> Optional[Candidate]:
        return self._get_one("qr_code=%s", (qr_code,))

    def get_by_email(self, email: str) -> Optional[Candidate]:
        return self._get_one("email=%s", (email,))

    def get_many(self, candidate_ids: Iterable[int]) -> Sequence[Candidate]:
        ids = sorted({int(i) for i in candidate_ids})
        if not ids:
            return []
        placeholders, params = in_clause(ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM candidates WHERE id IN ({placeholders}) ORDER BY name ASC, id ASC",
                params,
            )
            return [row_to_candidate(r) for r in fetchall(cur)]

    def search(self, *, term: Optional[str], limit: int, offset: int) -> Sequence[Candidate]:
        where, params = _search_where(term)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM candidates
                {where}
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                params + (int(limit), int(offset)),
            )
            return [row_to_candidate(r) for r in fetchall(cur)]

    def count(self, *, term: Optional[str]) -> int:
        where, params = _search_where(term)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM candidates {where}", params)
            return int(fetchone(cur)["total"])

    def create(self, *, fields: dict[str, Any], qr_code_for: Callable[[int], str]) -> Candidate:
        cols = [c for c in fields]
        set_clause(fields, _UPDATABLE)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO candidates ({', '.join(cols)}) VALUES ({', '.join(['%s'] * len(cols))})",
                tuple(fields[c] for c in cols),
            )
            candidate_id = int(cur.lastrowid)
            cur.execute("UPDATE candidates SET qr_code=%s WHERE id=%s", (qr_code_for(candidate_id), candidate_id))
            cur.execute(f"SELECT {_COLUMNS} FROM candidates WHERE id=%s", (candidate_id,))
            return row_to_candidate(fetchone(cur))

    def update_fields(self, candidate_id: int, fields: dict[str, Any]) -> bool:
        assignments, params = set_clause(fields, _UPDATABLE)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE candidates SET {assignments} WHERE id=%s", params + (int(candidate_id),))
            if cur.rowcount > 0:
                return True
            # MySQL reports 0 affected rows when values are unchanged.
            cur.execute("SELECT 1 AS found FROM candidates WHERE id=%s", (int(candidate_id),))
            return fetchone(cur) is not None

    def set_qr_code_if_missing(self, candidate_id: int, qr_code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE candidates SET qr_code=%s WHERE id=%s AND qr_code IS NULL",
                (qr_code, int(candidate_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, candidate_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM candidates WHERE id=%s", (int(candidate_id),))
            return cur.rowcount > 0

    def clear_all(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM squad_members")
            cur.execute("DELETE FROM squads")
            cur.execute("DELETE FROM attendance")
            cur.execute("DELETE FROM candidates")
