from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..candidates.mysql_candidate_repository import row_to_candidate
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEntry, AttendanceRecord, AttendanceStats
from .repository import AttendanceRepository

_COLUMNS = "id, candidate_id, work_date, check_in_time, check_out_time, status"

_ENTRY_COLUMNS = """
    a.id, a.candidate_id, a.work_date, a.check_in_time, a.check_out_time, a.status,
    c.id AS c_id, c.name AS c_name, c.age AS c_age, c.degree AS c_degree,
    c.university AS c_university, c.batch AS c_batch, c.phone AS c_phone,
    c.email AS c_email, c.skills AS c_skills, c.qr_code AS c_qr_code,
    c.photo_url AS c_photo_url, c.resume_path AS c_resume_path,
    c.selfie_path AS c_selfie_path, c.hackathon_id AS c_hackathon_id,
    c.created_at AS c_created_at
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        candidate_id=int(r["candidate_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
    )


def _date_filter(work_date: Optional[date], *, alias: str = "") -> tuple[str, tuple]:
    if work_date is None:
        return "", ()
    return f"WHERE {alias}work_date=%s", (work_date,)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_candidate_and_date(self, candidate_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE candidate_id=%s AND work_date=%s",
                (int(candidate_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create_checkin(self, *, candidate_id: int, work_date: date, check_in_time: datetime) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance (candidate_id, work_date, check_in_time, status)
                VALUES (%s, %s, %s, %s)
                """,
                (int(candidate_id), work_date, check_in_time, AttendanceStatus.PRESENT.value),
            )
            return AttendanceRecord(
                attendance_id=int(cur.lastrowid),
                candidate_id=int(candidate_id),
                work_date=work_date,
                check_in_time=check_in_time,
                check_out_time=None,
                status=AttendanceStatus.PRESENT,
            )

    def close_open_record(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out_time=%s, status=%s
                WHERE id=%s AND check_out_time IS NULL
                """,
                (check_out_time, AttendanceStatus.CHECKED_OUT.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        work_date: date,
        check_in_time: datetime,
        check_out_time: Optional[datetime],
        status: AttendanceStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET work_date=%s, check_in_time=%s, check_out_time=%s, status=%s
                WHERE id=%s
                """,
                (work_date, check_in_time, check_out_time, status.value, int(attendance_id)),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM attendance WHERE id=%s", (int(attendance_id),))
            return fetchone(cur) is not None

    def list_entries(self, *, work_date: Optional[date], limit: int, offset: int) -> Sequence[AttendanceEntry]:
        where, params = _date_filter(work_date, alias="a.")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM attendance a
                JOIN candidates c ON c.id = a.candidate_id
                {where}
                ORDER BY a.check_in_time DESC, a.id DESC
                LIMIT %s OFFSET %s
                """,
                params + (int(limit), int(offset)),
            )
            return [
                AttendanceEntry(record=_row_to_record(r), candidate=row_to_candidate(r, prefix="c_"))
                for r in fetchall(cur)
            ]

    def count(self, *, work_date: Optional[date]) -> int:
        where, params = _date_filter(work_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM attendance {where}", params)
            return int(fetchone(cur)["total"])

    def stats(self, *, work_date: Optional[date]) -> AttendanceStats:
        where, params = _date_filter(work_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    COUNT(*) AS total,
                    COALESCE(SUM(check_out_time IS NULL), 0) AS currently_present,
                    COALESCE(SUM(check_out_time IS NOT NULL), 0) AS checked_out
                FROM attendance
                {where}
                """,
                params,
            )
            r = fetchone(cur) or {}
            return AttendanceStats(
                total=int(r.get("total") or 0),
                currently_present=int(r.get("currently_present") or 0),
                checked_out=int(r.get("checked_out") or 0),
            )

    def list_for_candidate(self, candidate_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance
                WHERE candidate_id=%s
                ORDER BY check_in_time DESC, id DESC
                """,
                (int(candidate_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def present_candidate_ids(self, *, work_date: date) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT candidate_id FROM attendance WHERE status=%s AND work_date=%s",
                (AttendanceStatus.PRESENT.value, work_date),
            )
            return {int(r["candidate_id"]) for r in fetchall(cur)}
