from __future__ import annotations

from collections import defaultdict
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceExportRow, CandidateAttendanceRow, DailyAttendanceRow, SquadSummaryRow
from .repository import ReportRepository


class MySQLReportRepository(ReportRepository):
    """Read-only aggregation queries over candidates, attendance and squads."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def candidate_attendance(self) -> Sequence[CandidateAttendanceRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.id, c.name, c.email, c.age, c.degree, c.university, c.batch,
                       c.phone, c.skills, c.selfie_path, c.resume_path, c.created_at,
                       COUNT(a.id) AS total_attendance_days,
                       MAX(a.check_in_time) AS last_attendance
                FROM candidates c
                LEFT JOIN attendance a ON a.candidate_id = c.id
                GROUP BY c.id
                ORDER BY c.name ASC, c.id ASC
                """
            )
            return [
                CandidateAttendanceRow(
                    candidate_id=int(r["id"]),
                    name=r["name"],
                    email=r["email"],
                    age=r.get("age"),
                    degree=r.get("degree"),
                    university=r.get("university"),
                    batch=r.get("batch"),
                    phone=r.get("phone"),
                    skills=r.get("skills"),
                    selfie_path=r.get("selfie_path"),
                    resume_path=r.get("resume_path"),
                    created_at=r.get("created_at"),
                    total_attendance_days=int(r["total_attendance_days"] or 0),
                    last_attendance=r.get("last_attendance"),
                )
                for r in fetchall(cur)
            ]

    def squad_summaries(self) -> Sequence[SquadSummaryRow]:
        # One row per membership (or one bare row for an empty squad).
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.name, s.created_at, c.name AS member_name, c.skills AS member_skills
                FROM squads s
                LEFT JOIN squad_members sm ON sm.squad_id = s.id
                LEFT JOIN candidates c ON c.id = sm.candidate_id
                ORDER BY s.name ASC, s.id ASC, c.name ASC
                """
            )
            rows = fetchall(cur)

        order: list[int] = []
        heads: dict[int, dict] = {}
        names: dict[int, list[str]] = defaultdict(list)
        skills: dict[int, list[str]] = defaultdict(list)
        for r in rows:
            sid = int(r["id"])
            if sid not in heads:
                heads[sid] = r
                order.append(sid)
            if r.get("member_name") is not None:
                names[sid].append(r["member_name"])
                if r.get("member_skills"):
                    skills[sid].append(r["member_skills"])

        return [
            SquadSummaryRow(
                squad_id=sid,
                name=heads[sid]["name"],
                created_at=heads[sid].get("created_at"),
                member_names=names[sid],
                member_skills=skills[sid],
            )
            for sid in order
        ]

    def daily_attendance(self) -> Sequence[DailyAttendanceRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT work_date,
                       COUNT(*) AS attendance_count,
                       COALESCE(SUM(check_out_time IS NOT NULL), 0) AS checked_out_count
                FROM attendance
                GROUP BY work_date
                ORDER BY work_date DESC
                """
            )
            return [
                DailyAttendanceRow(
                    day=r["work_date"],
                    attendance_count=int(r["attendance_count"]),
                    checked_out_count=int(r["checked_out_count"]),
                )
                for r in fetchall(cur)
            ]

    def skills_distribution(self) -> Sequence[tuple[str, int]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT skills, COUNT(*) AS count
                FROM candidates
                WHERE skills IS NOT NULL AND skills <> ''
                GROUP BY skills
                ORDER BY count DESC, skills ASC
                """
            )
            return [(r["skills"], int(r["count"])) for r in fetchall(cur)]

    def attendance_export(self) -> Sequence[AttendanceExportRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.id, c.name AS candidate_name, c.email,
                       a.check_in_time, a.check_out_time, a.status
                FROM attendance a
                JOIN candidates c ON c.id = a.candidate_id
                ORDER BY a.check_in_time DESC, a.id DESC
                """
            )
            return [
                AttendanceExportRow(
                    attendance_id=int(r["id"]),
                    candidate_name=r["candidate_name"],
                    email=r["email"],
                    check_in_time=r["check_in_time"],
                    check_out_time=r.get("check_out_time"),
                    status=r["status"],
                )
                for r in fetchall(cur)
            ]
