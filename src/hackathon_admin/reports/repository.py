from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceExportRow, CandidateAttendanceRow, DailyAttendanceRow, SquadSummaryRow


class ReportRepository(Protocol):
    def candidate_attendance(self) -> Sequence[CandidateAttendanceRow]:
        raise NotImplementedError

    def squad_summaries(self) -> Sequence[SquadSummaryRow]:
        raise NotImplementedError

    def daily_attendance(self) -> Sequence[DailyAttendanceRow]:
        raise NotImplementedError

    def skills_distribution(self) -> Sequence[tuple[str, int]]:
        raise NotImplementedError

    def attendance_export(self) -> Sequence[AttendanceExportRow]:
        raise NotImplementedError
