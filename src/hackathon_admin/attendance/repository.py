from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceEntry, AttendanceRecord, AttendanceStats


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_candidate_and_date(self, candidate_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(self, *, candidate_id: int, work_date: date, check_in_time: datetime) -> AttendanceRecord:
        """Insert today's record with status ``present``.

        Raises ConflictError if (candidate_id, work_date) already exists.
        """

        raise NotImplementedError

    def close_open_record(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        """Set check-out only if the record is still open; False otherwise."""

        raise NotImplementedError

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        work_date: date,
        check_in_time: datetime,
        check_out_time: Optional[datetime],
        status: AttendanceStatus,
    ) -> bool:
        """Operator override; writes the values as given."""

        raise NotImplementedError

    def list_entries(self, *, work_date: Optional[date], limit: int, offset: int) -> Sequence[AttendanceEntry]:
        raise NotImplementedError

    def count(self, *, work_date: Optional[date]) -> int:
        raise NotImplementedError

    def stats(self, *, work_date: Optional[date]) -> AttendanceStats:
        raise NotImplementedError

    def list_for_candidate(self, candidate_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def present_candidate_ids(self, *, work_date: date) -> set[int]:
        raise NotImplementedError
