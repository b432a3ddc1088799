from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..candidates.model import Candidate
from ..common.datetime_utils import isoformat
from ..core.enums import AttendanceStatus, ScanAction


@dataclass(frozen=True)
class AttendanceRecord:
    """One candidate's attendance for one calendar day."""

    attendance_id: int
    candidate_id: int
    work_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "candidate_id": self.candidate_id,
            "work_date": isoformat(self.work_date),
            "check_in_time": isoformat(self.check_in_time),
            "check_out_time": isoformat(self.check_out_time),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AttendanceEntry:
    """Read-model: a record joined with its candidate, for listings."""

    record: AttendanceRecord
    candidate: Candidate

    def to_dict(self) -> dict:
        return dict(self.record.to_dict(), candidate=self.candidate.to_dict())


_SCAN_MESSAGES = {
    ScanAction.CHECKED_IN: "Check-in successful",
    ScanAction.CHECKED_OUT: "Check-out successful",
    ScanAction.ALREADY_CHECKED_OUT: "Already checked out today",
}


@dataclass(frozen=True)
class ScanOutcome:
    action: ScanAction
    candidate: Candidate
    record: AttendanceRecord

    @property
    def message(self) -> str:
        return _SCAN_MESSAGES[self.action]

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "action": self.action.value,
            "candidate": self.candidate.to_dict(),
            "attendance": self.record.to_dict(),
        }


@dataclass(frozen=True)
class AttendanceStats:
    total: int
    currently_present: int
    checked_out: int

    def to_dict(self) -> dict:
        return {
            "total_attendance": self.total,
            "currently_present": self.currently_present,
            "checked_out": self.checked_out,
        }
