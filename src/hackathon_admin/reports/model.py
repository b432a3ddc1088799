from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class CandidateAttendanceRow:
    candidate_id: int
    name: str
    email: str
    age: Optional[int]
    degree: Optional[str]
    university: Optional[str]
    batch: Optional[str]
    phone: Optional[str]
    skills: Optional[str]
    selfie_path: Optional[str]
    resume_path: Optional[str]
    created_at: Optional[datetime]
    total_attendance_days: int
    last_attendance: Optional[datetime]


@dataclass(frozen=True)
class SquadSummaryRow:
    squad_id: int
    name: str
    created_at: Optional[datetime]
    member_names: list[str]
    member_skills: list[str]


@dataclass(frozen=True)
class DailyAttendanceRow:
    day: date
    attendance_count: int
    checked_out_count: int


@dataclass(frozen=True)
class AttendanceExportRow:
    attendance_id: int
    candidate_name: str
    email: str
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: str
