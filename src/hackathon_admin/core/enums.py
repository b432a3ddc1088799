from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance state stored in the database."""

    PRESENT = "present"
    CHECKED_OUT = "checked_out"


class ScanAction(str, Enum):
    """What a scan resolved to."""

    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    ALREADY_CHECKED_OUT = "already_checked_out"


class HackathonStatus(str, Enum):
    SCHEDULED = "scheduled"
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    DELETED = "deleted"
