from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..candidates.model import Candidate
from ..candidates.repository import CandidateRepository
from ..common.datetime_utils import EventClock
from ..common.pagination import Page, make_paging
from ..core.enums import AttendanceStatus, ScanAction
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import AttendanceEntry, AttendanceRecord, AttendanceStats, ScanOutcome
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class AttendanceService:
    """Per-candidate, per-day check-in/check-out ledger.

    A day moves NoRecord -> present -> checked_out and never back; only
    ``manual_adjust`` can reopen it.
    """

    def __init__(self, attendance: AttendanceRepository, candidates: CandidateRepository, *, clock: EventClock):
        self._attendance = attendance
        self._candidates = candidates
        self._clock = clock

    def resolve_candidate(self, *, qr_code: Optional[str] = None, candidate_id: Optional[int] = None) -> Candidate:
        if qr_code is not None and candidate_id is not None:
            raise ValidationError("Provide either qrCode or candidateId, not both")
        if qr_code is not None:
            if not qr_code.strip():
                raise ValidationError("QR code is required")
            candidate = self._candidates.get_by_qr_code(qr_code.strip())
            if not candidate:
                raise NotFoundError("Invalid QR code")
            return candidate
        if candidate_id is not None:
            candidate = self._candidates.get_by_id(int(candidate_id))
            if not candidate:
                raise NotFoundError("Invalid candidate")
            return candidate
        raise ValidationError("QR code or candidate ID is required")

    def record_scan(
        self,
        *,
        qr_code: Optional[str] = None,
        candidate_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ScanOutcome:
        candidate = self.resolve_candidate(qr_code=qr_code, candidate_id=candidate_id)
        now = now or self._clock.now()
        today = now.date()

        record = self._attendance.get_for_candidate_and_date(candidate.candidate_id, today)

        if record is None:
            try:
                record = self._attendance.create_checkin(
                    candidate_id=candidate.candidate_id, work_date=today, check_in_time=now
                )
            except ConflictError:
                # A concurrent scan inserted today's row between our read and insert.
                raise ConflictError("Scan already being processed for this candidate, try again")
            logger.info("Candidate %s checked in at %s", candidate.candidate_id, now)
            return ScanOutcome(ScanAction.CHECKED_IN, candidate, record)

        if record.is_open:
            check_out_time = max(now, record.check_in_time)
            if self._attendance.close_open_record(attendance_id=record.attendance_id, check_out_time=check_out_time):
                closed = AttendanceRecord(
                    attendance_id=record.attendance_id,
                    candidate_id=record.candidate_id,
                    work_date=record.work_date,
                    check_in_time=record.check_in_time,
                    check_out_time=check_out_time,
                    status=AttendanceStatus.CHECKED_OUT,
                )
                logger.info("Candidate %s checked out at %s", candidate.candidate_id, check_out_time)
                return ScanOutcome(ScanAction.CHECKED_OUT, candidate, closed)

            # Lost the race to another check-out: the stored row wins.
            record = self._attendance.get_by_id(record.attendance_id)
            if record is None:
                raise ConflictError("Attendance record changed while scanning, try again")

        return ScanOutcome(ScanAction.ALREADY_CHECKED_OUT, candidate, record)

    def manual_adjust(
        self,
        attendance_id: int,
        *,
        status: Any = _UNSET,
        check_in_time: Any = _UNSET,
        check_out_time: Any = _UNSET,
    ) -> AttendanceRecord:
        """Operator correction of a record.

        Only supplied fields change. ``check_out_time`` may be set to None to
        reopen a day. Status is not cross-checked against check_out_time.
        """
        if status is _UNSET and check_in_time is _UNSET and check_out_time is _UNSET:
            raise ValidationError("No fields to update")

        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")

        new_status = record.status
        if status is not _UNSET:
            try:
                new_status = AttendanceStatus(status)
            except ValueError:
                allowed = ", ".join(s.value for s in AttendanceStatus)
                raise ValidationError(f"Invalid status: {status!r} (expected one of {allowed})")

        new_in = record.check_in_time
        if check_in_time is not _UNSET:
            if check_in_time is None:
                raise ValidationError("check_in_time cannot be cleared")
            new_in = self._as_datetime(check_in_time, "check_in_time")

        new_out = record.check_out_time
        if check_out_time is not _UNSET:
            new_out = None if check_out_time is None else self._as_datetime(check_out_time, "check_out_time")

        if new_out is not None and new_out < new_in:
            raise ValidationError("check_out_time must not be earlier than check_in_time")

        try:
            updated = self._attendance.admin_update_record(
                attendance_id=record.attendance_id,
                work_date=new_in.date(),
                check_in_time=new_in,
                check_out_time=new_out,
                status=new_status,
            )
        except ConflictError:
            raise ConflictError("Candidate already has an attendance record on that day")
        if not updated:
            raise NotFoundError("Attendance record not found")

        logger.info("Attendance %s adjusted manually", record.attendance_id)
        return AttendanceRecord(
            attendance_id=record.attendance_id,
            candidate_id=record.candidate_id,
            work_date=new_in.date(),
            check_in_time=new_in,
            check_out_time=new_out,
            status=new_status,
        )

    def _as_datetime(self, value: Any, field_name: str) -> datetime:
        if isinstance(value, datetime):
            return self._clock.to_local(value)
        if isinstance(value, str):
            return self._clock.parse_datetime(value)
        raise ValidationError(f"Invalid {field_name}: {value!r}")

    def list_attendance(
        self, *, work_date: Optional[date] = None, page: Any = None, page_size: Any = None
    ) -> Page[AttendanceEntry]:
        paging = make_paging(page, page_size)
        total = self._attendance.count(work_date=work_date)
        items = self._attendance.list_entries(work_date=work_date, limit=paging.page_size, offset=paging.offset)
        return Page(items=items, total=total, page=paging.page, page_size=paging.page_size)

    def stats(self, *, work_date: Optional[date] = None) -> AttendanceStats:
        return self._attendance.stats(work_date=work_date)

    def history_for_candidate(self, candidate_id: int) -> Sequence[AttendanceRecord]:
        if not self._candidates.get_by_id(int(candidate_id)):
            raise NotFoundError("Candidate not found")
        return self._attendance.list_for_candidate(int(candidate_id))

    def present_candidate_ids(self, *, work_date: Optional[date] = None) -> set[int]:
        return self._attendance.present_candidate_ids(work_date=work_date or self._clock.today())
