from __future__ import annotations

from dataclasses import fields as dc_fields
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Iterable, Optional, Sequence

import pytest

from hackathon_admin.admins.model import Admin
from hackathon_admin.admins.service import AuthService
from hackathon_admin.attendance.model import AttendanceEntry, AttendanceRecord, AttendanceStats
from hackathon_admin.attendance.service import AttendanceService
from hackathon_admin.candidates.model import Candidate
from hackathon_admin.candidates.service import CandidateService
from hackathon_admin.common.datetime_utils import EventClock
from hackathon_admin.container import Container
from hackathon_admin.core.enums import AttendanceStatus, HackathonStatus
from hackathon_admin.core.exceptions import ConflictError
from hackathon_admin.hackathons.model import Hackathon
from hackathon_admin.hackathons.service import HackathonService
from hackathon_admin.images.service import ImageService
from hackathon_admin.main import create_app
from hackathon_admin.reports.service import ReportService
from hackathon_admin.squads.model import Squad
from hackathon_admin.squads.service import SquadService

_CANDIDATE_FIELDS = {f.name for f in dc_fields(Candidate)}


class FixedClock(EventClock):
    def __init__(self, now: datetime):
        super().__init__("UTC")
        self.current = now

    def now(self) -> datetime:
        return self.current


class InMemoryStore:
    """Tables shared by the fake repositories."""

    def __init__(self):
        self.candidates: dict[int, Candidate] = {}
        self.attendance: dict[int, AttendanceRecord] = {}
        self.squads: dict[int, tuple[str, datetime]] = {}
        self.squad_members: dict[int, list[int]] = {}
        self.hackathons: dict[int, Hackathon] = {}
        self.admins: dict[str, Admin] = {}
        self._ids: dict[str, int] = {}

    def next_id(self, table: str) -> int:
        self._ids[table] = self._ids.get(table, 0) + 1
        return self._ids[table]


class InMemoryCandidates:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def add(self, name: str, email: Optional[str] = None, **extra: Any) -> Candidate:
        cid = self._s.next_id("candidates")
        candidate = Candidate(candidate_id=cid, name=name, email=email or f"{name.lower()}@example.com", **extra)
        self._s.candidates[cid] = candidate
        return candidate

    def get_by_id(self, candidate_id: int) -> Optional[Candidate]:
        return self._s.candidates.get(int(candidate_id))

    def get_by_qr_code(self, qr_code: str) -> Optional[Candidate]:
        return next((c for c in self._s.candidates.values() if c.qr_code == qr_code), None)

    def get_by_email(self, email: str) -> Optional[Candidate]:
        return next((c for c in self._s.candidates.values() if c.email == email), None)

    def get_many(self, candidate_ids: Iterable[int]) -> Sequence[Candidate]:
        ids = {int(i) for i in candidate_ids}
        rows = [c for c in self._s.candidates.values() if c.candidate_id in ids]
        return sorted(rows, key=lambda c: (c.name, c.candidate_id))

    def _matching(self, term: Optional[str]) -> list[Candidate]:
        rows = list(self._s.candidates.values())
        if term and term.strip():
            t = term.strip().lower()
            rows = [
                c
                for c in rows
                if any(t in (getattr(c, f) or "").lower() for f in ("name", "email", "university", "degree", "skills"))
            ]
        return sorted(rows, key=lambda c: c.candidate_id, reverse=True)

    def search(self, *, term: Optional[str], limit: int, offset: int) -> Sequence[Candidate]:
        return self._matching(term)[offset : offset + limit]

    def count(self, *, term: Optional[str]) -> int:
        return len(self._matching(term))

    def create(self, *, fields: dict[str, Any], qr_code_for: Callable[[int], str]) -> Candidate:
        if self.get_by_email(fields["email"]):
            raise ConflictError("Duplicate entry")
        cid = self._s.next_id("candidates")
        kwargs = {k: v for k, v in fields.items() if k in _CANDIDATE_FIELDS}
        candidate = Candidate(candidate_id=cid, qr_code=qr_code_for(cid), **kwargs)
        self._s.candidates[cid] = candidate
        return candidate

    def update_fields(self, candidate_id: int, fields: dict[str, Any]) -> bool:
        current = self._s.candidates.get(int(candidate_id))
        if not current:
            return False
        other = self.get_by_email(fields["email"]) if "email" in fields else None
        if other and other.candidate_id != current.candidate_id:
            raise ConflictError("Duplicate entry")
        self._s.candidates[current.candidate_id] = replace(current, **fields)
        return True

    def set_qr_code_if_missing(self, candidate_id: int, qr_code: str) -> bool:
        current = self._s.candidates.get(int(candidate_id))
        if not current or current.qr_code:
            return False
        self._s.candidates[current.candidate_id] = replace(current, qr_code=qr_code)
        return True

    def delete_by_id(self, candidate_id: int) -> bool:
        if self._s.candidates.pop(int(candidate_id), None) is None:
            return False
        self._s.attendance = {k: r for k, r in self._s.attendance.items() if r.candidate_id != int(candidate_id)}
        for members in self._s.squad_members.values():
            if int(candidate_id) in members:
                members.remove(int(candidate_id))
        return True

    def clear_all(self) -> None:
        self._s.squad_members.clear()
        self._s.squads.clear()
        self._s.attendance.clear()
        self._s.candidates.clear()


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._s.attendance.get(int(attendance_id))

    def get_for_candidate_and_date(self, candidate_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self._s.attendance.values() if r.candidate_id == candidate_id and r.work_date == work_date),
            None,
        )

    def create_checkin(self, *, candidate_id: int, work_date: date, check_in_time: datetime) -> AttendanceRecord:
        # Mirrors UNIQUE(candidate_id, work_date).
        if any(r.candidate_id == candidate_id and r.work_date == work_date for r in self._s.attendance.values()):
            raise ConflictError("Duplicate entry")
        rid = self._s.next_id("attendance")
        record = AttendanceRecord(
            attendance_id=rid,
            candidate_id=candidate_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=None,
            status=AttendanceStatus.PRESENT,
        )
        self._s.attendance[rid] = record
        return record

    def close_open_record(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        record = self._s.attendance.get(int(attendance_id))
        if not record or record.check_out_time is not None:
            return False
        self._s.attendance[record.attendance_id] = replace(
            record, check_out_time=check_out_time, status=AttendanceStatus.CHECKED_OUT
        )
        return True

    def admin_update_record(self, *, attendance_id, work_date, check_in_time, check_out_time, status) -> bool:
        record = self._s.attendance.get(int(attendance_id))
        if not record:
            return False
        clash = self.get_for_candidate_and_date(record.candidate_id, work_date)
        if clash and clash.attendance_id != record.attendance_id:
            raise ConflictError("Duplicate entry")
        self._s.attendance[record.attendance_id] = replace(
            record, work_date=work_date, check_in_time=check_in_time, check_out_time=check_out_time, status=status
        )
        return True

    def _filtered(self, work_date: Optional[date]) -> list[AttendanceRecord]:
        rows = [r for r in self._s.attendance.values() if work_date is None or r.work_date == work_date]
        return sorted(rows, key=lambda r: (r.check_in_time, r.attendance_id), reverse=True)

    def list_entries(self, *, work_date: Optional[date], limit: int, offset: int) -> Sequence[AttendanceEntry]:
        rows = self._filtered(work_date)[offset : offset + limit]
        return [AttendanceEntry(record=r, candidate=self._s.candidates[r.candidate_id]) for r in rows]

    def count(self, *, work_date: Optional[date]) -> int:
        return len(self._filtered(work_date))

    def stats(self, *, work_date: Optional[date]) -> AttendanceStats:
        rows = self._filtered(work_date)
        open_rows = sum(1 for r in rows if r.check_out_time is None)
        return AttendanceStats(total=len(rows), currently_present=open_rows, checked_out=len(rows) - open_rows)

    def list_for_candidate(self, candidate_id: int) -> Sequence[AttendanceRecord]:
        return [r for r in self._filtered(None) if r.candidate_id == int(candidate_id)]

    def present_candidate_ids(self, *, work_date: date) -> set[int]:
        return {
            r.candidate_id
            for r in self._s.attendance.values()
            if r.status == AttendanceStatus.PRESENT and r.work_date == work_date
        }


class InMemorySquads:
    def __init__(self, store: InMemoryStore, *, created_at: datetime):
        self._s = store
        self._created_at = created_at

    def create(self, *, name: str, member_ids: Sequence[int]) -> int:
        sid = self._s.next_id("squads")
        self._s.squads[sid] = (name, self._created_at)
        self._s.squad_members[sid] = list(member_ids)
        return sid

    def _build(self, sid: int) -> Squad:
        name, created_at = self._s.squads[sid]
        members = sorted(
            (self._s.candidates[c] for c in self._s.squad_members.get(sid, []) if c in self._s.candidates),
            key=lambda c: (c.name, c.candidate_id),
        )
        return Squad(squad_id=sid, name=name, created_at=created_at, members=tuple(members))

    def get_by_id(self, squad_id: int) -> Optional[Squad]:
        return self._build(int(squad_id)) if int(squad_id) in self._s.squads else None

    def list_all(self) -> Sequence[Squad]:
        return [self._build(sid) for sid in sorted(self._s.squads, reverse=True)]

    def update(self, squad_id: int, *, name: str, member_ids: Optional[Sequence[int]]) -> bool:
        sid = int(squad_id)
        if sid not in self._s.squads:
            return False
        self._s.squads[sid] = (name, self._s.squads[sid][1])
        if member_ids is not None:
            self._s.squad_members[sid] = list(member_ids)
        return True

    def delete(self, squad_id: int) -> bool:
        sid = int(squad_id)
        self._s.squad_members.pop(sid, None)
        return self._s.squads.pop(sid, None) is not None

    def assigned_candidate_ids(self) -> set[int]:
        return {cid for members in self._s.squad_members.values() for cid in members}


class InMemoryHackathons:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def add(self, title: str = "Spring Hack", status: HackathonStatus = HackathonStatus.SCHEDULED, **extra) -> Hackathon:
        hid = self._s.next_id("hackathons")
        hackathon = Hackathon(hackathon_id=hid, title=title, description="desc", status=status, **extra)
        self._s.hackathons[hid] = hackathon
        return hackathon

    def get_by_id(self, hackathon_id: int) -> Optional[Hackathon]:
        return self._s.hackathons.get(int(hackathon_id))

    def create(self, *, fields: dict[str, Any], status: HackathonStatus) -> Hackathon:
        hid = self._s.next_id("hackathons")
        hackathon = Hackathon(hackathon_id=hid, status=status, **fields)
        self._s.hackathons[hid] = hackathon
        return hackathon

    def _matching(self, term: Optional[str]) -> list[Hackathon]:
        rows = list(self._s.hackathons.values())
        if term:
            rows = [h for h in rows if term.lower() in (h.title + " " + h.description).lower()]
        return sorted(rows, key=lambda h: h.hackathon_id, reverse=True)

    def search(self, *, term: Optional[str], limit: int, offset: int) -> Sequence[Hackathon]:
        return self._matching(term)[offset : offset + limit]

    def count(self, *, term: Optional[str]) -> int:
        return len(self._matching(term))

    def update_fields(self, hackathon_id: int, fields: dict[str, Any]) -> bool:
        current = self._s.hackathons.get(int(hackathon_id))
        if not current:
            return False
        if "status" in fields:
            fields = dict(fields, status=HackathonStatus(fields["status"]))
        self._s.hackathons[current.hackathon_id] = replace(current, **fields)
        return True

    def list_by_status(self, status: HackathonStatus, *, limit: int, offset: int) -> Sequence[Hackathon]:
        rows = [h for h in self._matching(None) if h.status == status]
        return rows[offset : offset + limit]


class InMemoryAdmins:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_username(self, username: str) -> Optional[Admin]:
        return self._s.admins.get(username)

    def create(self, *, username: str, password_hash: str) -> Admin:
        if username in self._s.admins:
            raise ConflictError("Duplicate entry")
        admin = Admin(admin_id=self._s.next_id("admins"), username=username, password_hash=password_hash)
        self._s.admins[username] = admin
        return admin

    def count(self) -> int:
        return len(self._s.admins)


class EmptyReports:
    def candidate_attendance(self):
        return []

    def squad_summaries(self):
        return []

    def daily_attendance(self):
        return []

    def skills_distribution(self):
        return []

    def attendance_export(self):
        return []


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 14, 9, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def candidates_repo(store) -> InMemoryCandidates:
    return InMemoryCandidates(store)


@pytest.fixture
def attendance_repo(store) -> InMemoryAttendance:
    return InMemoryAttendance(store)


@pytest.fixture
def squads_repo(store, fixed_now) -> InMemorySquads:
    return InMemorySquads(store, created_at=fixed_now)


@pytest.fixture
def hackathons_repo(store) -> InMemoryHackathons:
    return InMemoryHackathons(store)


@pytest.fixture
def admins_repo(store) -> InMemoryAdmins:
    return InMemoryAdmins(store)


@pytest.fixture
def attendance_service(attendance_repo, candidates_repo, clock) -> AttendanceService:
    return AttendanceService(attendance_repo, candidates_repo, clock=clock)


@pytest.fixture
def squad_service(squads_repo, candidates_repo, attendance_repo, clock) -> SquadService:
    return SquadService(squads_repo, candidates_repo, attendance_repo, clock=clock)


@pytest.fixture
def candidate_service(candidates_repo, hackathons_repo) -> CandidateService:
    return CandidateService(candidates_repo, hackathons_repo, qr_payload=lambda cid: f"HACKATHON_{cid}_1700000000000")


@pytest.fixture
def auth_service(admins_repo) -> AuthService:
    return AuthService(admins_repo, secret_key="test-secret")


@pytest.fixture
def container(
    clock, auth_service, candidate_service, attendance_service, squad_service, hackathons_repo, candidates_repo, tmp_path
) -> Container:
    return Container(
        auth_service=auth_service,
        candidate_service=candidate_service,
        attendance_service=attendance_service,
        squad_service=squad_service,
        hackathon_service=HackathonService(hackathons_repo),
        report_service=ReportService(EmptyReports(), clock=clock),
        image_service=ImageService(candidates_repo, upload_dir=tmp_path / "uploads"),
    )


@pytest.fixture
def app(container):
    return create_app(settings_module="config.testing", container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers(auth_service) -> dict[str, str]:
    auth_service.create_admin("root", "secret123")
    token = auth_service.login("root", "secret123").token
    return {"Authorization": f"Bearer {token}"}
