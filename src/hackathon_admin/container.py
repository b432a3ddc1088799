from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .admins.mysql_admin_repository import MySQLAdminRepository
from .admins.service import AuthService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .candidates.mysql_candidate_repository import MySQLCandidateRepository
from .candidates.service import CandidateService
from .common.datetime_utils import EventClock
from .core.constants import DEFAULT_ADMIN_TOKEN_MAX_AGE
from .database.connection import DBConfig, DatabaseConnection
from .hackathons.mysql_hackathon_repository import MySQLHackathonRepository
from .hackathons.service import HackathonService
from .images.service import ImageService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.service import ReportService
from .squads.mysql_squad_repository import MySQLSquadRepository
from .squads.service import SquadService


@dataclass(frozen=True)
class Container:
    auth_service: AuthService
    candidate_service: CandidateService
    attendance_service: AttendanceService
    squad_service: SquadService
    hackathon_service: HackathonService
    report_service: ReportService
    image_service: ImageService


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    event_timezone: str = "UTC",
    upload_dir: str | Path = "uploads",
    token_max_age: int = DEFAULT_ADMIN_TOKEN_MAX_AGE,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    clock = EventClock(event_timezone)

    admins_repo = MySQLAdminRepository(conn)
    candidates_repo = MySQLCandidateRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    squads_repo = MySQLSquadRepository(conn)
    hackathons_repo = MySQLHackathonRepository(conn)
    reports_repo = MySQLReportRepository(conn)

    return Container(
        auth_service=AuthService(admins_repo, secret_key=secret_key, token_max_age=token_max_age),
        candidate_service=CandidateService(candidates_repo, hackathons_repo),
        attendance_service=AttendanceService(attendance_repo, candidates_repo, clock=clock),
        squad_service=SquadService(squads_repo, candidates_repo, attendance_repo, clock=clock),
        hackathon_service=HackathonService(hackathons_repo),
        report_service=ReportService(reports_repo, clock=clock),
        image_service=ImageService(candidates_repo, upload_dir=upload_dir),
    )
