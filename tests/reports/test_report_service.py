from __future__ import annotations

import io
from datetime import date, datetime

import pytest
from openpyxl import load_workbook
from PIL import Image

from hackathon_admin.candidates.model import Candidate
from hackathon_admin.core.enums import HackathonStatus
from hackathon_admin.core.exceptions import NotFoundError
from hackathon_admin.hackathons.model import Hackathon
from hackathon_admin.reports.model import (
    AttendanceExportRow,
    CandidateAttendanceRow,
    DailyAttendanceRow,
    SquadSummaryRow,
)
from hackathon_admin.reports.service import ReportService
from hackathon_admin.squads.model import Squad


class StaticReports:
    def candidate_attendance(self):
        return [
            CandidateAttendanceRow(
                candidate_id=1,
                name="Alice",
                email="alice@example.com",
                age=24,
                degree="BSc",
                university="MIT",
                batch="2026",
                phone="0123",
                skills="Python",
                selfie_path=None,
                resume_path=None,
                created_at=datetime(2026, 3, 1, 10, 0),
                total_attendance_days=2,
                last_attendance=datetime(2026, 3, 14, 9, 0),
            )
        ]

    def squad_summaries(self):
        return [
            SquadSummaryRow(
                squad_id=1,
                name="Alpha",
                created_at=datetime(2026, 3, 14, 10, 0),
                member_names=["Alice", "Bob"],
                member_skills=["Python", "Go"],
            )
        ]

    def daily_attendance(self):
        return [
            DailyAttendanceRow(day=date(2026, 3, 14), attendance_count=3, checked_out_count=1),
            DailyAttendanceRow(day=date(2026, 3, 13), attendance_count=2, checked_out_count=2),
        ]

    def skills_distribution(self):
        return [("Python", 2), ("Go", 1)]

    def attendance_export(self):
        return [
            AttendanceExportRow(
                attendance_id=7,
                candidate_name="Alice",
                email="alice@example.com",
                check_in_time=datetime(2026, 3, 14, 9, 0),
                check_out_time=None,
                status="present",
            )
        ]


def test_comprehensive_summary(clock, fixed_now):
    report = ReportService(StaticReports(), clock=clock).comprehensive()

    assert report["generatedAt"] == fixed_now.isoformat()
    assert report["summary"] == {
        "totalCandidates": 1,
        "totalSquads": 1,
        "totalAttendanceDays": 5,
        "averageAttendancePerDay": 2.5,
    }
    assert report["squads"][0]["memberNames"] == ["Alice", "Bob"]
    assert report["attendanceStats"][0] == {"date": "2026-03-14", "attendance_count": 3, "checked_out_count": 1}
    assert report["skillsDistribution"][0] == {"skills": "Python", "count": 2}


def test_comprehensive_with_no_attendance(clock):
    class Empty(StaticReports):
        def daily_attendance(self):
            return []

    assert ReportService(Empty(), clock=clock).comprehensive()["summary"]["averageAttendancePerDay"] == 0


def test_excel_workbook_has_three_sheets(clock):
    service = ReportService(StaticReports(), clock=clock)

    wb = load_workbook(io.BytesIO(service.excel_workbook()))

    assert wb.sheetnames == ["Candidates", "Squads", "Attendance"]
    squads = list(wb["Squads"].iter_rows(values_only=True))
    assert squads[0] == ("Squad ID", "Squad Name", "Members", "Created Date")
    assert squads[1][:3] == (1, "Alpha", "Alice, Bob")
    assert wb["Attendance"]["B2"].value == "Alice"
    assert service.excel_filename() == "hackathon_report_2026-03-14.xlsx"


def _squad(squad_id, name, *members):
    return Squad(squad_id=squad_id, name=name, members=tuple(members))


def test_squads_pdf_renders_members_and_photos(clock, tmp_path):
    png = tmp_path / "alice.png"
    Image.new("RGB", (16, 16), "red").save(png)
    gif = tmp_path / "bob.gif"
    Image.new("RGB", (16, 16), "blue").save(gif)
    broken = tmp_path / "carol.png"
    broken.write_bytes(b"\x89PNG not really")

    alice = Candidate(candidate_id=1, name="Alice", email="a@x", skills="Python", photo_url="alice.png")
    bob = Candidate(candidate_id=2, name="Bob <Lead>", email="b@x", photo_url="bob.gif")
    carol = Candidate(candidate_id=3, name="Carol", email="c@x", photo_url="carol.png")
    dave = Candidate(candidate_id=4, name="Dave", email="d@x")
    photos = {1: png, 2: gif, 3: broken}
    asked = []

    def photo_for(candidate):
        asked.append(candidate.candidate_id)
        return photos.get(candidate.candidate_id)

    hackathon = Hackathon(hackathon_id=5, title="Spring Hack", description="d", status=HackathonStatus.ONGOING)
    service = ReportService(StaticReports(), clock=clock)

    pdf = service.squads_pdf(
        hackathon,
        [_squad(1, "Alpha", alice, bob), _squad(2, "Beta", carol, dave), _squad(3, "Empty")],
        photo_for=photo_for,
    )

    assert pdf.startswith(b"%PDF")
    assert asked == [1, 2, 3, 4]
    assert service.squads_pdf_filename(5) == "hackathon_5_squads.pdf"


def test_squads_pdf_needs_squads(clock):
    hackathon = Hackathon(hackathon_id=5, title="Spring Hack", description="d", status=HackathonStatus.ONGOING)

    with pytest.raises(NotFoundError, match="No squads found"):
        ReportService(StaticReports(), clock=clock).squads_pdf(hackathon, [], photo_for=lambda c: None)
