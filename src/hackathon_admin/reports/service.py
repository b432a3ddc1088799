from __future__ import annotations

import io
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence

import pandas as pd

from ..candidates.model import Candidate
from ..common.datetime_utils import EventClock, isoformat
from ..core.exceptions import NotFoundError
from ..hackathons.model import Hackathon
from ..squads.model import Squad
from .pdf import render_squads_pdf
from .repository import ReportRepository

EXCEL_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class ReportService:
    def __init__(self, reports: ReportRepository, *, clock: EventClock):
        self._reports = reports
        self._clock = clock

    def comprehensive(self, *, now: Optional[datetime] = None) -> dict:
        candidates = self._reports.candidate_attendance()
        squads = self._reports.squad_summaries()
        daily = self._reports.daily_attendance()
        skills = self._reports.skills_distribution()

        total_days = sum(d.attendance_count for d in daily)
        average = round(total_days / len(daily), 2) if daily else 0

        return {
            "generatedAt": isoformat(now or self._clock.now()),
            "summary": {
                "totalCandidates": len(candidates),
                "totalSquads": len(squads),
                "totalAttendanceDays": total_days,
                "averageAttendancePerDay": average,
            },
            "candidates": [
                {
                    "id": c.candidate_id,
                    "name": c.name,
                    "email": c.email,
                    "university": c.university,
                    "skills": c.skills,
                    "totalAttendanceDays": c.total_attendance_days,
                    "lastAttendance": isoformat(c.last_attendance),
                    "selfiePath": c.selfie_path,
                    "resumePath": c.resume_path,
                }
                for c in candidates
            ],
            "squads": [
                {
                    "id": s.squad_id,
                    "name": s.name,
                    "memberNames": s.member_names,
                    "memberSkills": s.member_skills,
                    "createdAt": isoformat(s.created_at),
                }
                for s in squads
            ],
            "attendanceStats": [
                {
                    "date": isoformat(d.day),
                    "attendance_count": d.attendance_count,
                    "checked_out_count": d.checked_out_count,
                }
                for d in daily
            ],
            "skillsDistribution": [{"skills": s, "count": n} for s, n in skills],
        }

    def excel_filename(self, *, now: Optional[datetime] = None) -> str:
        return f"hackathon_report_{(now or self._clock.now()).strftime('%Y-%m-%d')}.xlsx"

    def excel_workbook(self) -> bytes:
        """Candidates, Squads and Attendance sheets as an in-memory .xlsx."""
        candidates = pd.DataFrame(
            [
                {
                    "ID": c.candidate_id,
                    "Name": c.name,
                    "Age": c.age,
                    "Degree": c.degree,
                    "University": c.university,
                    "Batch": c.batch,
                    "Phone": c.phone,
                    "Email": c.email,
                    "Skills": c.skills,
                    "Total Attendance Days": c.total_attendance_days,
                    "Last Attendance": c.last_attendance,
                    "Registration Date": c.created_at,
                }
                for c in self._reports.candidate_attendance()
            ],
            columns=[
                "ID", "Name", "Age", "Degree", "University", "Batch", "Phone", "Email",
                "Skills", "Total Attendance Days", "Last Attendance", "Registration Date",
            ],
        )
        squads = pd.DataFrame(
            [
                {
                    "Squad ID": s.squad_id,
                    "Squad Name": s.name,
                    "Members": ", ".join(s.member_names),
                    "Created Date": s.created_at,
                }
                for s in self._reports.squad_summaries()
            ],
            columns=["Squad ID", "Squad Name", "Members", "Created Date"],
        )
        attendance = pd.DataFrame(
            [
                {
                    "Attendance ID": a.attendance_id,
                    "Candidate Name": a.candidate_name,
                    "Email": a.email,
                    "Check In Time": a.check_in_time,
                    "Check Out Time": a.check_out_time,
                    "Status": a.status,
                }
                for a in self._reports.attendance_export()
            ],
            columns=["Attendance ID", "Candidate Name", "Email", "Check In Time", "Check Out Time", "Status"],
        )

        out = io.BytesIO()
        with pd.ExcelWriter(out, engine="openpyxl") as writer:
            candidates.to_excel(writer, sheet_name="Candidates", index=False)
            squads.to_excel(writer, sheet_name="Squads", index=False)
            attendance.to_excel(writer, sheet_name="Attendance", index=False)
        return out.getvalue()

    def squads_pdf(
        self,
        hackathon: Hackathon,
        squads: Sequence[Squad],
        *,
        photo_for: Callable[[Candidate], Optional[Path]],
    ) -> bytes:
        if not squads:
            raise NotFoundError("No squads found")
        return render_squads_pdf(title=f"{hackathon.title}: squads", squads=squads, photo_for=photo_for)

    @staticmethod
    def squads_pdf_filename(hackathon_id: int) -> str:
        return f"hackathon_{int(hackathon_id)}_squads.pdf"
