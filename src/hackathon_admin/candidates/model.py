from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class Candidate:
    """A registered hackathon participant."""

    candidate_id: int
    name: str
    email: str
    phone: Optional[str] = None
    university: Optional[str] = None
    degree: Optional[str] = None
    skills: Optional[str] = None
    age: Optional[int] = None
    batch: Optional[str] = None
    qr_code: Optional[str] = None
    photo_url: Optional[str] = None
    resume_path: Optional[str] = None
    selfie_path: Optional[str] = None
    hackathon_id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.candidate_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "university": self.university,
            "degree": self.degree,
            "skills": self.skills,
            "age": self.age,
            "batch": self.batch,
            "qr_code": self.qr_code,
            "photo_url": self.photo_url,
            "resume_path": self.resume_path,
            "selfie_path": self.selfie_path,
            "hackathon_id": self.hackathon_id,
            "created_at": isoformat(self.created_at),
        }


# Columns an operator may set through registration, import or partial update.
EDITABLE_FIELDS = ("name", "age", "degree", "university", "batch", "phone", "email", "skills")


@dataclass(frozen=True)
class ImportResult:
    imported: list[Candidate]
    skipped: int
    source: str

    def to_dict(self) -> dict:
        return {
            "message": f"{self.source} file processed successfully",
            "importedCount": len(self.imported),
            "skippedCount": self.skipped,
            "candidates": [c.to_dict() for c in self.imported],
        }
