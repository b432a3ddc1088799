from __future__ import annotations

import logging
from typing import IO, Any, Callable, Optional

from ..common.pagination import Page, make_paging
from ..common.validators import optional_text, require_int, require_non_empty
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..hackathons.repository import HackathonRepository
from .importer import read_candidate_rows, source_kind
from .model import EDITABLE_FIELDS, Candidate, ImportResult
from .qr import make_qr_payload, render_data_url, render_png
from .repository import CandidateRepository

logger = logging.getLogger(__name__)


def _clean_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Keep editable, non-empty fields; ``age`` must be an integer."""
    fields: dict[str, Any] = {}
    for key in EDITABLE_FIELDS:
        if key not in data:
            continue
        if key == "age":
            if data[key] in (None, ""):
                continue
            fields["age"] = require_int(data[key], "age")
            continue
        value = optional_text(data[key])
        if value is not None:
            fields[key] = value
    return fields


class CandidateService:
    """Use cases of the candidate directory."""

    def __init__(
        self,
        candidates: CandidateRepository,
        hackathons: Optional[HackathonRepository] = None,
        *,
        qr_payload: Callable[[int], str] = make_qr_payload,
    ):
        self._candidates = candidates
        self._hackathons = hackathons
        self._qr_payload = qr_payload

    def list_candidates(self, *, search: Optional[str] = None, page: Any = None, page_size: Any = None) -> Page[Candidate]:
        paging = make_paging(page, page_size)
        total = self._candidates.count(term=search)
        items = self._candidates.search(term=search, limit=paging.page_size, offset=paging.offset)
        return Page(items=items, total=total, page=paging.page, page_size=paging.page_size)

    def get_candidate(self, candidate_id: int) -> Candidate:
        candidate = self._candidates.get_by_id(int(candidate_id))
        if not candidate:
            raise NotFoundError("Candidate not found")
        return candidate

    def register_candidate(self, data: dict[str, Any]) -> Candidate:
        fields = _clean_fields(data)
        fields["name"] = require_non_empty(fields.get("name"), "name")
        fields["email"] = require_non_empty(fields.get("email"), "email")
        if data.get("hackathonId") not in (None, ""):
            fields["hackathon_id"] = self._require_hackathon(data["hackathonId"])

        if self._candidates.get_by_email(fields["email"]):
            raise ConflictError("Candidate with this email already exists")
        candidate = self._candidates.create(fields=fields, qr_code_for=self._qr_payload)
        logger.info("Registered candidate id=%s email=%s", candidate.candidate_id, candidate.email)
        return candidate

    def update_candidate(self, candidate_id: int, data: dict[str, Any]) -> None:
        fields = _clean_fields(data)
        if not fields:
            raise ValidationError("No fields to update")
        try:
            updated = self._candidates.update_fields(int(candidate_id), fields)
        except ConflictError:
            raise ConflictError("Candidate with this email already exists")
        if not updated:
            raise NotFoundError("Candidate not found")

    def delete_candidate(self, candidate_id: int) -> None:
        if not self._candidates.delete_by_id(int(candidate_id)):
            raise NotFoundError("Candidate not found")
        logger.info("Deleted candidate id=%s", candidate_id)

    def clear_all(self) -> None:
        self._candidates.clear_all()
        logger.warning("Cleared all candidates, attendance and squads")

    def _require_hackathon(self, hackathon_id: Any) -> int:
        hid = require_int(hackathon_id, "hackathonId")
        if self._hackathons is None or not self._hackathons.get_by_id(hid):
            raise ValidationError("Invalid hackathon ID")
        return hid

    def import_file(self, *, filename: str, stream: IO[bytes], hackathon_id: Any) -> ImportResult:
        """Import candidates from CSV/Excel into a hackathon.

        Rows without name or email are skipped, as are rows whose email is
        already registered. Every imported candidate gets a QR code.
        """
        hid = self._require_hackathon(hackathon_id)
        rows = read_candidate_rows(filename, stream)

        imported: list[Candidate] = []
        skipped = 0
        for row in rows:
            if not row.get("name") or not row.get("email"):
                skipped += 1
                continue
            if self._candidates.get_by_email(row["email"]):
                skipped += 1
                continue
            fields = {k: v for k, v in row.items() if v is not None}
            fields["hackathon_id"] = hid
            try:
                imported.append(self._candidates.create(fields=fields, qr_code_for=self._qr_payload))
            except ConflictError:
                # Same email twice inside one sheet.
                skipped += 1

        logger.info("Imported %d candidates into hackathon %s (%d skipped)", len(imported), hid, skipped)
        return ImportResult(imported=imported, skipped=skipped, source=source_kind(filename))

    def qr_code_for(self, candidate_id: int) -> str:
        candidate = self.get_candidate(candidate_id)
        if not candidate.qr_code:
            raise NotFoundError("QR code not found")
        return candidate.qr_code

    def ensure_qr_code(self, candidate_id: int) -> str:
        """Issue a QR code if the candidate has none; an existing code is kept."""
        candidate = self.get_candidate(candidate_id)
        if candidate.qr_code:
            return candidate.qr_code
        # A concurrent request may win the conditional update; re-read either way.
        self._candidates.set_qr_code_if_missing(candidate.candidate_id, self._qr_payload(candidate.candidate_id))
        return self.qr_code_for(candidate.candidate_id)

    def qr_png(self, candidate_id: int) -> bytes:
        return render_png(self.qr_code_for(candidate_id))

    def qr_data_url(self, candidate_id: int) -> str:
        return render_data_url(self.qr_code_for(candidate_id))
