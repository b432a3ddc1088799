from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Protocol, Sequence

from .model import Candidate


class CandidateRepository(Protocol):
    def get_by_id(self, candidate_id: int) -> Optional[Candidate]:
        raise NotImplementedError

    def get_by_qr_code(self, qr_code: str) -> Optional[Candidate]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Candidate]:
        raise NotImplementedError

    def get_many(self, candidate_ids: Iterable[int]) -> Sequence[Candidate]:
        """Rows for the given ids, ordered by name (ties by id)."""

        raise NotImplementedError

    def search(self, *, term: Optional[str], limit: int, offset: int) -> Sequence[Candidate]:
        raise NotImplementedError

    def count(self, *, term: Optional[str]) -> int:
        raise NotImplementedError

    def create(self, *, fields: dict[str, Any], qr_code_for: Callable[[int], str]) -> Candidate:
        """Insert a candidate and stamp its QR code in the same transaction."""

        raise NotImplementedError

    def update_fields(self, candidate_id: int, fields: dict[str, Any]) -> bool:
        raise NotImplementedError

    def set_qr_code_if_missing(self, candidate_id: int, qr_code: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, candidate_id: int) -> bool:
        raise NotImplementedError

    def clear_all(self) -> None:
        """Remove every squad, attendance record and candidate."""

        raise NotImplementedError
