from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Squad


class SquadRepository(Protocol):
    def create(self, *, name: str, member_ids: Sequence[int]) -> int:
        """Insert the squad and its memberships atomically."""

        raise NotImplementedError

    def get_by_id(self, squad_id: int) -> Optional[Squad]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Squad]:
        raise NotImplementedError

    def update(self, squad_id: int, *, name: str, member_ids: Optional[Sequence[int]]) -> bool:
        """Rename; when ``member_ids`` is given, replace the whole roster."""

        raise NotImplementedError

    def delete(self, squad_id: int) -> bool:
        raise NotImplementedError

    def assigned_candidate_ids(self) -> set[int]:
        raise NotImplementedError
