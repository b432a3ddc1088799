from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..core.enums import HackathonStatus
from .model import Hackathon


class HackathonRepository(Protocol):
    def get_by_id(self, hackathon_id: int) -> Optional[Hackathon]:
        raise NotImplementedError

    def create(self, *, fields: dict[str, Any], status: HackathonStatus) -> Hackathon:
        raise NotImplementedError

    def search(self, *, term: Optional[str], limit: int, offset: int) -> Sequence[Hackathon]:
        raise NotImplementedError

    def count(self, *, term: Optional[str]) -> int:
        raise NotImplementedError

    def update_fields(self, hackathon_id: int, fields: dict[str, Any]) -> bool:
        raise NotImplementedError

    def list_by_status(self, status: HackathonStatus, *, limit: int, offset: int) -> Sequence[Hackathon]:
        raise NotImplementedError
