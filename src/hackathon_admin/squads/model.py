from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..candidates.model import Candidate
from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class Squad:
    squad_id: int
    name: str
    created_at: Optional[datetime] = None
    members: tuple[Candidate, ...] = field(default_factory=tuple)

    @property
    def member_ids(self) -> list[int]:
        return [m.candidate_id for m in self.members]

    def to_dict(self) -> dict:
        return {
            "id": self.squad_id,
            "name": self.name,
            "created_at": isoformat(self.created_at),
            "memberIds": self.member_ids,
            "members": [m.to_dict() for m in self.members],
        }
