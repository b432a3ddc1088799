from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..candidates.model import Candidate
from ..candidates.repository import CandidateRepository
from ..common.datetime_utils import EventClock
from ..common.validators import require_int_list, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Squad
from .repository import SquadRepository

logger = logging.getLogger(__name__)


class SquadService:
    """Roster bookkeeping: which candidates are in which squad."""

    def __init__(
        self,
        squads: SquadRepository,
        candidates: CandidateRepository,
        attendance: AttendanceRepository,
        *,
        clock: EventClock,
    ):
        self._squads = squads
        self._candidates = candidates
        self._attendance = attendance
        self._clock = clock

    def _validate_members(self, member_ids: Any) -> list[int]:
        ids = require_int_list(member_ids, "memberIds")
        if ids:
            known = {c.candidate_id for c in self._candidates.get_many(ids)}
            unknown = [i for i in ids if i not in known]
            if unknown:
                raise ValidationError(f"Unknown candidate ids: {', '.join(str(i) for i in unknown)}")
        return ids

    def create_squad(self, *, name: Any, member_ids: Any) -> Squad:
        name = require_non_empty(name, "name")
        if member_ids is None:
            raise ValidationError("memberIds is required")
        ids = self._validate_members(member_ids)

        squad_id = self._squads.create(name=name, member_ids=ids)
        logger.info("Created squad id=%s name=%r members=%s", squad_id, name, ids)
        return self.get_squad(squad_id)

    def list_squads(self) -> Sequence[Squad]:
        return self._squads.list_all()

    def get_squad(self, squad_id: int) -> Squad:
        squad = self._squads.get_by_id(int(squad_id))
        if not squad:
            raise NotFoundError("Squad not found")
        return squad

    def update_squad(self, squad_id: int, *, name: Any, member_ids: Any = None) -> None:
        """Rename the squad; a given ``member_ids`` replaces the whole roster."""
        name = require_non_empty(name, "name")
        ids: Optional[list[int]] = None if member_ids is None else self._validate_members(member_ids)

        if not self._squads.update(int(squad_id), name=name, member_ids=ids):
            raise NotFoundError("Squad not found")
        logger.info("Updated squad id=%s name=%r members=%s", squad_id, name, "unchanged" if ids is None else ids)

    def delete_squad(self, squad_id: int) -> None:
        if not self._squads.delete(int(squad_id)):
            raise NotFoundError("Squad not found")
        logger.info("Deleted squad id=%s", squad_id)

    def available_candidates(self, *, now: Optional[datetime] = None) -> Sequence[Candidate]:
        """Candidates present today and not on any roster, ordered by name.

        A snapshot: present ids and assigned ids are read once each, the
        difference is taken in memory, then the remaining rows are fetched.
        """
        today = (now or self._clock.now()).date()
        present = self._attendance.present_candidate_ids(work_date=today)
        assigned = self._squads.assigned_candidate_ids()
        available = present - assigned
        if not available:
            return []
        return list(self._candidates.get_many(available))
