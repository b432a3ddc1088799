from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.pagination import Page, make_paging
from ..common.validators import optional_text, require_int, require_non_empty, require_one_of
from ..core.enums import HackathonStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import REQUEST_FIELDS, Hackathon
from .repository import HackathonRepository

logger = logging.getLogger(__name__)

_STATUS_VALUES = [s.value for s in HackathonStatus]


def _parse_status(value: Any) -> HackathonStatus:
    return HackathonStatus(require_one_of(str(value), _STATUS_VALUES, "status"))


def _request_to_columns(data: dict[str, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for key, column in REQUEST_FIELDS.items():
        value = optional_text(data.get(key))
        if value is None:
            continue
        # Accept a full ISO timestamp from date pickers; keep the date part.
        fields[column] = parse_iso_date(value[:10]) if column == "execution_date" else value
    return fields


class HackathonService:
    def __init__(self, hackathons: HackathonRepository):
        self._hackathons = hackathons

    def create(self, data: dict[str, Any]) -> Hackathon:
        fields = _request_to_columns(data)
        fields["title"] = require_non_empty(fields.get("title"), "title")
        fields["description"] = require_non_empty(fields.get("description"), "description")
        hackathon = self._hackathons.create(fields=fields, status=HackathonStatus.SCHEDULED)
        logger.info("Created hackathon id=%s title=%r", hackathon.hackathon_id, hackathon.title)
        return hackathon

    def list_hackathons(self, *, search: Optional[str] = None, page: Any = None, page_size: Any = None) -> Page[Hackathon]:
        paging = make_paging(page, page_size)
        total = self._hackathons.count(term=search)
        items = self._hackathons.search(term=search, limit=paging.page_size, offset=paging.offset)
        return Page(items=items, total=total, page=paging.page, page_size=paging.page_size)

    def get(self, hackathon_id: int) -> Hackathon:
        hackathon = self._hackathons.get_by_id(int(hackathon_id))
        if not hackathon:
            raise NotFoundError("Hackathon not found")
        return hackathon

    def update(self, hackathon_id: int, data: dict[str, Any]) -> Hackathon:
        fields = _request_to_columns(data)
        if optional_text(data.get("status")) is not None:
            fields["status"] = _parse_status(data["status"]).value
        if not fields:
            raise ValidationError("No fields to update")
        if not self._hackathons.update_fields(int(hackathon_id), fields):
            raise NotFoundError("Hackathon not found")
        return self.get(hackathon_id)

    def delete(self, hackathon_id: int) -> None:
        """Soft delete: the row stays, its status becomes ``deleted``."""
        if not self._hackathons.update_fields(int(hackathon_id), {"status": HackathonStatus.DELETED.value}):
            raise NotFoundError("Hackathon not found")
        logger.info("Marked hackathon id=%s as deleted", hackathon_id)

    def list_by_status(self, status: str, *, limit: Any = None, offset: Any = None) -> Sequence[Hackathon]:
        parsed = _parse_status(status)
        lim = 10 if limit in (None, "") else max(0, require_int(limit, "limit"))
        off = 0 if offset in (None, "") else max(0, require_int(offset, "offset"))
        return self._hackathons.list_by_status(parsed, limit=lim, offset=off)
