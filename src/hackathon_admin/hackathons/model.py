from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.enums import HackathonStatus


@dataclass(frozen=True)
class Hackathon:
    hackathon_id: int
    title: str
    description: str
    status: HackathonStatus
    client_name: Optional[str] = None
    execution_date: Optional[date] = None
    executed_by: Optional[str] = None
    registration_link: Optional[str] = None
    skills_focused: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.hackathon_id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "client_name": self.client_name,
            "execution_date": isoformat(self.execution_date),
            "executed_by": self.executed_by,
            "registration_link": self.registration_link,
            "skills_focused": self.skills_focused,
            "created_at": isoformat(self.created_at),
        }


# Request key (camelCase, as sent by the admin UI) -> column.
REQUEST_FIELDS = {
    "title": "title",
    "clientName": "client_name",
    "executionDate": "execution_date",
    "executedBy": "executed_by",
    "description": "description",
    "registrationLink": "registration_link",
    "skillsFocused": "skills_focused",
}
