# Rev 0.2.0

# vpm – SQLiteCalendarRepository (Rev 0.2.0)
# Local calendar used when no host calendar is wired in.

from __future__ import annotations
from datetime import datetime
from typing import Optional

from ..errors import CollaboratorError
from ..models.entities import CalendarEvent, new_id
from ..services.gateways import CalendarGateway
from ..utils.timeutil import parse_when, to_iso
from .sqlite_base import SQLiteRepository


class SQLiteCalendarRepository(SQLiteRepository, CalendarGateway):
    """
    Expected schema: calendar_events(id TEXT PRIMARY KEY, title, start_utc, end_utc)
    Timestamps are stored as ISO UTC strings and returned as aware datetimes.
    """

    def create_event(self, title: str, start: datetime, end: datetime) -> CalendarEvent:
        event = CalendarEvent(id=new_id(), title=title, start=start, end=end)
        self._upsert("calendar_events", {
            "id": event.id,
            "title": title,
            "start_utc": to_iso(start),
            "end_utc": to_iso(end),
        })
        return event

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        row = self._fetch_one(
            "SELECT id, title, start_utc, end_utc FROM calendar_events WHERE id = ?;", (event_id,)
        )
        return self._row_to_event(row) if row else None

    def delete_event(self, event_id: str) -> None:
        if not self._delete("calendar_events", event_id):
            raise CollaboratorError(f"Calendar event not found: {event_id}")

    @staticmethod
    def _row_to_event(row) -> CalendarEvent:
        return CalendarEvent(
            id=row["id"],
            title=row["title"],
            start=parse_when(row["start_utc"]),
            end=parse_when(row["end_utc"]),
        )
