# Rev 0.2.0

"""Pytest fixtures for vpm (Rev 0.2.0)"""
from __future__ import annotations
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Optional, Set

import pytest

from vpm.app_context import AppContext
from vpm.errors import CollaboratorError
from vpm.models.entities import CalendarEvent, new_id
from vpm.repositories.db import Database
from vpm.services.gateways import CalendarGateway, IdentityProvider


NOW = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kw) -> None:
        self.now = self.now + timedelta(**kw)


class FakeCalendar(CalendarGateway):
    """In-memory calendar; `down` simulates an outage, `broken` fails single ids."""

    def __init__(self):
        self.events: Dict[str, CalendarEvent] = {}
        self.deleted: list[str] = []
        self.broken: Set[str] = set()
        self.down = False

    def add(self, title: str, start: datetime, hours: int = 8) -> CalendarEvent:
        event = CalendarEvent(id=new_id(), title=title, start=start, end=start + timedelta(hours=hours))
        self.events[event.id] = event
        return event

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        if self.down or event_id in self.broken:
            raise CollaboratorError("calendar unavailable")
        return self.events.get(event_id)

    def delete_event(self, event_id: str) -> None:
        if self.down or event_id in self.broken:
            raise CollaboratorError("calendar unavailable")
        if event_id not in self.events:
            raise CollaboratorError(f"no event {event_id}")
        del self.events[event_id]
        self.deleted.append(event_id)


class SwitchableIdentity(IdentityProvider):
    def __init__(self, email: Optional[str] = None):
        self.email = email

    def current_email(self) -> Optional[str]:
        return self.email


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def calendar() -> FakeCalendar:
    return FakeCalendar()


@pytest.fixture()
def identity() -> SwitchableIdentity:
    return SwitchableIdentity()


@pytest.fixture()
def ctx(tmp_path: Path, calendar, identity, clock):
    context = AppContext.create(tmp_path / "test.db", calendar=calendar, identity=identity, clock=clock)
    try:
        yield context
    finally:
        context.close()


@pytest.fixture()
def db_conn(tmp_path: Path):
    db = Database(path=str(tmp_path / "raw.db"))
    try:
        db.run_migrations()
        yield db.conn
    finally:
        db.close()
