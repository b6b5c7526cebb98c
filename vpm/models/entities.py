# Rev 0.2.0
"""Records persisted by the repositories. Dates are ISO strings, ids are opaque."""
from __future__ import annotations
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Project:
    id: str
    title: str = "New Video Project"
    status: str = "Open"
    priority: str = "Medium"
    start_date: Optional[str] = None
    due_date: Optional[str] = None
    producer_id: Optional[str] = None
    director_id: Optional[str] = None
    line_producer_id: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Step:
    id: str
    project_id: Optional[str]
    phase: Optional[str]
    name: str = "New Step"
    due_date: Optional[str] = None
    assignee_ids: List[str] = field(default_factory=list)
    status: str = "Open"
    notes: str = ""
    linked_calendar_event_id: Optional[str] = None
    linked_drive_file_ids: List[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Person:
    id: str
    name: str = ""
    email: str = ""
    role: str = ""
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Link:
    id: str
    project_id: Optional[str]
    url: str = ""
    title: str = ""
    kind: str = "web"
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CalendarEvent:
    id: str
    title: str
    start: datetime
    end: datetime


@dataclass
class TeamMember:
    person: Person
    role: str   # role label on the project, not Person.role

    def to_dict(self) -> Dict[str, Any]:
        d = self.person.to_dict()
        d["role"] = self.role
        d["person_role"] = self.person.role
        return d


@dataclass
class ShootingDay:
    id: str           # calendar event id
    step_id: str
    title: str
    start: datetime
    end: datetime


@dataclass
class PhaseProgress:
    total: int = 0
    done: int = 0


@dataclass
class ProjectStats:
    total: int = 0
    open: int = 0
    in_progress: int = 0
    done: int = 0
    by_phase: Dict[str, PhaseProgress] = field(default_factory=dict)
    percent_complete: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
