# Rev 0.2.0 — project card: stats, team, overdue, upcoming shooting days
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional

from PySide6.QtCore import QObject, Signal

from ..app_context import AppContext
from ..utils.config import SETTINGS_FILE, load_settings, save_settings
from ..utils.timeutil import format_date, format_datetime


class ProjectOverviewViewModel(QObject):
    """
    Emits:
      loaded({
        "project": {... project fields, start_display, due_display},
        "stats": {total, open, in_progress, done, by_phase, percent_complete},
        "team": [{id, name, email, role, person_role}],
        "overdue": [{id, name, phase, due_display}],
        "shooting_days": [{id, step_id, title, start_display, end_display}],
      })
    An unknown project emits {}.
    """
    loaded = Signal(dict)

    def __init__(self, ctx: AppContext, settings_path: Path = SETTINGS_FILE):
        super().__init__()
        self._ctx = ctx
        self._settings_path = settings_path
        self._last: Optional[Dict[str, Any]] = None

    def load(self, project_id: str) -> None:
        project = self._ctx.projects.get_project(project_id)
        if project is None:
            self._last = None
            self.loaded.emit({})
            return
        self._remember(project_id)

        proj = project.to_dict()
        proj["start_display"] = format_date(project.start_date)
        proj["due_display"] = format_date(project.due_date)

        info = {
            "project": proj,
            "stats": self._ctx.projects.get_project_stats(project_id).to_dict(),
            "team": [m.to_dict() for m in self._ctx.projects.get_project_team(project_id)],
            "overdue": [
                {"id": s.id, "name": s.name, "phase": s.phase, "due_display": format_date(s.due_date)}
                for s in self._ctx.steps.get_overdue_steps(project_id)
            ],
            "shooting_days": [
                {
                    "id": d.id,
                    "step_id": d.step_id,
                    "title": d.title,
                    "start_display": format_datetime(d.start),
                    "end_display": format_datetime(d.end),
                }
                for d in self._ctx.projects.get_upcoming_shooting_days(project_id)
            ],
        }
        self._last = info
        self.loaded.emit(info)

    def last(self) -> Optional[Dict[str, Any]]:
        return self._last

    def _remember(self, project_id: str) -> None:
        settings = load_settings(self._settings_path)
        if settings["ui"].get("last_viewed_project") != project_id:
            settings["ui"]["last_viewed_project"] = project_id
            save_settings(settings, self._settings_path)
