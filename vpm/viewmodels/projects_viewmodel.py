# Rev 0.2.0
# vpm/viewmodels/projects_viewmodel.py
from __future__ import annotations
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, Signal

from ..app_context import AppContext
from ..errors import TrackerError
from ..utils.config import SETTINGS_FILE, load_settings
from ..utils.logging_setup import get_logger
from ..utils.timeutil import format_date


class ProjectsViewModel(QObject):
    """
    Emits:
      projectsReloaded([{id, title, status, priority, due_display, ...}])
      errorRaised(str)
    """
    projectsReloaded = Signal(list)
    errorRaised = Signal(str)

    def __init__(self, ctx: AppContext, settings_path: Path = SETTINGS_FILE):
        super().__init__()
        self._ctx = ctx
        self._settings_path = settings_path
        self._log = get_logger("ProjectsViewModel")

    def reload(self) -> None:
        rows = []
        for p in self._ctx.projects.list_projects():
            rec = p.to_dict()
            rec["due_display"] = format_date(p.due_date)
            rows.append(rec)
        self.projectsReloaded.emit(rows)

    def home_project_id(self) -> Optional[str]:
        """Last viewed project if it still exists, else the newest one; None means show the welcome state."""
        projects = self._ctx.projects.list_projects()
        if not projects:
            return None
        last = load_settings(self._settings_path)["ui"].get("last_viewed_project")
        if last and any(p.id == last for p in projects):
            return last
        return projects[0].id

    def create_project(self, title: str, *, priority: str | None = None) -> Optional[str]:
        try:
            project = self._ctx.projects.create_project(title=title, priority=priority)
        except TrackerError as e:
            self._log.warning("create_project failed: %s", e)
            self.errorRaised.emit(str(e))
            return None
        self.reload()
        return project.id

    def delete_project(self, project_id: str) -> bool:
        result = self._ctx.projects.delete_project(project_id)
        for w in result.warnings:
            self.errorRaised.emit(w)
        self.reload()
        return result.ok
