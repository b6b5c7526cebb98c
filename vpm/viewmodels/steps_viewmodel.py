# Rev 0.2.0 — phase groups + "my steps" + step commands
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from PySide6.QtCore import QObject, Signal

from ..app_context import AppContext
from ..errors import TrackerError
from ..models.entities import Step
from ..utils.logging_setup import get_logger
from ..utils.timeutil import WhenLike, format_date


class StepsViewModel(QObject):
    stepsReloaded = Signal(str, list)     # project_id, [{"phase": str, "steps": [...]}]
    myStepsLoaded = Signal(list)
    errorRaised = Signal(str)

    def __init__(self, ctx: AppContext):
        super().__init__()
        self._ctx = ctx
        self._project_id: Optional[str] = None
        self._log = get_logger("StepsViewModel")

    # ---- filters
    def set_project(self, project_id: Optional[str]) -> None:
        self._project_id = project_id

    # ---- queries
    def reload(self) -> None:
        if self._project_id is None:
            self.stepsReloaded.emit("", [])
            return
        names = self._person_names()
        groups = [
            {"phase": phase, "steps": [self._decorate(s, names) for s in steps]}
            for phase, steps in self._ctx.steps.list_steps_by_phase(self._project_id).items()
        ]
        self.stepsReloaded.emit(self._project_id, groups)

    def load_my_steps(self, *, this_project_only: bool = False) -> None:
        scope = self._project_id if this_project_only else None
        names = self._person_names()
        self.myStepsLoaded.emit([self._decorate(s, names) for s in self._ctx.steps.get_my_steps(scope)])

    # ---- commands
    def toggle_status(self, step_id: str) -> bool:
        return self._run(self._ctx.steps.toggle_step_status, step_id)

    def set_due_date(self, step_id: str, due_date: WhenLike) -> bool:
        return self._run(self._ctx.steps.set_step_due_date, step_id, due_date)

    def assign_people(self, step_id: str, person_ids: Iterable[str]) -> bool:
        return self._run(self._ctx.steps.assign_people_to_step, step_id, list(person_ids))

    def assign_by_email(self, step_id: str, email: str, name: str | None = None) -> bool:
        try:
            person = self._ctx.people.find_or_create_person(email, name)
        except TrackerError as e:
            self.errorRaised.emit(str(e))
            return False
        return self._run(self._ctx.steps.add_assignee_to_step, step_id, person.id)

    def remove_assignee(self, step_id: str, person_id: str) -> bool:
        return self._run(self._ctx.steps.remove_assignee_from_step, step_id, person_id)

    def link_drive_file(self, step_id: str, file_id: str) -> bool:
        return self._run(self._ctx.steps.link_drive_file, step_id, file_id)

    def link_calendar_event(self, step_id: str, event_id: str) -> bool:
        try:
            result = self._ctx.steps.link_calendar_event(step_id, event_id)
        except TrackerError as e:
            self.errorRaised.emit(str(e))
            return False
        for w in result.warnings:
            self.errorRaised.emit(w)
        self.reload()
        return result.ok

    def delete_step(self, step_id: str) -> bool:
        result = self._ctx.steps.delete_step(step_id)
        for w in result.warnings:
            self.errorRaised.emit(w)
        if result.ok:
            self.reload()
        return result.ok

    # ---- internals
    def _run(self, fn, *args) -> bool:
        try:
            fn(*args)
        except TrackerError as e:
            self._log.warning("%s failed: %s", fn.__name__, e)
            self.errorRaised.emit(str(e))
            return False
        self.reload()
        return True

    def _person_names(self) -> Dict[str, str]:
        return {p.id: (p.name or p.email) for p in self._ctx.people.list_people()}

    @staticmethod
    def _decorate(step: Step, names: Dict[str, str]) -> Dict[str, Any]:
        rec = step.to_dict()
        rec["due_display"] = format_date(step.due_date)
        # dangling ids render as the raw id
        rec["assignee_names"] = [names.get(pid, pid) for pid in step.assignee_ids]
        return rec
