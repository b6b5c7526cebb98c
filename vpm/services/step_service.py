# Rev 0.2.0

"""Step service (Rev 0.2.0)
CRUD, status toggling, assignee/file sets and the personal/overdue views.
Calendar side effects are best-effort and reported on OperationResult.
"""
from __future__ import annotations
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..errors import NotFoundError
from ..models.entities import Step, new_id
from ..models.patches import STEP_FIELDS, normalize_patch, unique_ids
from ..models.workflow import DEFAULT_WORKFLOW, WorkflowConfig
from ..repositories.sqlite_step_repository import SQLiteStepRepository
from ..utils.logging_setup import get_logger
from ..utils.timeutil import Clock, WhenLike, parse_when, to_iso, utc_now
from .gateways import CalendarGateway
from .person_service import PersonService
from .results import OperationResult
from .side_effects import release_calendar_event
from .status_rules import is_done, next_status

_FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)


class StepService:
    def __init__(
        self,
        steps: SQLiteStepRepository,
        people: PersonService,
        calendar: CalendarGateway,
        *,
        workflow: WorkflowConfig = DEFAULT_WORKFLOW,
        clock: Clock = utc_now,
    ):
        self._steps = steps
        self._people = people
        self._calendar = calendar
        self._workflow = workflow
        self._clock = clock
        self._log = get_logger("StepService")

    # -------------------------
    # Queries
    # -------------------------
    def get_step(self, step_id: str) -> Optional[Step]:
        return self._steps.get_step(step_id)

    def list_steps(self, project_id: str, phase: Optional[str] = None) -> List[Step]:
        """Project steps in phase order, creation order within a phase."""
        steps = self._steps.list_steps(project_id)
        if phase is not None:
            steps = [s for s in steps if s.phase == phase]
        return sorted(steps, key=lambda s: self._workflow.phase_index(s.phase))

    def list_steps_by_phase(self, project_id: str) -> Dict[str, List[Step]]:
        grouped: Dict[str, List[Step]] = {phase: [] for phase in self._workflow.phases}
        for step in self._steps.list_steps(project_id):
            grouped.setdefault(step.phase or "", []).append(step)
        return grouped

    def get_my_steps(self, project_id: Optional[str] = None) -> List[Step]:
        """
        Steps assigned to the session user, soonest due first.
        Undated steps come after every dated one and keep storage order.
        """
        me = self._people.get_current_person()
        if me is None:
            return []
        steps = self._steps.list_steps(project_id) if project_id else self._steps.list_steps()
        mine = [s for s in steps if me.id in s.assignee_ids]

        def due_key(step: Step):
            due = parse_when(step.due_date)
            return (due is None, due or _FAR_FUTURE)

        return sorted(mine, key=due_key)

    def get_overdue_steps(self, project_id: str) -> List[Step]:
        now = self._clock()
        out: List[Step] = []
        for step in self._steps.list_steps(project_id):
            if not step.due_date or is_done(step.status):
                continue
            due = parse_when(step.due_date)
            if due is not None and due < now:
                out.append(step)
        return out

    # -------------------------
    # CRUD
    # -------------------------
    def create_step(self, **fields: Any) -> Step:
        # project_id / phase are the caller's job; missing values are stored as-is
        data = normalize_patch(
            "step", STEP_FIELDS, {k: v for k, v in fields.items() if v is not None}, self._workflow
        )
        stamp = to_iso(self._clock())
        step = Step(
            id=new_id(),
            project_id=data.get("project_id"),
            phase=data.get("phase"),
            name=data.get("name") or "New Step",
            due_date=data.get("due_date"),
            assignee_ids=data.get("assignee_ids", []),
            status=data.get("status") or "Open",
            notes=data.get("notes", ""),
            linked_calendar_event_id=data.get("linked_calendar_event_id"),
            linked_drive_file_ids=data.get("linked_drive_file_ids", []),
            created_at=stamp,
            updated_at=stamp,
        )
        self._steps.save_step(step)
        self._log.debug("Created step %s (%s / %s)", step.id, step.phase, step.name)
        return step

    def update_step(self, step_id: str, **changes: Any) -> Step:
        step = self._require(step_id)
        patch = normalize_patch("step", STEP_FIELDS, changes, self._workflow)
        updated = replace(step, **patch, updated_at=self._touch(step.updated_at))
        self._steps.save_step(updated)
        return updated

    def delete_step(self, step_id: str) -> OperationResult[Step]:
        step = self._steps.get_step(step_id)
        if step is None:
            return OperationResult.not_found()
        result: OperationResult[Step] = OperationResult(ok=True, value=step)
        if step.linked_calendar_event_id:
            release_calendar_event(self._calendar, step.linked_calendar_event_id, result, self._log)
        self._steps.delete_step(step_id)
        self._log.info("Deleted step %s", step_id)
        return result

    # -------------------------
    # Status / fields
    # -------------------------
    def toggle_step_status(self, step_id: str) -> Step:
        step = self._require(step_id)
        return self.update_step(step_id, status=next_status(step.status))

    def set_step_due_date(self, step_id: str, due_date: WhenLike) -> Step:
        return self.update_step(step_id, due_date=due_date)

    # -------------------------
    # Assignees
    # -------------------------
    def assign_people_to_step(self, step_id: str, person_ids: Iterable[str]) -> Step:
        return self.update_step(step_id, assignee_ids=list(person_ids))

    def add_assignee_to_step(self, step_id: str, person_id: str) -> Step:
        step = self._require(step_id)
        if person_id in step.assignee_ids:
            return step
        return self.update_step(step_id, assignee_ids=[*step.assignee_ids, person_id])

    def remove_assignee_from_step(self, step_id: str, person_id: str) -> Step:
        step = self._require(step_id)
        return self.update_step(step_id, assignee_ids=[pid for pid in step.assignee_ids if pid != person_id])

    # -------------------------
    # Links
    # -------------------------
    def link_calendar_event(self, step_id: str, event_id: str) -> OperationResult[Step]:
        """Point the step at event_id; a different previously linked event is deleted first."""
        step = self._require(step_id)
        result: OperationResult[Step] = OperationResult(ok=True)
        previous = step.linked_calendar_event_id
        if previous and previous != event_id:
            release_calendar_event(self._calendar, previous, result, self._log)
        result.value = self.update_step(step_id, linked_calendar_event_id=event_id)
        return result

    def unlink_calendar_event(self, step_id: str) -> Step:
        return self.update_step(step_id, linked_calendar_event_id=None)

    def link_drive_file(self, step_id: str, file_id: str) -> Step:
        step = self._require(step_id)
        if file_id in step.linked_drive_file_ids:
            return step
        return self.update_step(step_id, linked_drive_file_ids=[*step.linked_drive_file_ids, file_id])

    def unlink_drive_file(self, step_id: str, file_id: str) -> Step:
        step = self._require(step_id)
        remaining = unique_ids(fid for fid in step.linked_drive_file_ids if fid != file_id)
        return self.update_step(step_id, linked_drive_file_ids=remaining)

    # -------------------------
    # internals
    # -------------------------
    def _require(self, step_id: str) -> Step:
        step = self._steps.get_step(step_id)
        if step is None:
            raise NotFoundError("step", step_id)
        return step

    def _touch(self, previous: str) -> str:
        # ISO UTC strings sort chronologically; never move updated_at backwards
        return max(to_iso(self._clock()), previous or "")
