# Rev 0.2.0

"""Project service (Rev 0.2.0)
- create_project seeds one Open step per (phase, default step name)
- delete_project releases linked calendar events first (best-effort), then
  removes the project, its steps and its links in one transaction
- stats / team / upcoming shooting days are derived from the stored steps
"""
from __future__ import annotations
from dataclasses import replace
from typing import Any, List, Optional

from ..errors import NotFoundError
from ..models.entities import (
    PhaseProgress,
    Project,
    ProjectStats,
    ShootingDay,
    TeamMember,
    new_id,
)
from ..models.patches import PROJECT_FIELDS, normalize_patch
from ..models.types import STATUS_DONE, STATUS_IN_PROGRESS, STATUS_OPEN
from ..models.workflow import DEFAULT_WORKFLOW, WorkflowConfig
from ..repositories.db import Database
from ..repositories.sqlite_link_repository import SQLiteLinkRepository
from ..repositories.sqlite_person_repository import SQLitePersonRepository
from ..repositories.sqlite_project_repository import SQLiteProjectRepository
from ..repositories.sqlite_step_repository import SQLiteStepRepository
from ..utils.logging_setup import get_logger
from ..utils.timeutil import Clock, to_iso, utc_now
from .gateways import CalendarGateway
from .results import CascadeSummary, OperationResult
from .side_effects import release_calendar_event
from .step_service import StepService


class ProjectService:
    def __init__(
        self,
        db: Database,
        projects: SQLiteProjectRepository,
        steps: SQLiteStepRepository,
        links: SQLiteLinkRepository,
        people: SQLitePersonRepository,
        step_service: StepService,
        calendar: CalendarGateway,
        *,
        workflow: WorkflowConfig = DEFAULT_WORKFLOW,
        clock: Clock = utc_now,
    ):
        self._db = db
        self._projects = projects
        self._steps = steps
        self._links = links
        self._people = people
        self._step_service = step_service
        self._calendar = calendar
        self._workflow = workflow
        self._clock = clock
        self._log = get_logger("ProjectService")

    # ---------- queries ----------

    def get_project(self, project_id: str) -> Optional[Project]:
        return self._projects.get_project(project_id)

    def list_projects(self) -> List[Project]:
        return self._projects.list_projects()

    def get_project_stats(self, project_id: str) -> ProjectStats:
        stats = ProjectStats(by_phase={phase: PhaseProgress() for phase in self._workflow.phases})
        for step in self._steps.list_steps(project_id):
            stats.total += 1
            if step.status == STATUS_OPEN:
                stats.open += 1
            elif step.status == STATUS_IN_PROGRESS:
                stats.in_progress += 1
            elif step.status == STATUS_DONE:
                stats.done += 1

            bucket = stats.by_phase.get(step.phase)
            if bucket is not None:
                bucket.total += 1
                if step.status == STATUS_DONE:
                    bucket.done += 1

        stats.percent_complete = round(stats.done / stats.total * 100) if stats.total else 0
        return stats

    def get_project_team(self, project_id: str) -> List[TeamMember]:
        project = self._projects.get_project(project_id)
        if project is None:
            return []
        team: List[TeamMember] = []
        for attr, label in self._workflow.team_roles:
            person_id = getattr(project, attr)
            if not person_id:
                continue
            person = self._people.get_person(person_id)
            if person is not None:
                team.append(TeamMember(person=person, role=label))
        return team

    def get_upcoming_shooting_days(self, project_id: str) -> List[ShootingDay]:
        """Linked calendar events starting now or later, soonest first."""
        now = self._clock()
        days: List[ShootingDay] = []
        for step in self._steps.list_steps(project_id):
            event_id = step.linked_calendar_event_id
            if not event_id:
                continue
            try:
                event = self._calendar.get_event(event_id)
                if event is None or event.start < now:
                    continue
                days.append(ShootingDay(
                    id=event_id,
                    step_id=step.id,
                    title=event.title,
                    start=event.start,
                    end=event.end,
                ))
            except Exception as e:
                self._log.warning("Error fetching calendar event %s for step %s: %s", event_id, step.id, e)
        days.sort(key=lambda d: d.start)
        return days

    # ---------- commands ----------

    def create_project(self, **fields: Any) -> Project:
        data = normalize_patch(
            "project", PROJECT_FIELDS, {k: v for k, v in fields.items() if v is not None}, self._workflow
        )
        stamp = to_iso(self._clock())
        project = Project(
            id=new_id(),
            title=data.get("title") or "New Video Project",
            status=data.get("status") or "Open",
            priority=data.get("priority") or "Medium",
            start_date=data.get("start_date"),
            due_date=data.get("due_date"),
            producer_id=data.get("producer_id"),
            director_id=data.get("director_id"),
            line_producer_id=data.get("line_producer_id"),
            created_at=stamp,
            updated_at=stamp,
        )
        with self._db.transaction():
            self._projects.save_project(project)
            for phase, name in self._workflow.seed_plan():
                self._step_service.create_step(project_id=project.id, phase=phase, name=name, status=STATUS_OPEN)
        self._log.info("Created project %s %r", project.id, project.title)
        return project

    def update_project(self, project_id: str, **changes: Any) -> Project:
        project = self._projects.get_project(project_id)
        if project is None:
            raise NotFoundError("project", project_id)
        patch = normalize_patch("project", PROJECT_FIELDS, changes, self._workflow)
        updated_at = max(to_iso(self._clock()), project.updated_at or "")
        updated = replace(project, **patch, updated_at=updated_at)
        self._projects.save_project(updated)
        return updated

    def delete_project(self, project_id: str) -> OperationResult[CascadeSummary]:
        """
        Order: collect steps/links → release calendar events → delete project,
        steps, links. The database part is atomic; released events are not
        restored if it fails. Steps and links left behind by an earlier removal
        of the project row are still cascaded.
        """
        exists = self._projects.get_project(project_id) is not None
        steps = self._steps.list_steps(project_id)
        links = self._links.list_links(project_id)
        if not (exists or steps or links):
            return OperationResult.not_found()

        summary = CascadeSummary(project_id=project_id)
        result: OperationResult[CascadeSummary] = OperationResult(ok=True, value=summary)

        for step in steps:
            if step.linked_calendar_event_id:
                if release_calendar_event(self._calendar, step.linked_calendar_event_id, result, self._log):
                    summary.events_deleted += 1

        with self._db.transaction():
            self._projects.delete_project(project_id)
            for step in steps:
                if self._steps.delete_step(step.id):
                    summary.steps_deleted += 1
            for link in links:
                if self._links.delete_link(link.id):
                    summary.links_deleted += 1

        self._log.info(
            "Deleted project %s (%d steps, %d links, %d events, %d warnings)",
            project_id, summary.steps_deleted, summary.links_deleted,
            summary.events_deleted, len(result.warnings),
        )
        return result
