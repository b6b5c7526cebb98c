# vpm application context
# Rev 0.2.0

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .models.workflow import DEFAULT_WORKFLOW, WorkflowConfig
from .repositories.db import Database
from .repositories.sqlite_calendar_repository import SQLiteCalendarRepository
from .repositories.sqlite_link_repository import SQLiteLinkRepository
from .repositories.sqlite_person_repository import SQLitePersonRepository
from .repositories.sqlite_project_repository import SQLiteProjectRepository
from .repositories.sqlite_step_repository import SQLiteStepRepository
from .services.gateways import CalendarGateway, IdentityProvider, SettingsIdentity
from .services.link_service import LinkService
from .services.person_service import PersonService
from .services.project_service import ProjectService
from .services.step_service import StepService
from .utils.logging_setup import get_logger
from .utils.paths import DB_PATH
from .utils.timeutil import Clock, utc_now


@dataclass
class AppContext:
    """Central container for shared app resources."""
    db: Database
    calendar: CalendarGateway
    identity: IdentityProvider
    people: PersonService
    steps: StepService
    projects: ProjectService
    links: LinkService

    @classmethod
    def create(
        cls,
        db_path: Path | str = DB_PATH,
        *,
        calendar: Optional[CalendarGateway] = None,
        identity: Optional[IdentityProvider] = None,
        workflow: WorkflowConfig = DEFAULT_WORKFLOW,
        clock: Clock = utc_now,
    ) -> "AppContext":
        """Open the DB, apply migrations, wire repositories and services."""
        log = get_logger("AppContext")
        db = Database(db_path)
        db.run_migrations()

        project_repo = SQLiteProjectRepository(db)
        step_repo = SQLiteStepRepository(db)
        person_repo = SQLitePersonRepository(db)
        link_repo = SQLiteLinkRepository(db)
        calendar = calendar or SQLiteCalendarRepository(db)
        identity = identity or SettingsIdentity()

        people = PersonService(db, person_repo, project_repo, step_repo, identity, clock=clock)
        steps = StepService(step_repo, people, calendar, workflow=workflow, clock=clock)
        projects = ProjectService(
            db, project_repo, step_repo, link_repo, person_repo, steps, calendar,
            workflow=workflow, clock=clock,
        )
        links = LinkService(link_repo, clock=clock)

        log.info("AppContext initialized with DB=%s", db.path)
        return cls(
            db=db, calendar=calendar, identity=identity,
            people=people, steps=steps, projects=projects, links=links,
        )

    def close(self) -> None:
        self.db.close()
