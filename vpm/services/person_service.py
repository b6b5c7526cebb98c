# Rev 0.2.0

"""Person service (Rev 0.2.0)
People are referenced by projects (producer/director/line producer) and by
step assignee sets. Deleting a person clears those references in the same
transaction, so no dangling ids survive.
"""
from __future__ import annotations
from dataclasses import replace
from typing import Any, List, Optional

from ..errors import NotFoundError
from ..models.entities import Person, new_id
from ..models.patches import PERSON_FIELDS, normalize_patch
from ..repositories.db import Database
from ..repositories.sqlite_person_repository import SQLitePersonRepository
from ..repositories.sqlite_project_repository import SQLiteProjectRepository
from ..repositories.sqlite_step_repository import SQLiteStepRepository
from ..utils.logging_setup import get_logger
from ..utils.timeutil import Clock, to_iso, utc_now
from .gateways import IdentityProvider
from .results import OperationResult


class PersonService:
    def __init__(
        self,
        db: Database,
        people: SQLitePersonRepository,
        projects: SQLiteProjectRepository,
        steps: SQLiteStepRepository,
        identity: IdentityProvider,
        *,
        clock: Clock = utc_now,
    ):
        self._db = db
        self._people = people
        self._projects = projects
        self._steps = steps
        self._identity = identity
        self._clock = clock
        self._log = get_logger("PersonService")

    # ---- queries
    def get_person(self, person_id: str) -> Optional[Person]:
        return self._people.get_person(person_id)

    def list_people(self) -> List[Person]:
        return sorted(self._people.list_people(), key=lambda p: (p.name.lower(), p.email.lower()))

    def get_current_person(self) -> Optional[Person]:
        """Person matching the session email, or None (unknown identity is not an error)."""
        try:
            email = self._identity.current_email()
        except Exception as e:
            self._log.warning("Identity lookup failed: %s", e)
            return None
        if not email:
            return None
        return self._people.find_by_email(email)

    # ---- commands
    def create_person(self, **fields: Any) -> Person:
        data = normalize_patch("person", PERSON_FIELDS, {k: v for k, v in fields.items() if v is not None})
        person = Person(
            id=new_id(),
            name=data.get("name", ""),
            email=data.get("email", ""),
            role=data.get("role", ""),
            created_at=to_iso(self._clock()),
        )
        self._people.save_person(person)
        self._log.info("Created person %s <%s>", person.id, person.email)
        return person

    def update_person(self, person_id: str, **changes: Any) -> Person:
        person = self._people.get_person(person_id)
        if person is None:
            raise NotFoundError("person", person_id)
        patch = normalize_patch("person", PERSON_FIELDS, changes)
        updated = replace(person, **patch)
        self._people.save_person(updated)
        return updated

    def delete_person(self, person_id: str) -> OperationResult[int]:
        """Delete and clear references; value is how many projects/steps were touched."""
        if self._people.get_person(person_id) is None:
            return OperationResult.not_found()
        stamp = to_iso(self._clock())
        with self._db.transaction():
            touched = self._projects.clear_person_references(person_id, updated_at=stamp)
            for step in self._steps.list_steps_with_assignee(person_id):
                step.assignee_ids = [pid for pid in step.assignee_ids if pid != person_id]
                step.updated_at = max(stamp, step.updated_at)
                self._steps.save_step(step)
                touched += 1
            self._people.delete_person(person_id)
        self._log.info("Deleted person %s (%d references cleared)", person_id, touched)
        return OperationResult(ok=True, value=touched)

    def find_or_create_person(self, email: str, name: Optional[str] = None) -> Person:
        person = self._people.find_by_email(email)
        if person is None:
            person = self.create_person(email=email, name=name or email)
        return person
