# Rev 0.2.0
from __future__ import annotations
from dataclasses import asdict
from typing import List, Optional

from ..models.entities import Person
from .sqlite_base import SQLiteRepository


class SQLitePersonRepository(SQLiteRepository):
    """Thin wrapper around the 'people' table."""

    def list_people(self) -> List[Person]:
        rows = self._fetch_all("SELECT id, name, email, role, created_at FROM people ORDER BY rowid;")
        return [Person(**r) for r in rows]

    def get_person(self, person_id: str) -> Optional[Person]:
        row = self._fetch_one(
            "SELECT id, name, email, role, created_at FROM people WHERE id = ?;", (person_id,)
        )
        return Person(**row) if row else None

    def find_by_email(self, email: str) -> Optional[Person]:
        """First person (in creation order) with exactly this email."""
        row = self._fetch_one(
            "SELECT id, name, email, role, created_at FROM people WHERE email = ? ORDER BY rowid LIMIT 1;",
            (email,),
        )
        return Person(**row) if row else None

    def save_person(self, person: Person) -> None:
        self._upsert("people", asdict(person))

    def delete_person(self, person_id: str) -> bool:
        return self._delete("people", person_id)
