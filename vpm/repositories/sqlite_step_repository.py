# Rev 0.2.0
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..models.entities import Step
from .sqlite_base import SQLiteRepository

_COLUMNS = (
    "id, project_id, phase, name, due_date, assignee_ids, status, notes, "
    "linked_calendar_event_id, linked_drive_file_ids, created_at, updated_at"
)


class SQLiteStepRepository(SQLiteRepository):
    """
    Step rows. assignee_ids / linked_drive_file_ids are JSON arrays.
    Listings come back in insertion order (rowid), which is the order the
    project seeding wrote them.
    """

    # -------------------------
    # Reads
    # -------------------------
    def get_step(self, step_id: str) -> Optional[Step]:
        row = self._fetch_one(f"SELECT {_COLUMNS} FROM steps WHERE id = ?", (step_id,))
        return self._row_to_step(row) if row else None

    def list_steps(self, project_id: Optional[str] = None) -> List[Step]:
        if project_id is None:
            rows = self._fetch_all(f"SELECT {_COLUMNS} FROM steps ORDER BY rowid")
        else:
            rows = self._fetch_all(
                f"SELECT {_COLUMNS} FROM steps WHERE project_id = ? ORDER BY rowid",
                (project_id,),
            )
        return [self._row_to_step(r) for r in rows]

    def list_steps_with_assignee(self, person_id: str) -> List[Step]:
        rows = self._fetch_all(
            f"""
            SELECT {_COLUMNS} FROM steps
            WHERE EXISTS (SELECT 1 FROM json_each(steps.assignee_ids) WHERE json_each.value = ?)
            ORDER BY rowid
            """,
            (person_id,),
        )
        return [self._row_to_step(r) for r in rows]

    # -------------------------
    # Writes
    # -------------------------
    def save_step(self, step: Step) -> None:
        self._upsert("steps", {
            "id": step.id,
            "project_id": step.project_id,
            "phase": step.phase,
            "name": step.name,
            "due_date": step.due_date,
            "assignee_ids": self._dump_ids(step.assignee_ids),
            "status": step.status,
            "notes": step.notes,
            "linked_calendar_event_id": step.linked_calendar_event_id,
            "linked_drive_file_ids": self._dump_ids(step.linked_drive_file_ids),
            "created_at": step.created_at,
            "updated_at": step.updated_at,
        })

    def delete_step(self, step_id: str) -> bool:
        return self._delete("steps", step_id)

    # -------------------------
    # internals
    # -------------------------
    def _row_to_step(self, row: Dict[str, Any]) -> Step:
        rec = dict(row)
        rec["assignee_ids"] = self._load_ids(rec.get("assignee_ids"))
        rec["linked_drive_file_ids"] = self._load_ids(rec.get("linked_drive_file_ids"))
        rec["notes"] = rec.get("notes") or ""
        return Step(**rec)
