# Rev 0.2.0
# vpm – SQLiteProjectRepository (Rev 0.2.0, schema 0001_init)
from __future__ import annotations
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from ..models.entities import Project
from .sqlite_base import SQLiteRepository

_COLUMNS = (
    "id, title, status, priority, start_date, due_date, "
    "producer_id, director_id, line_producer_id, created_at, updated_at"
)


class SQLiteProjectRepository(SQLiteRepository):
    """Project rows. Person references are plain ids (no FK)."""

    # ---------- public API ----------

    def list_projects(self) -> List[Project]:
        sql = f"SELECT {_COLUMNS} FROM projects ORDER BY created_at DESC, rowid DESC;"
        return [self._row_to_project(r) for r in self._fetch_all(sql)]

    def get_project(self, project_id: str) -> Optional[Project]:
        row = self._fetch_one(f"SELECT {_COLUMNS} FROM projects WHERE id = ?;", (project_id,))
        return self._row_to_project(row) if row else None

    def save_project(self, project: Project) -> None:
        self._upsert("projects", asdict(project))

    def delete_project(self, project_id: str) -> bool:
        return self._delete("projects", project_id)

    def clear_person_references(self, person_id: str, *, updated_at: str) -> int:
        """Null producer/director/line producer columns pointing at person_id."""
        con = self._conn()
        changed = 0
        for col in ("producer_id", "director_id", "line_producer_id"):
            cur = con.execute(
                f"UPDATE projects SET {col} = NULL, updated_at = ? WHERE {col} = ?",
                (updated_at, person_id),
            )
            changed += cur.rowcount
        return changed

    # ---------- internals ----------

    @staticmethod
    def _row_to_project(row: Dict[str, Any]) -> Project:
        return Project(**row)
