# Rev 0.2.0
from __future__ import annotations
from dataclasses import asdict
from typing import List, Optional

from ..models.entities import Link
from .sqlite_base import SQLiteRepository


class SQLiteLinkRepository(SQLiteRepository):

    def list_links(self, project_id: str) -> List[Link]:
        rows = self._fetch_all(
            "SELECT id, project_id, url, title, kind, created_at FROM links WHERE project_id = ? ORDER BY rowid;",
            (project_id,),
        )
        return [Link(**r) for r in rows]

    def get_link(self, link_id: str) -> Optional[Link]:
        row = self._fetch_one(
            "SELECT id, project_id, url, title, kind, created_at FROM links WHERE id = ?;", (link_id,)
        )
        return Link(**row) if row else None

    def save_link(self, link: Link) -> None:
        self._upsert("links", asdict(link))

    def delete_link(self, link_id: str) -> bool:
        return self._delete("links", link_id)
