# Rev 0.2.0
from __future__ import annotations
from typing import List, Optional

from ..models.entities import Link, new_id
from ..repositories.sqlite_link_repository import SQLiteLinkRepository
from ..utils.logging_setup import get_logger
from ..utils.timeutil import Clock, to_iso, utc_now
from .results import OperationResult


class LinkService:
    """Reference links (mail threads, drive folders, web pages) attached to a project."""

    def __init__(self, links: SQLiteLinkRepository, *, clock: Clock = utc_now):
        self._links = links
        self._clock = clock
        self._log = get_logger("LinkService")

    def list_links(self, project_id: str) -> List[Link]:
        return self._links.list_links(project_id)

    def add_link(self, project_id: str, url: str, title: Optional[str] = None, kind: str = "web") -> Link:
        link = Link(
            id=new_id(),
            project_id=project_id,
            url=url,
            title=title or url,
            kind=kind,
            created_at=to_iso(self._clock()),
        )
        self._links.save_link(link)
        self._log.info("Linked %s %s to project %s", kind, url, project_id)
        return link

    def delete_link(self, link_id: str) -> OperationResult[Link]:
        link = self._links.get_link(link_id)
        if link is None:
            return OperationResult.not_found()
        self._links.delete_link(link_id)
        return OperationResult(ok=True, value=link)
