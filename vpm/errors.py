# Rev 0.2.0
"""Error taxonomy shared by services, repositories and gateways."""
from __future__ import annotations


class TrackerError(Exception):
    """Base class for vpm failures."""


class NotFoundError(TrackerError, LookupError):
    """An operation addressed an unknown record."""

    def __init__(self, entity: str, entity_id: str | None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} not found: {entity_id}")


class PatchError(TrackerError, ValueError):
    """An update patch names a field that cannot be changed, or carries a wrong type."""

    def __init__(self, entity: str, field_name: str, message: str):
        self.entity = entity
        self.field_name = field_name
        super().__init__(f"[{entity}.{field_name}] {message}")


class CollaboratorError(TrackerError):
    """A calendar, identity or file collaborator call failed."""
