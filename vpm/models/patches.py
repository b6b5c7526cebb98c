# Rev 0.2.0
"""
Field tables for create/update payloads.

Each entity lists the fields callers may set and what each one accepts.
`normalize_patch` rejects anything else and coerces accepted values into the
stored representation (ISO strings for dates, de-duplicated lists for id sets).
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from collections.abc import Iterable
from typing import Any, Dict, Mapping

from ..errors import PatchError
from .workflow import DEFAULT_WORKFLOW, WorkflowConfig
from ..utils.timeutil import parse_when


TEXT = "text"
DATE = "date"
REF = "ref"
ID_SET = "id_set"
STATUS = "status"
PRIORITY = "priority"

# Fields the services stamp themselves
MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at"})


@dataclass(frozen=True)
class FieldSpec:
    kind: str
    nullable: bool = False


PROJECT_FIELDS: Mapping[str, FieldSpec] = {
    "title": FieldSpec(TEXT),
    "status": FieldSpec(STATUS),
    "priority": FieldSpec(PRIORITY),
    "start_date": FieldSpec(DATE, nullable=True),
    "due_date": FieldSpec(DATE, nullable=True),
    "producer_id": FieldSpec(REF, nullable=True),
    "director_id": FieldSpec(REF, nullable=True),
    "line_producer_id": FieldSpec(REF, nullable=True),
}

STEP_FIELDS: Mapping[str, FieldSpec] = {
    "project_id": FieldSpec(REF, nullable=True),
    "phase": FieldSpec(TEXT, nullable=True),
    "name": FieldSpec(TEXT),
    "due_date": FieldSpec(DATE, nullable=True),
    "assignee_ids": FieldSpec(ID_SET),
    "status": FieldSpec(STATUS),
    "notes": FieldSpec(TEXT),
    "linked_calendar_event_id": FieldSpec(REF, nullable=True),
    "linked_drive_file_ids": FieldSpec(ID_SET),
}

PERSON_FIELDS: Mapping[str, FieldSpec] = {
    "name": FieldSpec(TEXT),
    "email": FieldSpec(TEXT),
    "role": FieldSpec(TEXT),
}


def unique_ids(values: Iterable[str]) -> list[str]:
    """Order-preserving de-duplication."""
    seen: set[str] = set()
    out: list[str] = []
    for v in values:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


def _coerce(entity: str, name: str, spec: FieldSpec, value: Any, workflow: WorkflowConfig) -> Any:
    if value is None:
        if spec.nullable:
            return None
        raise PatchError(entity, name, "may not be null")

    if spec.kind in (TEXT, REF):
        if not isinstance(value, str):
            raise PatchError(entity, name, f"expected str, got {type(value).__name__}")
        return value

    if spec.kind == DATE:
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, str):
            if value == "":
                return None if spec.nullable else value
            if parse_when(value) is None:
                raise PatchError(entity, name, f"not an ISO date: {value!r}")
            return value
        raise PatchError(entity, name, f"expected date or ISO string, got {type(value).__name__}")

    if spec.kind == ID_SET:
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            raise PatchError(entity, name, "expected a collection of ids")
        ids = list(value)
        for v in ids:
            if not isinstance(v, str):
                raise PatchError(entity, name, f"ids must be str, got {type(v).__name__}")
        return unique_ids(ids)

    if spec.kind == STATUS:
        if value not in workflow.statuses:
            raise PatchError(entity, name, f"unknown status {value!r}")
        return value

    if spec.kind == PRIORITY:
        if value not in workflow.priorities:
            raise PatchError(entity, name, f"unknown priority {value!r}")
        return value

    raise PatchError(entity, name, f"unsupported field kind {spec.kind}")


def normalize_patch(
    entity: str,
    fields: Mapping[str, FieldSpec],
    changes: Mapping[str, Any],
    workflow: WorkflowConfig = DEFAULT_WORKFLOW,
) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for name, value in changes.items():
        if name in MANAGED_FIELDS:
            raise PatchError(entity, name, "is managed by the tracker and cannot be set")
        spec = fields.get(name)
        if spec is None:
            raise PatchError(entity, name, "unknown field")
        out[name] = _coerce(entity, name, spec, value, workflow)
    return out
