# Rev 0.2.0
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

APPLIED = "applied"
DEGRADED = "degraded"
NOT_FOUND = "not_found"


@dataclass
class OperationResult(Generic[T]):
    """
    Outcome of an operation with best-effort side effects.
    `ok` is True when the primary mutation happened; collaborator failures
    along the way are listed in `warnings` and flip `code` to "degraded".
    """
    ok: bool
    code: str = APPLIED
    value: Optional[T] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.warnings)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        if self.ok:
            self.code = DEGRADED

    @classmethod
    def not_found(cls) -> "OperationResult[T]":
        return cls(ok=False, code=NOT_FOUND)


@dataclass
class CascadeSummary:
    project_id: str
    steps_deleted: int = 0
    links_deleted: int = 0
    events_deleted: int = 0
