# Rev 0.2.0

# vpm/services/status_rules.py
from __future__ import annotations
from typing import Optional

from ..models.types import STATUS_DONE, STATUS_IN_PROGRESS, STATUS_OPEN, Status

# Open → In Progress → Done → Open; anything unrecognised restarts at In Progress
_NEXT_STATUS = {
    STATUS_OPEN: STATUS_IN_PROGRESS,
    STATUS_IN_PROGRESS: STATUS_DONE,
    STATUS_DONE: STATUS_OPEN,
}


def next_status(current: Optional[str]) -> Status:
    """Status a step moves to when toggled from `current`."""
    return _NEXT_STATUS.get(current, STATUS_IN_PROGRESS)


def is_done(status: Optional[str]) -> bool:
    return status == STATUS_DONE
