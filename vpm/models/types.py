# vpm type definitions
# Rev 0.2.0

from __future__ import annotations
from typing import Literal

Status = Literal["Open", "In Progress", "Done"]

STATUS_OPEN: Status = "Open"
STATUS_IN_PROGRESS: Status = "In Progress"
STATUS_DONE: Status = "Done"
