# Rev 0.2.0
"""Fixed workflow tables: phases, seeded step names, statuses and priorities.

Loaded once and handed to the services, so tests can inject a smaller table.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple


PHASES: Tuple[str, ...] = (
    "Development",
    "Pre-Production",
    "Production",
    "Post-Production",
    "Delivery",
)

DEFAULT_STEPS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Development": ("Storyboard", "Brief"),
    "Pre-Production": (
        "Producer", "Director", "Line Producer", "Crew",
        "Casting", "Location", "Shot List", "Shooting Schedule",
    ),
    "Production": ("Shooting Day(s)",),
    "Post-Production": ("First Rough Cut", "First Correction", "Second Correction", "Picture Lock"),
    "Delivery": ("Rights Ownership", "Deliverables"),
})

STATUSES: Tuple[str, ...] = ("Open", "In Progress", "Done")
PRIORITIES: Tuple[str, ...] = ("Low", "Medium", "High", "Critical")

# Project person references and the label each one carries in the team view
TEAM_ROLES: Tuple[Tuple[str, str], ...] = (
    ("producer_id", "Producer"),
    ("director_id", "Director"),
    ("line_producer_id", "Line Producer"),
)


@dataclass(frozen=True)
class WorkflowConfig:
    phases: Tuple[str, ...] = PHASES
    default_steps: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: DEFAULT_STEPS)
    statuses: Tuple[str, ...] = STATUSES
    priorities: Tuple[str, ...] = PRIORITIES
    team_roles: Tuple[Tuple[str, str], ...] = TEAM_ROLES

    def seed_plan(self) -> list[tuple[str, str]]:
        """(phase, step name) pairs in phase order."""
        return [(phase, name) for phase in self.phases for name in self.default_steps.get(phase, ())]

    def phase_index(self, phase: str | None) -> int:
        try:
            return self.phases.index(phase)
        except ValueError:
            return len(self.phases)


DEFAULT_WORKFLOW = WorkflowConfig()
