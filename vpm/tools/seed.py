# Rev 0.2.0
"""
Developer seed: one sample project with a small crew and a booked shooting day.

Usage:
    python -m vpm.tools.seed [--db PATH] [--email you@example.com]
"""
from __future__ import annotations

import argparse
import sys
from datetime import timedelta
from pathlib import Path
from typing import Optional

from ..app_context import AppContext
from ..repositories.sqlite_calendar_repository import SQLiteCalendarRepository
from ..utils.paths import DB_PATH
from ..utils.timeutil import utc_now

CREW = [
    ("producer@example.com", "Pat Producer", "Producer"),
    ("director@example.com", "Dee Director", "Director"),
    ("line@example.com", "Lee Line", "Line Producer"),
]


def run_seed(ctx: AppContext, user_email: Optional[str] = None) -> str:
    people = {}
    for email, name, role in CREW:
        person = ctx.people.find_or_create_person(email, name)
        if not person.role:
            person = ctx.people.update_person(person.id, role=role)
        people[role] = person

    project = ctx.projects.create_project(
        title="Sample Short Film",
        priority="High",
        producer_id=people["Producer"].id,
        director_id=people["Director"].id,
        line_producer_id=people["Line Producer"].id,
    )

    shooting = ctx.steps.list_steps(project.id, phase="Production")[0]
    if isinstance(ctx.calendar, SQLiteCalendarRepository):
        start = (utc_now() + timedelta(days=14)).replace(hour=8, minute=0, second=0, microsecond=0)
        event = ctx.calendar.create_event("Shooting Day 1", start, start + timedelta(hours=10))
        ctx.steps.link_calendar_event(shooting.id, event.id)
    ctx.steps.set_step_due_date(shooting.id, (utc_now() + timedelta(days=14)).date())

    if user_email:
        me = ctx.people.find_or_create_person(user_email)
        for step in ctx.steps.list_steps(project.id, phase="Development"):
            ctx.steps.add_assignee_to_step(step.id, me.id)

    return project.id


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="vpm-seed", description="Create a sample vpm project")
    p.add_argument("--db", type=Path, default=DB_PATH)
    p.add_argument("--email", default=None, help="Assign the Development steps to this person")
    ns = p.parse_args(sys.argv[1:] if argv is None else argv)

    ctx = AppContext.create(ns.db)
    try:
        project_id = run_seed(ctx, ns.email)
        print(f"✓ Seeded project {project_id}")
        return 0
    finally:
        ctx.close()


if __name__ == "__main__":
    raise SystemExit(main())
