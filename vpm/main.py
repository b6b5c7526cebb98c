# Rev 0.2.0

# vpm/main.py  (Rev 0.2.0)
from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Optional

from .app_context import AppContext
from .errors import TrackerError
from .utils.logging_setup import get_logger, setup_logging
from .utils.paths import DB_PATH
from .utils.timeutil import format_date


def _cmd_projects(ctx: AppContext, ns) -> int:
    for p in ctx.projects.list_projects():
        stats = ctx.projects.get_project_stats(p.id)
        print(f"{p.id}  {p.title:<30} {p.status:<12} {p.priority:<9} {stats.percent_complete:>3}%")
    return 0


def _cmd_create(ctx: AppContext, ns) -> int:
    project = ctx.projects.create_project(title=ns.title, priority=ns.priority, due_date=ns.due)
    print(project.id)
    return 0


def _cmd_stats(ctx: AppContext, ns) -> int:
    if ctx.projects.get_project(ns.project_id) is None:
        print(f"Project not found: {ns.project_id}", file=sys.stderr)
        return 2
    stats = ctx.projects.get_project_stats(ns.project_id)
    print(f"total={stats.total} open={stats.open} in_progress={stats.in_progress} "
          f"done={stats.done} complete={stats.percent_complete}%")
    for phase, prog in stats.by_phase.items():
        print(f"  {phase:<16} {prog.done}/{prog.total}")
    return 0


def _cmd_my_steps(ctx: AppContext, ns) -> int:
    for s in ctx.steps.get_my_steps(ns.project):
        print(f"{s.id}  {format_date(s.due_date):<13} {s.status:<12} {s.phase} / {s.name}")
    return 0


def _cmd_overdue(ctx: AppContext, ns) -> int:
    for s in ctx.steps.get_overdue_steps(ns.project_id):
        print(f"{s.id}  {format_date(s.due_date):<13} {s.status:<12} {s.phase} / {s.name}")
    return 0


def _cmd_toggle(ctx: AppContext, ns) -> int:
    step = ctx.steps.toggle_step_status(ns.step_id)
    print(f"{step.name}: {step.status}")
    return 0


def _cmd_delete(ctx: AppContext, ns) -> int:
    result = ctx.projects.delete_project(ns.project_id)
    for w in result.warnings:
        print(f"warning: {w}", file=sys.stderr)
    if not result.ok:
        print(f"Project not found: {ns.project_id}", file=sys.stderr)
        return 2
    return 0


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="vpm", description="Video production project tracker")
    p.add_argument("--db", type=Path, default=DB_PATH, help=f"Path to SQLite DB (default: {DB_PATH})")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("projects", help="List projects").set_defaults(func=_cmd_projects)

    s = sub.add_parser("create", help="Create a project with the default steps")
    s.add_argument("title")
    s.add_argument("--priority", choices=["Low", "Medium", "High", "Critical"], default=None)
    s.add_argument("--due", default=None, help="Due date (YYYY-MM-DD)")
    s.set_defaults(func=_cmd_create)

    s = sub.add_parser("stats", help="Step counts per status and phase")
    s.add_argument("project_id")
    s.set_defaults(func=_cmd_stats)

    s = sub.add_parser("my-steps", help="Steps assigned to you (VPM_USER_EMAIL)")
    s.add_argument("--project", default=None)
    s.set_defaults(func=_cmd_my_steps)

    s = sub.add_parser("overdue", help="Open steps past their due date")
    s.add_argument("project_id")
    s.set_defaults(func=_cmd_overdue)

    s = sub.add_parser("toggle", help="Cycle a step Open → In Progress → Done")
    s.add_argument("step_id")
    s.set_defaults(func=_cmd_toggle)

    s = sub.add_parser("delete", help="Delete a project with its steps and links")
    s.add_argument("project_id")
    s.set_defaults(func=_cmd_delete)

    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    ns = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging("vpm", console=False)
    ctx = AppContext.create(ns.db)
    try:
        return ns.func(ctx, ns)
    except TrackerError as e:
        get_logger("main").error("%s failed: %s", ns.cmd, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        ctx.close()


if __name__ == "__main__":
    sys.exit(main())
