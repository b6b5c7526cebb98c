# File: vpm/tools/migrate.py
# Usage examples:
#   python -m vpm.tools.migrate up
#   python -m vpm.tools.migrate status
#   python -m vpm.tools.migrate verify --db /path/to/vpm.db
#
# Notes:
# - DB path defaults to env VPM_DB or the XDG data dir
# - Applies vpm/migrations/*.sql in lexicographic order via Database.run_migrations

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from ..repositories.db import Database
from ..utils.paths import DB_PATH, MIGRATIONS_DIR

REQUIRED_TABLES = ("projects", "steps", "people", "links", "calendar_events", "schema_migrations")


def cmd_status(db_path: Path, migrations_dir: Path) -> int:
    db = Database(db_path)
    try:
        applied = sorted(db.applied())
        pending = [p.name for p in db.pending(migrations_dir)]
        print(f"DB: {db_path}")
        print(f"Migrations dir: {migrations_dir}")
        print(f"Applied count: {len(applied)}")
        for name in applied:
            print(f"  ✔ {name}")
        print(f"Pending count: {len(pending)}")
        for name in pending:
            print(f"  ⧗ {name}")
        return 0
    finally:
        db.close()


def cmd_up(db_path: Path, migrations_dir: Path) -> int:
    db = Database(db_path)
    try:
        applied = db.run_migrations(migrations_dir)
        for name in applied:
            print(f"→ Applied migration: {name}")
        print("✓ Database is up to date." if applied else "✓ No changes. Database already up to date.")
        return 0
    finally:
        db.close()


def cmd_verify(db_path: Path) -> int:
    db = Database(db_path)
    try:
        names = {
            r[0] for r in db.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%';"
            ).fetchall()
        }
        missing = [t for t in REQUIRED_TABLES if t not in names]
        if missing:
            print("❌ Missing tables:", ", ".join(missing))
            return 2
        (mode,) = db.execute("PRAGMA journal_mode;").fetchone()
        if str(mode).lower() != "wal":
            print(f"❌ journal_mode is not WAL (got {mode})")
            return 3
        print("✓ Verification passed.")
        return 0
    finally:
        db.close()


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="vpm-migrate", description="SQLite migration runner for vpm")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(sp: argparse.ArgumentParser):
        sp.add_argument("--db", type=Path, default=DB_PATH, help=f"Path to SQLite DB (default: {DB_PATH})")
        sp.add_argument("--migrations-dir", type=Path, default=MIGRATIONS_DIR, help="Migrations directory")

    add_common(sub.add_parser("up", help="Run pending migrations"))
    add_common(sub.add_parser("status", help="Show applied and pending migrations"))
    s_verify = sub.add_parser("verify", help="Lightweight structural verification")
    s_verify.add_argument("--db", type=Path, default=DB_PATH, help=f"Path to SQLite DB (default: {DB_PATH})")

    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    ns = parse_args(sys.argv[1:] if argv is None else argv)
    if ns.cmd == "status":
        return cmd_status(ns.db, ns.migrations_dir)
    if ns.cmd == "up":
        return cmd_up(ns.db, ns.migrations_dir)
    if ns.cmd == "verify":
        return cmd_verify(ns.db)
    raise SystemExit(1)


if __name__ == "__main__":
    raise SystemExit(main())
