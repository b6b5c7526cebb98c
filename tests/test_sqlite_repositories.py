# tests/test_sqlite_repositories.py
# Storage-level checks against the real migrations

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from vpm.errors import CollaboratorError
from vpm.models.entities import Step
from vpm.repositories.db import Database
from vpm.repositories.sqlite_calendar_repository import SQLiteCalendarRepository
from vpm.repositories.sqlite_step_repository import SQLiteStepRepository


def test_migrations_create_tables(db_conn):
    names = {r[0] for r in db_conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"projects", "steps", "people", "links", "calendar_events", "schema_migrations"} <= names


def test_migrations_are_recorded_once(tmp_path):
    db = Database(tmp_path / "m.db")
    try:
        assert db.run_migrations() == ["0001_init.sql"]
        assert db.run_migrations() == []
        assert db.pending() == []
    finally:
        db.close()


def test_step_sets_persist_and_upsert_keeps_order(db_conn):
    repo = SQLiteStepRepository(db_conn)
    a = Step(id="a", project_id="p", phase="Production", assignee_ids=["x", "y"],
             linked_drive_file_ids=["f"], created_at="t", updated_at="t")
    b = Step(id="b", project_id="p", phase="Production", created_at="t", updated_at="t")
    repo.save_step(a)
    repo.save_step(b)
    a.name = "renamed"
    repo.save_step(a)

    rows = repo.list_steps("p")
    assert [s.id for s in rows] == ["a", "b"]
    assert rows[0].name == "renamed"
    assert rows[0].assignee_ids == ["x", "y"]
    assert [s.id for s in repo.list_steps_with_assignee("y")] == ["a"]


def test_transaction_rolls_back(tmp_path):
    db = Database(tmp_path / "t.db")
    db.run_migrations()
    repo = SQLiteStepRepository(db)
    try:
        with pytest.raises(RuntimeError):
            with db.transaction():
                repo.save_step(Step(id="a", project_id="p", phase=None, created_at="t", updated_at="t"))
                raise RuntimeError("boom")
        assert repo.get_step("a") is None
    finally:
        db.close()


def test_calendar_repository(db_conn):
    cal = SQLiteCalendarRepository(db_conn)
    start = datetime(2025, 5, 1, 8, 0, tzinfo=timezone.utc)
    event = cal.create_event("Shoot", start, start + timedelta(hours=9))

    fetched = cal.get_event(event.id)
    assert fetched.start == start
    assert fetched.title == "Shoot"

    cal.delete_event(event.id)
    assert cal.get_event(event.id) is None
    with pytest.raises(CollaboratorError):
        cal.delete_event(event.id)


def test_repository_accepts_database_wrapper(tmp_path):
    db = Database(path=str(tmp_path / "wrapped.db"))
    try:
        db.run_migrations()
        repo = SQLiteStepRepository(db)
        repo.save_step(Step(id="s1", project_id="p1", phase="Production", name="Shoot"))
        assert repo.get_step("s1").name == "Shoot"
    finally:
        db.close()


def test_repository_rejects_unusable_handle():
    with pytest.raises(RuntimeError):
        SQLiteStepRepository(object()).list_steps()
