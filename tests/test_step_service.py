# tests/test_step_service.py
from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

import pytest

from vpm.errors import NotFoundError, PatchError
from vpm.repositories.sqlite_step_repository import SQLiteStepRepository


@pytest.fixture()
def project(ctx):
    return ctx.projects.create_project(title="Music Video")


@pytest.fixture()
def step(ctx, project):
    return ctx.steps.create_step(project_id=project.id, phase="Production")


# --- CRUD ---------------------------------------------------------------

def test_create_step_defaults(step, project):
    assert step.name == "New Step"
    assert step.status == "Open"
    assert step.assignee_ids == []
    assert step.linked_drive_file_ids == []
    assert step.notes == ""
    assert step.linked_calendar_event_id is None
    assert step.project_id == project.id


def test_create_step_without_project_is_stored_as_is(ctx):
    orphan = ctx.steps.create_step(name="Loose end")
    stored = ctx.steps.get_step(orphan.id)
    assert stored.project_id is None
    assert stored.phase is None


def test_update_step_merges(ctx, step, clock):
    clock.advance(minutes=5)
    updated = ctx.steps.update_step(step.id, notes="Bring the drone", due_date=date(2025, 4, 2))
    assert updated.notes == "Bring the drone"
    assert updated.due_date == "2025-04-02"
    assert updated.name == step.name
    assert updated.updated_at > step.updated_at
    assert ctx.steps.get_step(step.id) == updated


def test_update_step_not_found(ctx):
    with pytest.raises(NotFoundError):
        ctx.steps.update_step("missing", notes="x")


def test_update_step_rejects_bad_date(ctx, step):
    with pytest.raises(PatchError):
        ctx.steps.update_step(step.id, due_date="next tuesday")


def test_delete_missing_step_is_noop(ctx):
    assert ctx.steps.delete_step("missing").code == "not_found"


def test_delete_step_releases_event(ctx, step, calendar, clock):
    event = calendar.add("Shoot", clock.now + timedelta(days=1))
    ctx.steps.link_calendar_event(step.id, event.id)

    result = ctx.steps.delete_step(step.id)

    assert result.ok and not result.degraded
    assert calendar.deleted == [event.id]
    assert ctx.steps.get_step(step.id) is None


def test_delete_step_with_failing_calendar_still_deletes(ctx, step, calendar, clock):
    event = calendar.add("Shoot", clock.now + timedelta(days=1))
    ctx.steps.link_calendar_event(step.id, event.id)
    calendar.down = True

    result = ctx.steps.delete_step(step.id)

    assert result.ok
    assert result.code == "degraded"
    assert ctx.steps.get_step(step.id) is None


# --- status ---------------------------------------------------------------

def test_toggle_cycles_through_statuses(ctx, step):
    seen = [ctx.steps.toggle_step_status(step.id).status for _ in range(3)]
    assert seen == ["In Progress", "Done", "Open"]
    assert ctx.steps.get_step(step.id).status == "Open"


def test_toggle_unknown_step(ctx):
    with pytest.raises(NotFoundError):
        ctx.steps.toggle_step_status("missing")


def test_toggle_from_unrecognised_stored_status(ctx, step):
    repo = SQLiteStepRepository(ctx.db)
    repo.save_step(replace(ctx.steps.get_step(step.id), status="Blocked"))
    assert ctx.steps.toggle_step_status(step.id).status == "In Progress"
    assert ctx.steps.toggle_step_status(step.id).status == "Done"


# --- assignees ------------------------------------------------------------

def test_add_assignee_is_idempotent(ctx, step):
    ctx.steps.add_assignee_to_step(step.id, "p1")
    updated = ctx.steps.add_assignee_to_step(step.id, "p1")
    assert updated.assignee_ids == ["p1"]


def test_remove_then_add_restores_membership(ctx, step):
    ctx.steps.assign_people_to_step(step.id, ["p1", "p2"])
    ctx.steps.remove_assignee_from_step(step.id, "p1")
    restored = ctx.steps.add_assignee_to_step(step.id, "p1")
    assert set(restored.assignee_ids) == {"p1", "p2"}


def test_assign_people_replaces_and_dedupes(ctx, step):
    ctx.steps.assign_people_to_step(step.id, ["p1"])
    updated = ctx.steps.assign_people_to_step(step.id, ["p2", "p3", "p2"])
    assert updated.assignee_ids == ["p2", "p3"]


def test_remove_absent_assignee_is_harmless(ctx, step):
    ctx.steps.assign_people_to_step(step.id, ["p1"])
    assert ctx.steps.remove_assignee_from_step(step.id, "nobody").assignee_ids == ["p1"]


# --- links ----------------------------------------------------------------

def test_link_drive_file_adds_once(ctx, step):
    ctx.steps.link_drive_file(step.id, "f1")
    ctx.steps.link_drive_file(step.id, "f2")
    updated = ctx.steps.link_drive_file(step.id, "f1")
    assert updated.linked_drive_file_ids == ["f1", "f2"]
    assert ctx.steps.unlink_drive_file(step.id, "f1").linked_drive_file_ids == ["f2"]


def test_relinking_calendar_event_deletes_previous(ctx, step, calendar, clock):
    first = calendar.add("Shoot A", clock.now + timedelta(days=1))
    second = calendar.add("Shoot B", clock.now + timedelta(days=2))
    ctx.steps.link_calendar_event(step.id, first.id)

    result = ctx.steps.link_calendar_event(step.id, second.id)

    assert result.ok and not result.degraded
    assert result.value.linked_calendar_event_id == second.id
    assert calendar.deleted == [first.id]


def test_relinking_when_previous_event_cannot_be_deleted(ctx, step, calendar, clock):
    first = calendar.add("Shoot A", clock.now + timedelta(days=1))
    second = calendar.add("Shoot B", clock.now + timedelta(days=2))
    ctx.steps.link_calendar_event(step.id, first.id)
    calendar.broken.add(first.id)

    result = ctx.steps.link_calendar_event(step.id, second.id)

    assert result.ok
    assert result.code == "degraded"
    assert result.warnings
    assert ctx.steps.get_step(step.id).linked_calendar_event_id == second.id
    assert first.id in calendar.events


def test_relinking_same_event_keeps_it(ctx, step, calendar, clock):
    event = calendar.add("Shoot", clock.now + timedelta(days=1))
    ctx.steps.link_calendar_event(step.id, event.id)
    ctx.steps.link_calendar_event(step.id, event.id)
    assert calendar.deleted == []


def test_unlink_calendar_event_leaves_event(ctx, step, calendar, clock):
    event = calendar.add("Shoot", clock.now + timedelta(days=1))
    ctx.steps.link_calendar_event(step.id, event.id)
    assert ctx.steps.unlink_calendar_event(step.id).linked_calendar_event_id is None
    assert event.id in calendar.events


# --- my steps / overdue ---------------------------------------------------

def test_my_steps_without_known_person_is_empty(ctx, identity, step):
    identity.email = "stranger@x.com"
    assert ctx.steps.get_my_steps() == []
    identity.email = None
    assert ctx.steps.get_my_steps() == []


def test_my_steps_sorted_by_due_date_undated_last(ctx, identity, project):
    me = ctx.people.find_or_create_person("me@x.com")
    identity.email = "me@x.com"
    undated_a = ctx.steps.create_step(project_id=project.id, phase="Delivery", name="A", assignee_ids=[me.id])
    late = ctx.steps.create_step(project_id=project.id, phase="Delivery", name="late",
                                 due_date="2025-05-01", assignee_ids=[me.id])
    undated_b = ctx.steps.create_step(project_id=project.id, phase="Delivery", name="B", assignee_ids=[me.id])
    early = ctx.steps.create_step(project_id=project.id, phase="Delivery", name="early",
                                  due_date="2025-04-01T10:00:00Z", assignee_ids=[me.id])
    ctx.steps.create_step(project_id=project.id, phase="Delivery", name="not mine", due_date="2025-01-01")

    mine = ctx.steps.get_my_steps()

    assert [s.id for s in mine] == [early.id, late.id, undated_a.id, undated_b.id]


def test_my_steps_scoped_to_project(ctx, identity, project):
    me = ctx.people.find_or_create_person("me@x.com")
    identity.email = "me@x.com"
    other = ctx.projects.create_project(title="Other")
    here = ctx.steps.create_step(project_id=project.id, phase="Production", assignee_ids=[me.id])
    ctx.steps.create_step(project_id=other.id, phase="Production", assignee_ids=[me.id])

    assert [s.id for s in ctx.steps.get_my_steps(project.id)] == [here.id]
    assert len(ctx.steps.get_my_steps()) == 2


def test_overdue_excludes_done_and_future(ctx, project, clock):
    past = ctx.steps.create_step(project_id=project.id, phase="Production", name="late",
                                 due_date="2020-01-01", status="Open")
    ctx.steps.create_step(project_id=project.id, phase="Production", name="future",
                          due_date=(clock.now + timedelta(days=1)).isoformat())
    ctx.steps.create_step(project_id=project.id, phase="Production", name="done",
                          due_date="2020-01-01", status="Done")

    assert [s.id for s in ctx.steps.get_overdue_steps(project.id)] == [past.id]

    ctx.steps.toggle_step_status(past.id)
    ctx.steps.toggle_step_status(past.id)
    assert ctx.steps.get_overdue_steps(project.id) == []


def test_set_step_due_date(ctx, step):
    assert ctx.steps.set_step_due_date(step.id, "2025-07-04").due_date == "2025-07-04"
    assert ctx.steps.set_step_due_date(step.id, None).due_date is None


def test_list_steps_by_phase_groups_all_phases(ctx, project):
    grouped = ctx.steps.list_steps_by_phase(project.id)
    assert list(grouped) == ["Development", "Pre-Production", "Production", "Post-Production", "Delivery"]
    assert [s.name for s in grouped["Production"]] == ["Shooting Day(s)"]
