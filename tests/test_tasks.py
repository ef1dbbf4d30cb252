import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.assignments.service import assign_task, list_active_assignments
from app.core.tasks.models import TaskItem
from app.core.tasks.schemas import TaskCreate, TaskUpdate
from app.core.tasks.service import create_task, delete_task, get_task, list_tasks, require_task, update_task
from app.errors import InvalidTaskError, TaskNotFound


async def _task(db, people, title="Ship v1", **fields):
    return await create_task(db, people.team_a.id, people.creator.id, {"title": title, **fields})


def test_bare_date_deadline_is_midnight_utc():
    data = TaskCreate.model_validate({"title": "Plan", "dueDate": "2025-03-01"})
    assert data.deadline == datetime(2025, 3, 1, tzinfo=timezone.utc)


def test_deadline_aliases():
    for key in ("deadline", "due_date", "dueDate"):
        data = TaskCreate.model_validate({"title": "Plan", key: "2025-03-01T12:30:00Z"})
        assert data.deadline == datetime(2025, 3, 1, 12, 30, tzinfo=timezone.utc)


def test_update_tracks_only_supplied_fields():
    data = TaskUpdate.model_validate({"description": None, "tags": ["a"]})
    assert data.model_fields_set == {"description", "tags"}


async def test_create_task_defaults(db, people):
    task = await _task(db, people)
    assert task.title == "Ship v1"
    assert task.priority == "medium"
    assert task.tags == []
    assert task.team_id == people.team_a.id
    assert task.created_by_id == people.creator.id
    assert task.created_by.email == "carol@a.test"
    assert task.deadline is None and task.completed_at is None
    assert task.assignments == []
    assert task.assignee_count == 0


async def test_create_task_keeps_optional_fields(db, people):
    doc_id = uuid.uuid4()
    task = await _task(db, people, description="Release notes", priority="urgent", tags=["release", "q3"], document_id=doc_id)
    assert task.description == "Release notes"
    assert task.priority == "urgent"
    assert task.tags == ["release", "q3"]
    assert task.document_id == doc_id


@pytest.mark.parametrize("title", ["", "   ", "x" * 256])
async def test_create_task_rejects_bad_title(db, people, title):
    with pytest.raises(InvalidTaskError) as exc:
        await _task(db, people, title=title)
    assert exc.value.details == {"field": "title"}
    assert exc.value.status_code == 400


async def test_create_task_accepts_255_character_title(db, people):
    task = await _task(db, people, title="x" * 255)
    assert len(task.title) == 255


async def test_create_task_rejects_unknown_priority(db, people):
    with pytest.raises(InvalidTaskError) as exc:
        await _task(db, people, priority="critical")
    assert exc.value.details == {"field": "priority"}


async def test_get_task_is_team_scoped(db, people):
    task = await _task(db, people)
    assert (await get_task(db, task.id, people.team_a.id)).id == task.id
    assert await get_task(db, task.id, people.team_b.id) is None
    assert await get_task(db, uuid.uuid4(), people.team_a.id) is None


async def test_foreign_and_missing_tasks_fail_identically(db, people):
    task = await _task(db, people)
    with pytest.raises(TaskNotFound) as foreign:
        await require_task(db, task.id, people.team_b.id)
    with pytest.raises(TaskNotFound) as missing:
        await require_task(db, uuid.uuid4(), people.team_a.id)
    assert foreign.value.to_dict() == missing.value.to_dict()


async def test_update_changes_only_supplied_fields(db, people):
    task = await _task(db, people, description="Keep me", priority="high", tags=["x"])
    updated = await update_task(db, task.id, people.team_a.id, {"title": "Ship v2"})
    assert updated.title == "Ship v2"
    assert updated.description == "Keep me"
    assert updated.priority == "high"
    assert updated.tags == ["x"]


async def test_update_ignores_team_and_creator(db, people):
    task = await _task(db, people)
    updated = await update_task(
        db,
        task.id,
        people.team_a.id,
        {"title": "Moved?", "team_id": people.team_b.id, "created_by_id": people.other.id},
    )
    assert updated.title == "Moved?"
    assert updated.team_id == people.team_a.id
    assert updated.created_by_id == people.creator.id
    assert await get_task(db, task.id, people.team_b.id) is None


async def test_update_can_clear_optional_fields_and_complete(db, people):
    task = await _task(db, people, description="Drop me", deadline="2030-01-01")
    done = datetime(2025, 5, 5, tzinfo=timezone.utc)
    updated = await update_task(
        db, task.id, people.team_a.id, TaskUpdate(description=None, deadline=None, completed_at=done)
    )
    assert updated.description is None
    assert updated.deadline is None
    assert updated.completed_at is not None


async def test_update_validates_input(db, people):
    task = await _task(db, people)
    with pytest.raises(InvalidTaskError):
        await update_task(db, task.id, people.team_a.id, {"title": None})
    with pytest.raises(InvalidTaskError):
        await update_task(db, task.id, people.team_a.id, {"priority": "someday"})


async def test_update_is_team_scoped(db, people):
    task = await _task(db, people)
    with pytest.raises(TaskNotFound):
        await update_task(db, task.id, people.team_b.id, {"title": "Hijacked"})
    assert (await get_task(db, task.id, people.team_a.id)).title == "Ship v1"


async def test_delete_cascades_to_assignments(db, people):
    task = await _task(db, people)
    await assign_task(db, task.id, people.user.id, people.team_a.id)
    await assign_task(db, task.id, people.creator.id, people.team_a.id, people.other.id)

    cascaded = await delete_task(db, task.id, people.team_a.id)

    assert cascaded == 2
    assert await list_active_assignments(db, task.id) == []
    assert await get_task(db, task.id, people.team_a.id) is None


async def test_delete_is_a_tombstone(db, people):
    task = await _task(db, people)
    await delete_task(db, task.id, people.team_a.id)
    row = (await db.execute(select(TaskItem.is_deleted, TaskItem.deleted_at).where(TaskItem.id == task.id))).one()
    assert row.is_deleted is True
    assert row.deleted_at is not None
    with pytest.raises(TaskNotFound):
        await delete_task(db, task.id, people.team_a.id)


async def test_delete_is_team_scoped(db, people):
    task = await _task(db, people)
    with pytest.raises(TaskNotFound):
        await delete_task(db, task.id, people.team_b.id)
    assert await get_task(db, task.id, people.team_a.id) is not None


async def test_list_tasks_filters_by_team_link_and_tombstone(db, people):
    doc_id = uuid.uuid4()
    linked = await _task(db, people, title="Linked", document_id=doc_id)
    plain = await _task(db, people, title="Plain")
    gone = await _task(db, people, title="Gone")
    await create_task(db, people.team_b.id, people.outsider.id, {"title": "Elsewhere"})
    await delete_task(db, gone.id, people.team_a.id)

    ids = {t.id for t in await list_tasks(db, people.team_a.id)}
    assert ids == {linked.id, plain.id}
    assert [t.id for t in await list_tasks(db, people.team_a.id, document_id=doc_id)] == [linked.id]


async def test_storage_rejects_unknown_priority(db, people):
    with pytest.raises(IntegrityError):
        async with db.begin_nested():
            db.add(TaskItem(team_id=people.team_a.id, created_by_id=people.creator.id, title="Raw", priority="someday"))


def test_is_overdue():
    assert TaskItem(deadline=datetime.now(timezone.utc) - timedelta(days=1)).is_overdue is True
    assert TaskItem(deadline=datetime.now(timezone.utc) + timedelta(days=1)).is_overdue is False
    assert TaskItem(deadline=None).is_overdue is False
