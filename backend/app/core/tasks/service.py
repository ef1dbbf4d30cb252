import logging
import uuid
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.assignments.models import TaskAssignment
from app.core.tasks.models import TaskItem
from app.core.tasks.schemas import TaskCreate, TaskUpdate
from app.db.base import utcnow
from app.errors import InvalidTaskError, TaskNotFound

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _validated(schema: type[SchemaT], data: SchemaT | Mapping[str, Any]) -> SchemaT:
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise InvalidTaskError(first["msg"], field=field) from exc


def with_assignees():
    """Loader option for the active assignments of a task, with assignee and assigner."""
    return (
        selectinload(TaskItem.assignments.and_(TaskAssignment.active()))
        .options(selectinload(TaskAssignment.user), selectinload(TaskAssignment.assigned_by))
    )


async def get_task(
    db: AsyncSession,
    task_id: uuid.UUID,
    team_id: uuid.UUID,
    *,
    with_assignments: bool = False,
    for_update: bool = False,
) -> TaskItem | None:
    stmt = select(TaskItem).where(TaskItem.id == task_id, TaskItem.team_id == team_id, TaskItem.active())
    if for_update:
        stmt = stmt.with_for_update()
    if with_assignments:
        stmt = stmt.options(with_assignees(), selectinload(TaskItem.created_by))
        stmt = stmt.execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def require_task(db: AsyncSession, task_id: uuid.UUID, team_id: uuid.UUID, **kwargs) -> TaskItem:
    task = await get_task(db, task_id, team_id, **kwargs)
    if task is None:
        raise TaskNotFound()
    return task


async def list_tasks(
    db: AsyncSession,
    team_id: uuid.UUID,
    *,
    document_id: uuid.UUID | None = None,
    collection_id: uuid.UUID | None = None,
) -> list[TaskItem]:
    stmt = select(TaskItem).where(TaskItem.team_id == team_id, TaskItem.active())
    if document_id:
        stmt = stmt.where(TaskItem.document_id == document_id)
    if collection_id:
        stmt = stmt.where(TaskItem.collection_id == collection_id)
    result = await db.execute(
        stmt.options(with_assignees(), selectinload(TaskItem.created_by))
        .order_by(TaskItem.created_at.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def create_task(
    db: AsyncSession,
    team_id: uuid.UUID,
    creator_id: uuid.UUID,
    data: TaskCreate | Mapping[str, Any],
) -> TaskItem:
    data = _validated(TaskCreate, data)
    task = TaskItem(
        team_id=team_id,
        created_by_id=creator_id,
        title=data.title,
        description=data.description,
        priority=data.priority.value,
        deadline=data.deadline,
        tags=list(data.tags),
        document_id=data.document_id,
        collection_id=data.collection_id,
    )
    db.add(task)
    await db.flush()
    logger.info("Task %s created in team %s by %s", task.id, team_id, creator_id)
    return await require_task(db, task.id, team_id, with_assignments=True)


async def update_task(
    db: AsyncSession,
    task_id: uuid.UUID,
    team_id: uuid.UUID,
    data: TaskUpdate | Mapping[str, Any],
) -> TaskItem:
    data = _validated(TaskUpdate, data)
    task = await require_task(db, task_id, team_id, for_update=True)
    for field, value in data.model_dump(exclude_unset=True).items():
        if field == "priority":
            value = value.value
        setattr(task, field, value)
    await db.flush()
    return await require_task(db, task_id, team_id, with_assignments=True)


async def delete_task(db: AsyncSession, task_id: uuid.UUID, team_id: uuid.UUID) -> int:
    """Tombstone the task and its active assignments; returns how many assignments went with it."""
    task = await require_task(db, task_id, team_id, for_update=True)
    result = await db.execute(
        select(TaskAssignment)
        .where(TaskAssignment.task_id == task.id, TaskAssignment.active())
        .with_for_update()
    )
    assignments = list(result.scalars().all())
    now = utcnow()
    task.soft_delete(now)
    for assignment in assignments:
        assignment.soft_delete(now)
    await db.flush()
    logger.info("Task %s deleted in team %s, %d assignment(s) cascaded", task_id, team_id, len(assignments))
    return len(assignments)
