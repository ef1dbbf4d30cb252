"""Who may assign whom to a task, and the one-active-assignment-per-user rule.

Both operations check, in order: the task is visible to the acting team,
the acting user may act for the effective target, the target belongs to
the team (assign only), and the active assignment does or does not exist.
A caller who cannot see a task never learns anything about the target,
and a caller without the capability never learns whether the target
exists.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.assignments.models import TaskAssignment
from app.core.tasks.models import TaskItem
from app.core.assignments.schemas import UnassignResult
from app.core.tasks.service import require_task
from app.core.users.service import find_user_in_team
from app.db.base import utcnow
from app.errors import AlreadyAssigned, AssignmentNotFound, Forbidden, TargetNotFound

logger = logging.getLogger(__name__)


def may_act_for_others(task: TaskItem, actor_id: uuid.UUID, actor_is_admin: bool) -> bool:
    """The task creator and team admins may assign or unassign users other than themselves."""
    return task.created_by_id == actor_id or actor_is_admin


async def _authorize(
    db: AsyncSession,
    task: TaskItem,
    acting_user_id: uuid.UUID,
    acting_team_id: uuid.UUID,
    target_user_id: uuid.UUID,
    capability: str,
) -> None:
    if target_user_id == acting_user_id:
        return
    # admin rights only count inside the task's own team
    actor = await find_user_in_team(db, acting_user_id, acting_team_id)
    if actor is None or not may_act_for_others(task, actor.id, actor.is_admin):
        raise Forbidden(capability)


async def get_active_assignment(
    db: AsyncSession, task_id: uuid.UUID, user_id: uuid.UUID, *, for_update: bool = False
) -> TaskAssignment | None:
    stmt = select(TaskAssignment).where(
        TaskAssignment.task_id == task_id,
        TaskAssignment.user_id == user_id,
        TaskAssignment.active(),
    )
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_active_assignments(db: AsyncSession, task_id: uuid.UUID) -> list[TaskAssignment]:
    result = await db.execute(
        select(TaskAssignment)
        .where(TaskAssignment.task_id == task_id, TaskAssignment.active())
        .options(selectinload(TaskAssignment.user), selectinload(TaskAssignment.assigned_by))
        .order_by(TaskAssignment.assigned_at)
    )
    return list(result.scalars().all())


async def assign_task(
    db: AsyncSession,
    task_id: uuid.UUID,
    acting_user_id: uuid.UUID,
    acting_team_id: uuid.UUID,
    target_user_id: uuid.UUID | None = None,
) -> TaskItem:
    task = await require_task(db, task_id, acting_team_id, for_update=True)
    target_user_id = target_user_id or acting_user_id
    await _authorize(db, task, acting_user_id, acting_team_id, target_user_id, "assign other users")

    if await find_user_in_team(db, target_user_id, acting_team_id) is None:
        raise TargetNotFound()
    if await get_active_assignment(db, task.id, target_user_id) is not None:
        raise AlreadyAssigned()

    assignment = TaskAssignment(
        task_id=task.id,
        user_id=target_user_id,
        assigned_by_id=acting_user_id,
        assigned_at=utcnow(),
    )
    try:
        async with db.begin_nested():
            db.add(assignment)
    except IntegrityError as exc:
        # a concurrent assign won the race for the partial unique index
        logger.warning("Duplicate assignment of %s to task %s rejected by storage", target_user_id, task.id)
        raise AlreadyAssigned() from exc

    logger.info(
        "Task %s assigned to %s by %s in team %s", task.id, target_user_id, acting_user_id, acting_team_id
    )
    return await require_task(db, task.id, acting_team_id, with_assignments=True)


async def unassign_task(
    db: AsyncSession,
    task_id: uuid.UUID,
    acting_user_id: uuid.UUID,
    acting_team_id: uuid.UUID,
    target_user_id: uuid.UUID | None = None,
) -> UnassignResult:
    task = await require_task(db, task_id, acting_team_id, for_update=True)
    target_user_id = target_user_id or acting_user_id
    await _authorize(db, task, acting_user_id, acting_team_id, target_user_id, "unassign other users")

    assignment = await get_active_assignment(db, task.id, target_user_id, for_update=True)
    if assignment is None:
        raise AssignmentNotFound()

    assignment.soft_delete()
    await db.flush()
    logger.info(
        "Task %s unassigned from %s by %s in team %s", task.id, target_user_id, acting_user_id, acting_team_id
    )
    return UnassignResult(task_id=task.id, user_id=target_user_id)
