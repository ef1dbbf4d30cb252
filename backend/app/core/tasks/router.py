import uuid
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.assignments import service as assignment_service
from app.core.assignments.schemas import AssignRequest, UnassignResult
from app.core.tasks import service
from app.core.tasks.schemas import TaskCreate, TaskRead, TaskUpdate
from app.dependencies import get_db, get_current_user, CurrentUser

router = APIRouter(tags=["tasks"])

@router.post("/tasks", response_model=TaskRead, status_code=201)
async def create_task(data: TaskCreate, db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    return await service.create_task(db, current.team_id, current.user_id, data)

@router.get("/tasks", response_model=list[TaskRead])
async def list_tasks(document_id: uuid.UUID | None = None, collection_id: uuid.UUID | None = None, db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    return await service.list_tasks(db, current.team_id, document_id=document_id, collection_id=collection_id)

@router.get("/tasks/{task_id}", response_model=TaskRead)
async def get_task(task_id: uuid.UUID, db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    return await service.require_task(db, task_id, current.team_id, with_assignments=True)

@router.patch("/tasks/{task_id}", response_model=TaskRead)
async def update_task(task_id: uuid.UUID, data: TaskUpdate, db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    return await service.update_task(db, task_id, current.team_id, data)

@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: uuid.UUID, db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    await service.delete_task(db, task_id, current.team_id)

@router.post("/tasks/{task_id}/assign", response_model=TaskRead)
async def assign_task(task_id: uuid.UUID, body: AssignRequest | None = None, db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    return await assignment_service.assign_task(db, task_id, current.user_id, current.team_id, body.user_id if body else None)

@router.post("/tasks/{task_id}/unassign", response_model=UnassignResult)
async def unassign_task(task_id: uuid.UUID, body: AssignRequest | None = None, db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    return await assignment_service.unassign_task(db, task_id, current.user_id, current.team_id, body.user_id if body else None)
