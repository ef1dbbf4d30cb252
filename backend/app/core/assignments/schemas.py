import uuid
from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field

from app.core.users.schemas import UserSummary


class AssignRequest(BaseModel):
    user_id: uuid.UUID | None = Field(default=None, validation_alias=AliasChoices("user_id", "userId"))


class AssignmentRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    task_id: uuid.UUID
    user_id: uuid.UUID
    assigned_by_id: uuid.UUID
    assigned_at: datetime
    user: UserSummary
    assigned_by: UserSummary


class UnassignResult(BaseModel):
    task_id: uuid.UUID
    user_id: uuid.UUID
    deleted: bool = True
