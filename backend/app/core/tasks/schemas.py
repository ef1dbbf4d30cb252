import re
import uuid
from datetime import datetime, timezone
from typing import Annotated
from pydantic import AfterValidator, AliasChoices, BaseModel, BeforeValidator, Field, field_validator

from app.core.tasks.models import TITLE_MAX_LENGTH, TaskPriority
from app.core.assignments.schemas import AssignmentRead
from app.core.users.schemas import UserSummary

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_deadline(value):
    # a bare calendar date means midnight UTC of that day
    if isinstance(value, str) and _DATE_ONLY.match(value):
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    return value


def _check_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Task title must not be empty")
    if len(value) > TITLE_MAX_LENGTH:
        raise ValueError(f"Task title must be {TITLE_MAX_LENGTH} characters or less")
    return value


Title = Annotated[str, AfterValidator(_check_title)]
Deadline = Annotated[datetime | None, BeforeValidator(_parse_deadline)]
DEADLINE_ALIASES = AliasChoices("deadline", "due_date", "dueDate")


class TaskCreate(BaseModel):
    title: Title
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    deadline: Deadline = Field(default=None, validation_alias=DEADLINE_ALIASES)
    tags: list[str] = Field(default_factory=list)
    document_id: uuid.UUID | None = None
    collection_id: uuid.UUID | None = None


class TaskUpdate(BaseModel):
    """Only fields present in the payload are applied; see ``model_fields_set``."""

    title: Title | None = None
    description: str | None = None
    priority: TaskPriority | None = None
    deadline: Deadline = Field(default=None, validation_alias=DEADLINE_ALIASES)
    tags: list[str] | None = None
    completed_at: datetime | None = None

    @field_validator("title", "priority", "tags")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field may not be null")
        return value


class TaskRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    team_id: uuid.UUID
    created_by_id: uuid.UUID
    created_by: UserSummary
    title: str
    description: str | None
    priority: TaskPriority
    deadline: datetime | None
    tags: list[str]
    completed_at: datetime | None
    document_id: uuid.UUID | None
    collection_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime
    is_overdue: bool
    assignee_count: int
    assignees: list[UserSummary]
    assignments: list[AssignmentRead]


