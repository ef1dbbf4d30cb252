import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base, TimestampMixin, SoftDeleteMixin, TeamScopedMixin

TITLE_MAX_LENGTH = 255


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskItem(Base, TimestampMixin, SoftDeleteMixin, TeamScopedMixin):
    __tablename__ = "task_items"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default=TaskPriority.MEDIUM.value)
    deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    tags: Mapped[list[str]] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # informational links, never cascaded
    document_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    collection_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    created_by_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_by: Mapped["User"] = relationship(foreign_keys=[created_by_id], lazy="raise")  # type: ignore  # noqa: F821
    assignments: Mapped[list["TaskAssignment"]] = relationship(back_populates="task", lazy="raise")  # type: ignore  # noqa: F821

    __table_args__ = (
        CheckConstraint("priority IN ('low', 'medium', 'high', 'urgent')", name="ck_task_items_priority"),
    )

    @property
    def is_overdue(self) -> bool:
        if self.deadline is None:
            return False
        deadline = self.deadline if self.deadline.tzinfo else self.deadline.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) > deadline

    @property
    def assignee_count(self) -> int:
        return len(self.assignments)

    @property
    def assignees(self) -> list:
        return [a.user for a in self.assignments]
