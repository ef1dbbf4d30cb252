import uuid
from datetime import datetime
from sqlalchemy import DateTime, ForeignKey, Index, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin, SoftDeleteMixin, utcnow
from app.core.tasks.models import TaskItem
from app.core.users.models import User

ACTIVE_ROWS = text("deleted_at IS NULL")


class TaskAssignment(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "task_assignments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    task_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("task_items.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_by_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    task: Mapped[TaskItem] = relationship(back_populates="assignments", lazy="raise")
    user: Mapped[User] = relationship(foreign_keys=[user_id], lazy="raise")
    assigned_by: Mapped[User] = relationship(foreign_keys=[assigned_by_id], lazy="raise")

    __table_args__ = (
        # one active assignment per (task, user); tombstoned rows are history
        Index(
            "uq_task_assignments_task_user_active",
            "task_id",
            "user_id",
            unique=True,
            postgresql_where=ACTIVE_ROWS,
            sqlite_where=ACTIVE_ROWS,
        ),
    )
