import enum
import uuid
from sqlalchemy import String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin, SoftDeleteMixin, TeamScopedMixin


class UserRole(str, enum.Enum):
    MEMBER = "member"
    ADMIN = "admin"


class User(Base, TimestampMixin, SoftDeleteMixin, TeamScopedMixin):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default=UserRole.MEMBER.value)

    __table_args__ = (UniqueConstraint("team_id", "email", name="uq_user_team_email"),)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
