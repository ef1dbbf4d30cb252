import uuid
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.users.models import User


async def find_user_in_team(db: AsyncSession, user_id: uuid.UUID, team_id: uuid.UUID) -> User | None:
    """A user of another team is reported the same way as a missing one."""
    result = await db.execute(
        select(User).where(User.id == user_id, User.team_id == team_id, User.active())
    )
    return result.scalar_one_or_none()

