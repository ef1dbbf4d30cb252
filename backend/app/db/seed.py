import asyncio
import os
import uuid

from sqlalchemy import select

from app.core.auth.security import create_access_token
from app.core.teams.models import Team
from app.core.users.models import User, UserRole
from app.db.session import get_session


async def seed() -> None:
    team_name = os.getenv("SEED_TEAM_NAME", "Default team")
    admin_email = os.getenv("SEED_ADMIN_EMAIL", "admin@tasks.local")

    async with get_session() as db:
        existing = await db.execute(select(Team).where(Team.name == team_name, Team.active()))
        team = existing.scalars().first()

        if not team:
            team = Team(id=uuid.uuid4(), name=team_name)
            db.add(team)
            await db.flush()
            print(f"Team created: {team.name} ({team.id})")
        else:
            print(f"Team exists: {team.name}")

        existing_user = await db.execute(
            select(User).where(User.team_id == team.id, User.email == admin_email.lower())
        )
        user = existing_user.scalar_one_or_none()

        if not user:
            user = User(
                id=uuid.uuid4(),
                team_id=team.id,
                email=admin_email.lower(),
                name="Team admin",
                role=UserRole.ADMIN.value,
            )
            db.add(user)
            await db.flush()
            print(f"Admin created: {user.email}")
        else:
            print(f"Admin exists: {user.email}")

        print(f"Access token: {create_access_token(user.id, team.id)}")


if __name__ == "__main__":
    asyncio.run(seed())
