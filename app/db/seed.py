import asyncio
import logging
from sqlalchemy import select
from app.db.base import Base, engine, async_session_maker
from app.db.user import User, UserRole
from app.auth.auth import pwd_context
from app.core.logging import configure_logging

logger = logging.getLogger(__name__)


async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created successfully.")


async def seed_teacher_user():
    async with async_session_maker() as session:
        teacher_email = "teacher@example.com"
        teacher_username = "teacher"
        teacher_password = "teacherpassword"

        existing_teacher = await session.execute(
            select(User).where(User.email == teacher_email)
        )
        if existing_teacher.scalars().first():
            logger.info("Teacher user already exists.")
            return

        hashed_password = pwd_context.hash(teacher_password)

        teacher_user = User(
            username=teacher_username,
            email=teacher_email,
            hashed_password=hashed_password,
            first_name="Demo",
            last_name="Teacher",
            role=UserRole.teacher,
            is_active=True,
        )
        session.add(teacher_user)
        await session.commit()
        logger.info("Teacher user '%s' created successfully.", teacher_username)


async def main():
    await create_tables()
    await seed_teacher_user()

if __name__ == "__main__":
    configure_logging()
    asyncio.run(main())
