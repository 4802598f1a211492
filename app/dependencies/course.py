from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies.user import get_current_user_teacher
from app.helpers import obj_exist_check
from app.policies import CoursePolicy
from app.db import get_async_db_session, User, Course


async def get_owned_course(
    course_id: int,
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user_teacher)
) -> Course:
    course = await obj_exist_check.course_exists(course_id, db)
    CoursePolicy.check_course_owner(current_user, course)
    return course
