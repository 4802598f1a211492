from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.db import Course, Artwork, Enrollment


async def course_exists(
        course_id: int,
        db: AsyncSession
):
    course = await db.scalar(
        select(Course).where(
            Course.id == course_id
        )
    )

    if course is None:
        raise NotFoundError("Course not found")

    return course


async def artwork_exists(
        artwork_id: int,
        db: AsyncSession
):
    artwork = await db.scalar(
        select(Artwork).where(
            Artwork.id == artwork_id
        )
    )

    if artwork is None:
        raise NotFoundError("Artwork not found")

    return artwork


async def enrollment_exists(
        user_id: int,
        course_id: int,
        db: AsyncSession
):
    enrollment = await db.scalar(
        select(Enrollment).where(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id
        )
    )

    if enrollment is None:
        raise NotFoundError("You are not enrolled in this course")

    return enrollment
