import logging
from typing import Iterable

from sqlalchemy import select, true
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, StoreError
from app.db import Artwork, ArtworkProgress, Course, Enrollment, User

logger = logging.getLogger(__name__)


async def seed_artwork_progress(
    db: AsyncSession,
    enrollment: Enrollment,
    artwork_ids: Iterable[int] | None = None,
) -> int:
    """
    Create unstarted progress rows for ``artwork_ids`` (default: every
    artwork of the course) that the enrollment does not have yet.

    Safe to re-run. The (enrollment_id, artwork_id) unique constraint
    settles races with a concurrent writer; losing one is a no-op.
    Returns the number of rows created.
    """
    if artwork_ids is None:
        artwork_ids = await db.scalars(
            select(Artwork.id)
            .where(Artwork.course_id == enrollment.course_id)
            .order_by(Artwork.order, Artwork.id)
        )
    wanted = list(dict.fromkeys(artwork_ids))
    if not wanted:
        return 0

    existing = set(
        await db.scalars(
            select(ArtworkProgress.artwork_id).where(
                ArtworkProgress.enrollment_id == enrollment.id,
                ArtworkProgress.artwork_id.in_(wanted),
            )
        )
    )

    created = 0
    for artwork_id in wanted:
        if artwork_id in existing:
            continue
        try:
            async with db.begin_nested():
                db.add(
                    ArtworkProgress(
                        user_id=enrollment.user_id,
                        artwork_id=artwork_id,
                        enrollment_id=enrollment.id,
                        is_completed=False,
                    )
                )
                await db.flush()
        except IntegrityError:
            logger.debug(
                "Progress row for enrollment %s / artwork %s already exists",
                enrollment.id,
                artwork_id,
            )
            continue
        created += 1

    return created


async def enroll(
    db: AsyncSession,
    user_id: int,
    course_id: int,
) -> Enrollment:
    course = await db.scalar(
        select(Course).where(
            Course.id == course_id,
            Course.is_published == true(),
        )
    )
    if course is None:
        raise NotFoundError(
            "This course doesn't exist or is not published yet"
        )

    existing = await db.scalar(
        select(Enrollment).where(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id,
        )
    )
    if existing is not None:
        raise ConflictError("You are already enrolled in this course")

    try:
        enrollment = Enrollment(
            user_id=user_id,
            course_id=course_id,
            progress=0,
            completed_at=None,
        )
        db.add(enrollment)
        await db.flush()

        seeded = await seed_artwork_progress(db, enrollment)
        await db.commit()

    except IntegrityError:
        await db.rollback()
        concurrent = await db.scalar(
            select(Enrollment.id).where(
                Enrollment.user_id == user_id,
                Enrollment.course_id == course_id,
            )
        )
        if concurrent is not None:
            raise ConflictError("You are already enrolled in this course")
        logger.exception(
            "Failed to enroll user %s in course %s", user_id, course_id
        )
        raise StoreError()

    except SQLAlchemyError:
        await db.rollback()
        logger.exception(
            "Failed to enroll user %s in course %s", user_id, course_id
        )
        raise StoreError()

    logger.info(
        "User %s enrolled in course %s with %s artworks",
        user_id,
        course_id,
        seeded,
    )
    return enrollment


async def get_user_enrollments(
    db: AsyncSession,
    user_id: int,
) -> list[tuple[Enrollment, Course, User, Artwork | None]]:
    rows = (
        await db.execute(
            select(Enrollment, Course, User)
            .join(Course, Course.id == Enrollment.course_id)
            .join(User, User.id == Course.owner_id)
            .where(Enrollment.user_id == user_id)
            .order_by(Enrollment.created_at, Enrollment.id)
        )
    ).all()

    result = []
    for enrollment, course, teacher in rows:
        # First artwork in course order serves as the thumbnail
        first_artwork = await db.scalar(
            select(Artwork)
            .where(Artwork.course_id == course.id)
            .order_by(Artwork.order, Artwork.id)
            .limit(1)
        )
        result.append((enrollment, course, teacher, first_artwork))

    return result
