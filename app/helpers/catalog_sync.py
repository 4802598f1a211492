import logging
from typing import Iterable

from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, StoreError, ValidationError
from app.db import Artwork, ArtworkProgress, Course, Enrollment, User, ORDER_STEP
from app.helpers.enrollment import seed_artwork_progress
from app.helpers.progress import recompute_enrollment

logger = logging.getLogger(__name__)


async def on_artwork_membership_changed(
    db: AsyncSession,
    course_id: int,
    added_artwork_ids: Iterable[int],
) -> int:
    """
    Give every enrollment of the course a placeholder row for each added
    artwork, then recompute the enrollments against the new total.

    Existing rows are never modified. The caller owns the transaction.
    Returns the number of rows created.
    """
    added = list(dict.fromkeys(added_artwork_ids))

    enrollments = (
        await db.scalars(
            select(Enrollment).where(Enrollment.course_id == course_id)
        )
    ).all()

    created = 0
    for enrollment in enrollments:
        if added:
            created += await seed_artwork_progress(db, enrollment, added)
        await recompute_enrollment(db, enrollment)

    if created:
        logger.info(
            "Course %s: created %s progress rows across %s enrollments",
            course_id,
            created,
            len(enrollments),
        )
    return created


async def recompute_course_enrollments(
    db: AsyncSession,
    course_id: int,
) -> None:
    await on_artwork_membership_changed(db, course_id, [])


async def get_next_order(db: AsyncSession, course_id: int) -> int:
    max_order = await db.scalar(
        select(func.max(Artwork.order)).where(Artwork.course_id == course_id)
    )
    return (max_order or 0) + ORDER_STEP


async def add_artwork(
    db: AsyncSession,
    course: Course,
    data: dict,
) -> Artwork:
    course_id = course.id
    try:
        if data.get("order") is None:
            data["order"] = await get_next_order(db, course_id)

        artwork = Artwork(course_id=course_id, **data)
        db.add(artwork)
        await db.flush()

        await on_artwork_membership_changed(db, course_id, [artwork.id])
        await db.commit()
        await db.refresh(artwork)

    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to add artwork to course %s", course_id)
        raise StoreError()

    return artwork


async def remove_artwork(
    db: AsyncSession,
    artwork: Artwork,
) -> None:
    artwork_id, course_id = artwork.id, artwork.course_id
    try:
        await db.execute(delete(Artwork).where(Artwork.id == artwork_id))
        await recompute_course_enrollments(db, course_id)
        await db.commit()

    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to delete artwork %s", artwork_id)
        raise StoreError()

    logger.info("Artwork %s removed from course %s", artwork_id, course_id)


async def set_course_artworks(
    db: AsyncSession,
    course: Course,
    artwork_ids: list[int],
    teacher: User,
) -> list[Artwork]:
    """
    Make ``artwork_ids`` the course's artworks, in that order.

    Listed artworks may come from another course of the same teacher and
    are moved here. Course artworks missing from the list are deleted
    together with their progress rows.
    """
    course_id = course.id
    if len(set(artwork_ids)) != len(artwork_ids):
        raise ValidationError("Artwork ids must be unique")

    listed = {}
    if artwork_ids:
        listed = {
            artwork.id: artwork
            for artwork in (
                await db.scalars(
                    select(Artwork)
                    .join(Course, Course.id == Artwork.course_id)
                    .where(
                        Artwork.id.in_(artwork_ids),
                        Course.owner_id == teacher.id,
                    )
                )
            ).all()
        }

    missing = [artwork_id for artwork_id in artwork_ids if artwork_id not in listed]
    if missing:
        raise NotFoundError(
            f"Artworks not found or you don't have permission to use them: {missing}"
        )

    current_ids = set(
        await db.scalars(
            select(Artwork.id).where(Artwork.course_id == course_id)
        )
    )
    removed_ids = current_ids - set(artwork_ids)
    moved = [
        artwork for artwork in listed.values() if artwork.course_id != course_id
    ]
    source_course_ids = {artwork.course_id for artwork in moved}

    try:
        if removed_ids:
            await db.execute(
                delete(Artwork).where(Artwork.id.in_(list(removed_ids)))
            )

        if moved:
            # Rows seeded for the old course's enrollments do not carry over
            await db.execute(
                delete(ArtworkProgress).where(
                    ArtworkProgress.artwork_id.in_([a.id for a in moved])
                )
            )
            for artwork in moved:
                artwork.course_id = course_id

        for position, artwork_id in enumerate(artwork_ids, 1):
            artwork = listed[artwork_id]
            new_order = position * ORDER_STEP
            if artwork.order != new_order:
                artwork.order = new_order

        await db.flush()

        await on_artwork_membership_changed(
            db, course_id, [artwork.id for artwork in moved]
        )
        for source_course_id in source_course_ids:
            await recompute_course_enrollments(db, source_course_id)

        await db.commit()

    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to update artworks of course %s", course_id)
        raise StoreError()

    logger.info(
        "Course %s artworks set: %s added, %s removed",
        course_id,
        len(moved),
        len(removed_ids),
    )
    return [listed[artwork_id] for artwork_id in artwork_ids]
