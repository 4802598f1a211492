import logging
from datetime import datetime, timezone

from sqlalchemy import select, func, case, true
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, StoreError
from app.db import Artwork, ArtworkProgress, Enrollment
from app.helpers import obj_exist_check
from app.helpers.accessibility import ResolvedArtwork, resolve_artworks

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def calculate_percentage(completed_count: int, total_count: int) -> int:
    """Whole percentage rounded half up; an empty course is at 0."""
    if total_count <= 0:
        return 0
    return (200 * completed_count + total_count) // (2 * total_count)


async def recompute_enrollment(
    db: AsyncSession,
    enrollment: Enrollment,
    now: datetime | None = None,
) -> Enrollment:
    """
    Re-derive ``progress`` and ``completed_at`` from the enrollment's rows.

    Counts are read fresh in a single query inside the caller's
    transaction. ``completed_at`` is kept when already set at 100 and
    cleared whenever the percentage falls below 100.
    """
    await db.flush()

    course_artworks = (
        select(func.count(Artwork.id))
        .where(Artwork.course_id == enrollment.course_id)
        .scalar_subquery()
    )
    total_count, completed_count, artwork_count = (
        await db.execute(
            select(
                func.count(ArtworkProgress.id),
                func.count(case((ArtworkProgress.is_completed == true(), 1))),
                course_artworks,
            ).where(ArtworkProgress.enrollment_id == enrollment.id)
        )
    ).one()

    if total_count != artwork_count:
        logger.warning(
            "Enrollment %s has %s progress rows but course %s has %s artworks",
            enrollment.id,
            total_count,
            enrollment.course_id,
            artwork_count,
        )

    percentage = calculate_percentage(completed_count, total_count)
    enrollment.progress = percentage

    if percentage == 100:
        if enrollment.completed_at is None:
            enrollment.completed_at = now or utcnow()
    else:
        enrollment.completed_at = None

    await db.flush()
    return enrollment


async def get_progress_entry(
    db: AsyncSession,
    user_id: int,
    artwork_id: int,
) -> ArtworkProgress:
    entry = await db.scalar(
        select(ArtworkProgress).where(
            ArtworkProgress.user_id == user_id,
            ArtworkProgress.artwork_id == artwork_id,
        )
    )

    if entry is None:
        raise NotFoundError(
            "Artwork progress not found or you're not enrolled in this course"
        )

    return entry


async def mark_viewed(
    db: AsyncSession,
    user_id: int,
    artwork_id: int,
) -> ArtworkProgress:
    entry = await get_progress_entry(db, user_id, artwork_id)

    if entry.viewed_at is not None:
        return entry

    try:
        entry.viewed_at = utcnow()
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to mark artwork %s as viewed", artwork_id)
        raise StoreError()

    return entry


async def mark_completed(
    db: AsyncSession,
    user_id: int,
    artwork_id: int,
) -> ArtworkProgress:
    entry = await get_progress_entry(db, user_id, artwork_id)

    if entry.is_completed:
        return entry

    now = utcnow()
    try:
        entry.is_completed = True
        entry.completed_at = now
        entry.viewed_at = entry.viewed_at or now

        # Serialises concurrent completions of the same enrollment
        enrollment = await db.scalar(
            select(Enrollment)
            .where(Enrollment.id == entry.enrollment_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        if enrollment is not None:
            await recompute_enrollment(db, enrollment, now)

        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to mark artwork %s as completed", artwork_id)
        raise StoreError()

    logger.info(
        "User %s completed artwork %s (enrollment %s at %s%%)",
        user_id,
        artwork_id,
        entry.enrollment_id,
        enrollment.progress if enrollment is not None else 0,
    )
    return entry


async def get_course_progress(
    db: AsyncSession,
    user_id: int,
    course_id: int,
) -> tuple[Enrollment, list[ResolvedArtwork]]:
    enrollment = await obj_exist_check.enrollment_exists(user_id, course_id, db)

    artworks = (
        await db.scalars(
            select(Artwork)
            .where(Artwork.course_id == course_id)
            .order_by(Artwork.order, Artwork.id)
        )
    ).all()

    entries = (
        await db.scalars(
            select(ArtworkProgress).where(
                ArtworkProgress.enrollment_id == enrollment.id
            )
        )
    ).all()

    progress_by_artwork = {entry.artwork_id: entry for entry in entries}

    return enrollment, resolve_artworks(artworks, progress_by_artwork)
