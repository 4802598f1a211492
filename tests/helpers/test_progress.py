from datetime import datetime, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.db.artwork import Artwork
from app.db.course import Course
from app.db.enrollment import Enrollment, ArtworkProgress
from app.db.user import User
from app.helpers import progress as progress_helpers
from app.helpers.progress import calculate_percentage, recompute_enrollment


@pytest.mark.parametrize(
    "completed,total,expected",
    [
        (0, 0, 0),
        (0, 4, 0),
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),
        (1, 200, 1),
        (1, 201, 0),
        (3, 3, 100),
    ],
)
def test_calculate_percentage_rounds_half_up(completed, total, expected):
    assert calculate_percentage(completed, total) == expected


async def reload_enrollment(db: AsyncSession, enrollment_id: int) -> Enrollment:
    return await db.scalar(
        select(Enrollment)
        .where(Enrollment.id == enrollment_id)
        .execution_options(populate_existing=True)
    )


@pytest.mark.asyncio
async def test_progress_matches_fresh_counts(
    test_db: AsyncSession,
    test_user: User,
    test_artworks: list[Artwork],
    test_enrollment: Enrollment,
):
    expected = [25, 50, 75, 100]
    for artwork, percentage in zip(test_artworks, expected):
        await progress_helpers.mark_completed(test_db, test_user.id, artwork.id)
        enrollment = await reload_enrollment(test_db, test_enrollment.id)
        assert enrollment.progress == percentage
        assert (enrollment.completed_at is not None) == (percentage == 100)


@pytest.mark.asyncio
async def test_mark_completed_unknown_artwork(
    test_db: AsyncSession,
    test_user: User,
    test_enrollment: Enrollment,
):
    with pytest.raises(NotFoundError):
        await progress_helpers.mark_completed(test_db, test_user.id, 9999)


@pytest.mark.asyncio
async def test_mark_completed_returns_existing_row_unchanged(
    test_db: AsyncSession,
    test_user: User,
    test_artworks: list[Artwork],
    test_enrollment: Enrollment,
):
    artwork = test_artworks[0]
    first = await progress_helpers.mark_completed(test_db, test_user.id, artwork.id)
    completed_at = first.completed_at

    second = await progress_helpers.mark_completed(test_db, test_user.id, artwork.id)

    assert second.id == first.id
    assert second.completed_at == completed_at


@pytest.mark.asyncio
async def test_recompute_keeps_first_completion_time(
    test_db: AsyncSession,
    test_user: User,
    test_artworks: list[Artwork],
    test_enrollment: Enrollment,
):
    for artwork in test_artworks:
        await progress_helpers.mark_completed(test_db, test_user.id, artwork.id)

    enrollment = await reload_enrollment(test_db, test_enrollment.id)
    completed_at = enrollment.completed_at

    later = datetime(2099, 1, 1, tzinfo=timezone.utc)
    await recompute_enrollment(test_db, enrollment, later)
    assert enrollment.progress == 100
    assert enrollment.completed_at == completed_at


@pytest.mark.asyncio
async def test_recompute_clears_completion_below_hundred(
    test_db: AsyncSession,
    test_user: User,
    test_course: Course,
    test_artworks: list[Artwork],
    test_enrollment: Enrollment,
):
    for artwork in test_artworks:
        await progress_helpers.mark_completed(test_db, test_user.id, artwork.id)

    test_db.add(
        ArtworkProgress(
            user_id=test_user.id,
            artwork_id=(await _add_artwork(test_db, test_course)).id,
            enrollment_id=test_enrollment.id,
        )
    )
    enrollment = await reload_enrollment(test_db, test_enrollment.id)
    await recompute_enrollment(test_db, enrollment)

    assert enrollment.progress == 80
    assert enrollment.completed_at is None


@pytest.mark.asyncio
async def test_recompute_empty_enrollment(
    test_db: AsyncSession,
    test_user: User,
    test_course: Course,
):
    enrollment = Enrollment(user_id=test_user.id, course_id=test_course.id, progress=0)
    test_db.add(enrollment)
    await test_db.flush()

    await recompute_enrollment(test_db, enrollment)

    assert enrollment.progress == 0
    assert enrollment.completed_at is None


@pytest.mark.asyncio
async def test_course_progress_defaults_missing_rows(
    test_db: AsyncSession,
    test_user: User,
    test_course: Course,
    test_artworks: list[Artwork],
    test_enrollment: Enrollment,
):
    extra = await _add_artwork(test_db, test_course)

    enrollment, resolved = await progress_helpers.get_course_progress(
        test_db, test_user.id, test_course.id
    )

    assert enrollment.id == test_enrollment.id
    assert resolved[-1].artwork.id == extra.id
    assert resolved[-1].progress is None
    assert resolved[-1].is_accessible is False


async def _add_artwork(db: AsyncSession, course: Course) -> Artwork:
    artwork = Artwork(title="Late addition", course_id=course.id, order=1000)
    db.add(artwork)
    await db.flush()
    return artwork
