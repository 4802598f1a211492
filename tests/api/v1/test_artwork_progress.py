import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.user import User
from app.db.course import Course
from app.db.artwork import Artwork
from app.db.enrollment import Enrollment, ArtworkProgress

from app.app import app


@pytest_asyncio.fixture
async def two_artworks(test_db: AsyncSession, test_course: Course) -> list[Artwork]:
    artworks = [
        Artwork(title="Sketch", course_id=test_course.id, order=10),
        Artwork(title="Study", course_id=test_course.id, order=20),
    ]
    test_db.add_all(artworks)
    await test_db.commit()
    return artworks


async def get_entry(db: AsyncSession, user: User, artwork: Artwork) -> ArtworkProgress:
    return await db.scalar(
        select(ArtworkProgress)
        .where(
            ArtworkProgress.user_id == user.id,
            ArtworkProgress.artwork_id == artwork.id,
        )
        .execution_options(populate_existing=True)
    )


async def get_enrollment(db: AsyncSession, enrollment_id: int) -> Enrollment:
    return await db.scalar(
        select(Enrollment)
        .where(Enrollment.id == enrollment_id)
        .execution_options(populate_existing=True)
    )


@pytest.mark.asyncio
async def test_two_artwork_course_walkthrough(
    test_db: AsyncSession,
    test_user: User,
    test_course: Course,
    two_artworks: list[Artwork],
    override_get_current_user_student,
):
    first, second = two_artworks

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        response = await ac.post("/api/v1/enrollment/", json={"course_id": test_course.id})
        assert response.status_code == 201
        enrollment_id = response.json()["id"]

        rows = (
            await test_db.scalars(
                select(ArtworkProgress).where(ArtworkProgress.enrollment_id == enrollment_id)
            )
        ).all()
        assert len(rows) == 2

        response = await ac.put(f"/api/v1/artwork-progress/{first.id}/complete")
        assert response.status_code == 200
        enrollment = await get_enrollment(test_db, enrollment_id)
        assert enrollment.progress == 50
        assert enrollment.completed_at is None

        response = await ac.put(f"/api/v1/artwork-progress/{second.id}/complete")
        assert response.status_code == 200
        enrollment = await get_enrollment(test_db, enrollment_id)
        assert enrollment.progress == 100
        assert enrollment.completed_at is not None
        completed_at = enrollment.completed_at

        response = await ac.put(f"/api/v1/artwork-progress/{second.id}/complete")
        assert response.status_code == 200
        enrollment = await get_enrollment(test_db, enrollment_id)
        assert enrollment.progress == 100
        assert enrollment.completed_at == completed_at


@pytest.mark.asyncio
async def test_complete_is_idempotent(
    test_db: AsyncSession,
    test_user: User,
    test_artworks: list[Artwork],
    test_enrollment: Enrollment,
    override_get_current_user_student,
):
    artwork = test_artworks[0]

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        first = await ac.put(f"/api/v1/artwork-progress/{artwork.id}/complete")
        second = await ac.put(f"/api/v1/artwork-progress/{artwork.id}/complete")

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["is_completed"] is True
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["is_completed"] is True

    enrollment = await get_enrollment(test_db, test_enrollment.id)
    assert enrollment.progress == 25


@pytest.mark.asyncio
async def test_complete_sets_viewed_at(
    test_db: AsyncSession,
    test_user: User,
    test_artworks: list[Artwork],
    test_enrollment: Enrollment,
    override_get_current_user_student,
):
    artwork = test_artworks[1]

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        response = await ac.put(f"/api/v1/artwork-progress/{artwork.id}/complete")

    assert response.status_code == 200
    entry = await get_entry(test_db, test_user, artwork)
    assert entry.is_completed
    assert entry.completed_at is not None
    assert entry.viewed_at is not None


@pytest.mark.asyncio
async def test_view_keeps_first_timestamp(
    test_db: AsyncSession,
    test_user: User,
    test_artworks: list[Artwork],
    test_enrollment: Enrollment,
    override_get_current_user_student,
):
    artwork = test_artworks[2]

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        response = await ac.put(f"/api/v1/artwork-progress/{artwork.id}/view")
        assert response.status_code == 200
        assert response.json()["viewed_at"] is not None
        assert response.json()["is_completed"] is False

        viewed_at = (await get_entry(test_db, test_user, artwork)).viewed_at

        response = await ac.put(f"/api/v1/artwork-progress/{artwork.id}/view")
        assert response.status_code == 200

    entry = await get_entry(test_db, test_user, artwork)
    assert entry.viewed_at == viewed_at

    enrollment = await get_enrollment(test_db, test_enrollment.id)
    assert enrollment.progress == 0
    assert enrollment.completed_at is None


@pytest.mark.asyncio
async def test_progress_requires_enrollment(
    test_artworks: list[Artwork],
    override_get_current_user_student,
):
    artwork = test_artworks[0]

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        view = await ac.put(f"/api/v1/artwork-progress/{artwork.id}/view")
        complete = await ac.put(f"/api/v1/artwork-progress/{artwork.id}/complete")

    assert view.status_code == 404
    assert complete.status_code == 404


@pytest.mark.asyncio
async def test_progress_requires_session(
    test_artworks: list[Artwork],
    test_enrollment: Enrollment,
):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        response = await ac.put(f"/api/v1/artwork-progress/{test_artworks[0].id}/complete")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_course_progress(
    test_course: Course,
    test_artworks: list[Artwork],
    test_enrollment: Enrollment,
    override_get_current_user_student,
):
    a, b, c, d = test_artworks

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        await ac.put(f"/api/v1/artwork-progress/{a.id}/complete")
        await ac.put(f"/api/v1/artwork-progress/{c.id}/view")
        response = await ac.get(f"/api/v1/artwork-progress/course/{test_course.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["enrollment"]["id"] == test_enrollment.id
    assert data["enrollment"]["progress"] == 25

    artworks = {item["id"]: item for item in data["artworks"]}
    assert [item["id"] for item in data["artworks"]] == [a.id, b.id, c.id, d.id]

    assert artworks[a.id]["is_accessible"] is True
    assert artworks[a.id]["status"] == "Completed"
    assert artworks[a.id]["progress"]["is_completed"] is True

    assert artworks[b.id]["is_accessible"] is True
    assert artworks[b.id]["status"] == "In Progress"

    assert artworks[c.id]["is_accessible"] is True
    assert artworks[c.id]["status"] == "In Progress"
    assert artworks[c.id]["progress"]["viewed_at"] is not None

    assert artworks[d.id]["is_accessible"] is False
    assert artworks[d.id]["status"] == "Not Started"


@pytest.mark.asyncio
async def test_get_course_progress_not_enrolled(
    test_course: Course,
    override_get_current_user_student,
):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        response = await ac.get(f"/api/v1/artwork-progress/course/{test_course.id}")

    assert response.status_code == 404
