from datetime import datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.db.base import Base, configure_sqlite
from app.db.user import User, UserRole
from app.db.course import Course
from app.db.artwork import Artwork
from app.db.enrollment import Enrollment
from app.helpers import enrollment as enrollment_helpers
from app.helpers.rate_limiter import FixedWindowRateLimiter

from app.app import app
from app.dependencies import (
    get_current_user,
    get_current_user_teacher,
    get_minio_client,
    get_upload_rate_limiter,
)

DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def async_engine():
    engine = create_async_engine(DATABASE_URL, poolclass=StaticPool)
    configure_sqlite(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(async_engine):
    async_session = async_sessionmaker(
        async_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as session:
        yield session


async def _create_user(db: AsyncSession, username: str, role: UserRole) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        role=role,
        hashed_password="fakehashed",
        first_name=username.capitalize(),
        last_name="Tester",
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(test_db: AsyncSession) -> User:
    return await _create_user(test_db, "testuser", UserRole.student)


@pytest_asyncio.fixture
async def test_teacher_user(test_db: AsyncSession) -> User:
    return await _create_user(test_db, "teacher", UserRole.teacher)


@pytest_asyncio.fixture
async def test_another_teacher_user(test_db: AsyncSession) -> User:
    return await _create_user(test_db, "another_teacher", UserRole.teacher)


@pytest_asyncio.fixture
async def test_course(test_db: AsyncSession, test_teacher_user: User) -> Course:
    course = Course(
        title="Impressionism",
        description="Light, colour and the open air",
        is_published=True,
        published_at=datetime.now(timezone.utc),
        owner_id=test_teacher_user.id,
    )
    test_db.add(course)
    await test_db.commit()
    await test_db.refresh(course)
    return course


@pytest_asyncio.fixture
async def test_draft_course(
    test_db: AsyncSession, test_teacher_user: User
) -> Course:
    course = Course(
        title="Draft Course",
        description="This is a draft course",
        is_published=False,
        owner_id=test_teacher_user.id,
    )
    test_db.add(course)
    await test_db.commit()
    await test_db.refresh(course)
    return course


@pytest_asyncio.fixture
async def test_other_teacher_course(
    test_db: AsyncSession, test_another_teacher_user: User
) -> Course:
    course = Course(
        title="Baroque",
        description="Drama in paint",
        is_published=True,
        published_at=datetime.now(timezone.utc),
        owner_id=test_another_teacher_user.id,
    )
    test_db.add(course)
    await test_db.commit()
    await test_db.refresh(course)
    return course


@pytest_asyncio.fixture
async def test_artworks(test_db: AsyncSession, test_course: Course) -> list[Artwork]:
    titles = ["Water Lilies", "Impression, Sunrise", "Le Moulin", "Haystacks"]
    artworks = [
        Artwork(
            title=title,
            description=f"About {title}",
            author="Claude Monet",
            course_id=test_course.id,
            order=(index + 1) * 10,
        )
        for index, title in enumerate(titles)
    ]
    test_db.add_all(artworks)
    await test_db.commit()
    for artwork in artworks:
        await test_db.refresh(artwork)
    return artworks


@pytest_asyncio.fixture
async def test_enrollment(
    test_db: AsyncSession,
    test_user: User,
    test_course: Course,
    test_artworks: list[Artwork],
) -> Enrollment:
    return await enrollment_helpers.enroll(test_db, test_user.id, test_course.id)


@pytest.fixture
def override_get_current_user_student(test_user: User):
    async def _override_user():
        return test_user

    app.dependency_overrides[get_current_user] = _override_user
    yield
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def override_get_current_user_teacher(test_teacher_user: User):
    async def _override_teacher_user():
        return test_teacher_user

    app.dependency_overrides[get_current_user] = _override_teacher_user
    app.dependency_overrides[get_current_user_teacher] = _override_teacher_user
    yield
    app.dependency_overrides.pop(get_current_user, None)
    app.dependency_overrides.pop(get_current_user_teacher, None)


class FakeMinio:
    def __init__(self):
        self.objects = {}
        self.removed = []

    def put_object(self, bucket_name, object_name, data, length, content_type=None):
        self.objects[(bucket_name, object_name)] = data.read(length)

    def remove_object(self, bucket_name, object_name):
        self.removed.append((bucket_name, object_name))
        self.objects.pop((bucket_name, object_name), None)


@pytest.fixture
def fake_minio():
    client = FakeMinio()
    app.dependency_overrides[get_minio_client] = lambda: client
    yield client
    app.dependency_overrides.pop(get_minio_client, None)


@pytest.fixture
def upload_rate_limiter():
    limiter = FixedWindowRateLimiter(limit=5, window_seconds=86400)
    app.dependency_overrides[get_upload_rate_limiter] = lambda: limiter
    yield limiter
    app.dependency_overrides.pop(get_upload_rate_limiter, None)
