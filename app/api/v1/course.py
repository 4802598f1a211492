import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select, func, or_, true
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StoreError
from app.schemas import (
    SCourseCreate,
    SCourseUpdate,
    SCourseResponse,
    SCourseDetailResponse,
    SCourseCatalogResponse,
    SCourseArtworksUpdate,
    SArtworkResponse,
)
from app.db import get_async_db_session, Course, Artwork, Enrollment, User
from app.dependencies import get_current_user, get_current_user_teacher, get_owned_course
from app.policies import CoursePolicy
from app.helpers import obj_exist_check, catalog_sync
from app.helpers.progress import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/course", tags=["Course"])


async def get_course_artworks(
    db: AsyncSession,
    course_ids: list[int],
) -> dict[int, list[Artwork]]:
    artworks_by_course = {course_id: [] for course_id in course_ids}
    if not course_ids:
        return artworks_by_course

    artworks = await db.scalars(
        select(Artwork)
        .where(Artwork.course_id.in_(course_ids))
        .order_by(Artwork.order, Artwork.id)
    )
    for artwork in artworks:
        artworks_by_course[artwork.course_id].append(artwork)
    return artworks_by_course


def build_course_detail(course: Course, artworks: list[Artwork]) -> SCourseDetailResponse:
    return SCourseDetailResponse(
        **SCourseResponse.model_validate(course).model_dump(),
        artworks=[SArtworkResponse.model_validate(a) for a in artworks],
    )


@router.post("/", response_model=SCourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: SCourseCreate,
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user_teacher),
):
    owner_id = current_user.id
    try:
        course = Course(**course_data.model_dump(), owner_id=owner_id)
        db.add(course)
        await db.commit()
        await db.refresh(course)

    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to create course for user %s", owner_id)
        raise StoreError()

    logger.info("Course %s created by user %s", course.id, owner_id)
    return course


@router.get("/", response_model=list[SCourseCatalogResponse])
async def get_courses(
    db: AsyncSession = Depends(get_async_db_session),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, le=1000),
    search: Optional[str] = Query(None, min_length=2, max_length=50),
):
    """Published courses with their artworks and how many students joined."""
    students_enrolled = (
        select(func.count(Enrollment.id))
        .where(Enrollment.course_id == Course.id)
        .correlate(Course)
        .scalar_subquery()
    )
    query = select(Course, students_enrolled).where(Course.is_published == true())

    if search:
        query = query.where(or_(
            Course.title.ilike(f"%{search}%"),
            Course.description.ilike(f"%{search}%")
        ))

    rows = (
        await db.execute(
            query.order_by(Course.published_at.desc(), Course.id.desc())
            .offset(skip)
            .limit(limit)
        )
    ).all()

    artworks = await get_course_artworks(db, [course.id for course, _ in rows])

    return [
        SCourseCatalogResponse(
            **build_course_detail(course, artworks[course.id]).model_dump(),
            students_enrolled=count or 0,
        )
        for course, count in rows
    ]


@router.get("/my", response_model=list[SCourseDetailResponse])
async def get_teacher_courses(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, le=1000),
    current_user: User = Depends(get_current_user_teacher),
    db: AsyncSession = Depends(get_async_db_session)
):
    courses = (
        await db.scalars(
            select(Course)
            .where(Course.owner_id == current_user.id)
            .order_by(Course.created_at.desc(), Course.id.desc())
            .offset(skip)
            .limit(limit)
        )
    ).all()

    artworks = await get_course_artworks(db, [course.id for course in courses])

    return [build_course_detail(course, artworks[course.id]) for course in courses]


@router.get("/{course_id}", response_model=SCourseDetailResponse)
async def get_course(
    course_id: int,
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user),
):
    course = await obj_exist_check.course_exists(course_id, db)
    CoursePolicy.check_course_readable(current_user, course)

    artworks = await get_course_artworks(db, [course.id])
    return build_course_detail(course, artworks[course.id])


@router.patch("/{course_id}", response_model=SCourseResponse)
async def update_course(
    update_data: SCourseUpdate,
    course: Course = Depends(get_owned_course),
    db: AsyncSession = Depends(get_async_db_session),
):
    course_id = course.id
    try:
        for field, value in update_data.model_dump(exclude_unset=True).items():
            setattr(course, field, value)

        await db.commit()
        await db.refresh(course)

    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to update course %s", course_id)
        raise StoreError()

    return course


@router.patch("/{course_id}/publish", response_model=SCourseResponse)
async def toggle_course_publish(
    course: Course = Depends(get_owned_course),
    db: AsyncSession = Depends(get_async_db_session),
):
    course_id = course.id
    try:
        course.is_published = not course.is_published
        course.published_at = utcnow() if course.is_published else None

        await db.commit()
        await db.refresh(course)

    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to toggle publication of course %s", course_id)
        raise StoreError()

    logger.info(
        "Course %s %s",
        course.id,
        "published" if course.is_published else "unpublished",
    )
    return course


@router.put("/{course_id}/artworks", response_model=SCourseDetailResponse)
async def set_course_artworks(
    artworks_data: SCourseArtworksUpdate,
    course: Course = Depends(get_owned_course),
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user_teacher),
):
    artworks = await catalog_sync.set_course_artworks(
        db, course, artworks_data.artwork_ids, current_user
    )
    return build_course_detail(course, artworks)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    course: Course = Depends(get_owned_course),
    db: AsyncSession = Depends(get_async_db_session),
):
    course_id = course.id
    try:
        await db.delete(course)
        await db.commit()

    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to delete course %s", course_id)
        raise StoreError()

    logger.info("Course %s deleted", course_id)
