import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StoreError
from app.schemas import SArtworkCreate, SArtworkUpdate, SArtworkResponse
from app.db import get_async_db_session, Artwork, User
from app.dependencies import get_current_user, get_current_user_teacher
from app.policies import CoursePolicy
from app.helpers import obj_exist_check, catalog_sync

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/artwork", tags=["Artwork"])


async def get_owned_artwork(
    artwork_id: int,
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user_teacher),
) -> Artwork:
    artwork = await obj_exist_check.artwork_exists(artwork_id, db)
    course = await obj_exist_check.course_exists(artwork.course_id, db)
    CoursePolicy.check_course_owner(current_user, course)
    return artwork


@router.post("/", response_model=SArtworkResponse, status_code=status.HTTP_201_CREATED)
async def create_artwork(
    artwork_data: SArtworkCreate,
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user_teacher),
):
    course = await obj_exist_check.course_exists(artwork_data.course_id, db)
    CoursePolicy.check_course_owner(current_user, course)

    artwork = await catalog_sync.add_artwork(
        db, course, artwork_data.model_dump(exclude={"course_id"})
    )
    logger.info("Artwork %s added to course %s", artwork.id, course.id)
    return artwork


@router.get("/course/{course_id}", response_model=list[SArtworkResponse])
async def get_course_artworks(
    course_id: int,
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user),
):
    course = await obj_exist_check.course_exists(course_id, db)
    CoursePolicy.check_course_readable(current_user, course)

    artworks = await db.scalars(
        select(Artwork)
        .where(Artwork.course_id == course_id)
        .order_by(Artwork.order, Artwork.id)
    )
    return artworks.all()


@router.patch("/{artwork_id}", response_model=SArtworkResponse)
async def update_artwork(
    update_data: SArtworkUpdate,
    artwork: Artwork = Depends(get_owned_artwork),
    db: AsyncSession = Depends(get_async_db_session),
):
    artwork_id = artwork.id
    try:
        for field, value in update_data.model_dump(exclude_unset=True).items():
            setattr(artwork, field, value)

        await db.commit()
        await db.refresh(artwork)

    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to update artwork %s", artwork_id)
        raise StoreError()

    return artwork


@router.delete("/{artwork_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_artwork(
    artwork: Artwork = Depends(get_owned_artwork),
    db: AsyncSession = Depends(get_async_db_session),
):
    await catalog_sync.remove_artwork(db, artwork)
