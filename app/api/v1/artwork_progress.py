from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas import (
    SArtworkProgressResponse,
    SCourseProgressResponse,
    build_course_progress_response,
)
from app.db import get_async_db_session, User
from app.dependencies import get_current_user
from app.helpers import progress as progress_helpers

router = APIRouter(prefix="/artwork-progress", tags=["Artwork Progress"])


@router.put("/{artwork_id}/view", response_model=SArtworkProgressResponse)
async def mark_artwork_viewed(
    artwork_id: int,
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user),
):
    return await progress_helpers.mark_viewed(db, current_user.id, artwork_id)


@router.put("/{artwork_id}/complete", response_model=SArtworkProgressResponse)
async def mark_artwork_completed(
    artwork_id: int,
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user),
):
    """Completing twice is allowed and leaves the first completion in place."""
    return await progress_helpers.mark_completed(db, current_user.id, artwork_id)


@router.get("/course/{course_id}", response_model=SCourseProgressResponse)
async def get_course_progress(
    course_id: int,
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user),
):
    enrollment, resolved = await progress_helpers.get_course_progress(
        db, current_user.id, course_id
    )
    return build_course_progress_response(enrollment, resolved)
