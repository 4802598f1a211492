from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas import (
    SEnrollmentCreate,
    SEnrollmentResponse,
    SEnrollmentDetailResponse,
    build_enrollment_detail,
)
from app.db import get_async_db_session, User
from app.dependencies import get_current_user
from app.helpers import enrollment as enrollment_helpers

router = APIRouter(prefix="/enrollment", tags=["Enrollment"])


@router.post("/", response_model=SEnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def enroll_in_course(
    enrollment_data: SEnrollmentCreate,
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user),
):
    return await enrollment_helpers.enroll(db, current_user.id, enrollment_data.course_id)


@router.get("/", response_model=list[SEnrollmentDetailResponse])
async def get_my_enrollments(
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user),
):
    rows = await enrollment_helpers.get_user_enrollments(db, current_user.id)
    return [
        build_enrollment_detail(enrollment, course, teacher, artwork)
        for enrollment, course, teacher, artwork in rows
    ]
