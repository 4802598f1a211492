from app.db import Artwork, Course, Enrollment, User
from app.helpers.accessibility import ResolvedArtwork

from .artwork import SArtworkResponse, SArtworkThumbnail
from .course import SCourseBrief
from .enrollment import (
    SArtworkProgressState,
    SArtworkWithProgress,
    SCourseProgressResponse,
    SEnrollmentDetailResponse,
    SEnrollmentResponse,
)
from .user import STeacherBrief


def build_enrollment_detail(
    enrollment: Enrollment,
    course: Course,
    teacher: User,
    artwork: Artwork | None,
) -> SEnrollmentDetailResponse:
    return SEnrollmentDetailResponse(
        id=enrollment.id,
        user_id=enrollment.user_id,
        course_id=enrollment.course_id,
        progress=enrollment.progress,
        completed_at=enrollment.completed_at,
        created_at=enrollment.created_at,
        course=SCourseBrief.model_validate(course),
        teacher=STeacherBrief(id=teacher.id, name=teacher.name),
        artwork=SArtworkThumbnail.model_validate(artwork) if artwork else None,
    )


def build_course_progress_response(
    enrollment: Enrollment,
    resolved: list[ResolvedArtwork],
) -> SCourseProgressResponse:
    artworks = []
    for item in resolved:
        artwork = SArtworkResponse.model_validate(item.artwork)
        progress = (
            SArtworkProgressState.model_validate(item.progress)
            if item.progress is not None
            else SArtworkProgressState()
        )
        artworks.append(
            SArtworkWithProgress(
                **artwork.model_dump(),
                progress=progress,
                is_accessible=item.is_accessible,
                status=item.status,
            )
        )

    return SCourseProgressResponse(
        enrollment=SEnrollmentResponse.model_validate(enrollment),
        artworks=artworks,
    )
