from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from .artwork import SArtworkResponse, SArtworkThumbnail
from .course import SCourseBrief
from .user import STeacherBrief
from app.helpers.accessibility import ArtworkStatus


class SEnrollmentCreate(BaseModel):
    course_id: int
    model_config = ConfigDict(extra="forbid")


class SEnrollmentResponse(BaseModel):
    id: int
    user_id: int
    course_id: int
    progress: int = Field(..., ge=0, le=100)
    completed_at: Optional[datetime] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class SEnrollmentDetailResponse(SEnrollmentResponse):
    course: SCourseBrief
    teacher: STeacherBrief
    artwork: Optional[SArtworkThumbnail] = None


class SArtworkProgressResponse(BaseModel):
    id: int
    user_id: int
    artwork_id: int
    enrollment_id: int
    is_completed: bool
    viewed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class SArtworkProgressState(BaseModel):
    is_completed: bool = False
    viewed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class SArtworkWithProgress(SArtworkResponse):
    progress: SArtworkProgressState
    is_accessible: bool
    status: ArtworkStatus


class SCourseProgressResponse(BaseModel):
    enrollment: SEnrollmentResponse
    artworks: list[SArtworkWithProgress]
