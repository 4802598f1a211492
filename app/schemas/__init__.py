from .user import SUserAuth, SUserRegister, SUserResponse, STeacherBrief
from .artwork import SArtworkCreate, SArtworkUpdate, SArtworkResponse, SArtworkThumbnail
from .course import (
    SCourseCreate,
    SCourseUpdate,
    SCourseResponse,
    SCourseDetailResponse,
    SCourseCatalogResponse,
    SCourseArtworksUpdate,
    SCourseBrief,
)
from .enrollment import (
    SEnrollmentCreate,
    SEnrollmentResponse,
    SEnrollmentDetailResponse,
    SArtworkProgressResponse,
    SArtworkProgressState,
    SArtworkWithProgress,
    SCourseProgressResponse,
)
from .image import SImageUploadResponse, SImageDelete, SImageDeleteResponse
from .utils import build_course_progress_response, build_enrollment_detail
