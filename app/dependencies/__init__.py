from .user import (
    SessionIdentity,
    resolve_session,
    get_current_user,
    get_current_user_teacher,
)
from .course import get_owned_course
from .minio import get_minio_client
from .rate_limit import get_upload_rate_limiter
