from fastapi import APIRouter

from .user import router as user_router
from .course import router as course_router
from .artwork import router as artwork_router
from .enrollment import router as enrollment_router
from .artwork_progress import router as artwork_progress_router
from .images import router as images_router

v1_router = APIRouter(prefix="/api/v1")

v1_router.include_router(user_router)
v1_router.include_router(course_router)
v1_router.include_router(artwork_router)
v1_router.include_router(enrollment_router)
v1_router.include_router(artwork_progress_router)
v1_router.include_router(images_router)
