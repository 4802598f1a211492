from .base import (
    Base,
    engine,
    get_async_db_session,
    async_session_maker,
    configure_sqlite,
    ORDER_STEP,
)
from .user import User, UserRole
from .course import Course
from .artwork import Artwork
from .enrollment import Enrollment, ArtworkProgress


__all__ = [
    "Base",
    "engine",
    "get_async_db_session",
    "async_session_maker",
    "configure_sqlite",
    "ORDER_STEP",
    "User",
    "UserRole",
    "Course",
    "Artwork",
    "Enrollment",
    "ArtworkProgress",
]
