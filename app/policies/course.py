from app.core.exceptions import NotFoundError
from app.db import User, Course


class CoursePolicy:
    @classmethod
    def check_course_owner(
        cls,
        user: User,
        course: Course
    ):
        if course.owner_id == user.id:
            return
        # Other teachers' courses are reported as missing, not forbidden
        raise NotFoundError(
            "Course not found or you don't have permission to change it"
        )

    @classmethod
    def check_course_readable(
        cls,
        user: User,
        course: Course
    ):
        if course.is_published or course.owner_id == user.id:
            return
        raise NotFoundError("Course not found")
