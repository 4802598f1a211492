from .course import CoursePolicy
