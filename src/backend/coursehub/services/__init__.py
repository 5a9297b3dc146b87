"""
服务层
"""

from .course_service import CourseService
from .enrollment_service import EnrollmentService
from .progress_service import ProgressService
from .quiz_attempt_service import QuizAttemptService

__all__ = [
    "CourseService",
    "EnrollmentService",
    "ProgressService",
    "QuizAttemptService",
]
