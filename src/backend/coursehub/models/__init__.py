"""
Models package
Export all database models
"""

from .base import Base
from .course import Course
from .lesson import Lesson
from .quiz_question import QuizQuestion
from .lesson_progress import LessonProgress
from .quiz_attempt import QuizAttempt
from .enrollment import Enrollment
from .quiz_settings import QuizSettings

__all__ = [
    "Base",
    "Course",
    "Lesson",
    "QuizQuestion",
    "LessonProgress",
    "QuizAttempt",
    "Enrollment",
    "QuizSettings",
]


def init_db():
    """初始化数据库"""
    from ..core.database import engine

    # 创建所有表
    Base.metadata.create_all(bind=engine)
    print("✅ Database tables created successfully")


def drop_all():
    """删除所有表（仅开发测试用）"""
    from ..core.database import engine

    # 删除所有表
    Base.metadata.drop_all(bind=engine)
    print("⚠️  All tables dropped")
