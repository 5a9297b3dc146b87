"""
学习进度服务
课时进度按 (学员, 课时) 更新插入，课程进度实时汇总
"""
import uuid
import logging
from datetime import datetime
from typing import List, Optional, Sequence
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.progress import ProgressAggregator, CourseProgressSummary
from ..core.settings import Settings, get_settings
from ..core.slug import SlugCodec
from ..models import Lesson, LessonProgress
from .course_service import CourseService

logger = logging.getLogger(__name__)


class ProgressService:
    """学习进度服务"""

    @staticmethod
    def _find(db: Session, user_id: str, lesson_id: int) -> Optional[LessonProgress]:
        return db.query(LessonProgress).filter(
            LessonProgress.user_id == user_id,
            LessonProgress.lesson_id == lesson_id
        ).first()

    @staticmethod
    def _apply(progress: LessonProgress, completed: bool) -> None:
        if completed:
            # 已完成的课时重复提交时保留首次完成时间
            if not progress.completed or progress.completed_at is None:
                progress.completed_at = datetime.utcnow()
        else:
            progress.completed_at = None
        progress.completed = completed
        progress.updated_at = datetime.utcnow()

    @staticmethod
    def set_lesson_progress(
        db: Session,
        user_id: str,
        lesson_id: int,
        completed: bool
    ) -> LessonProgress:
        """
        更新或创建课时进度

        Args:
            db: 数据库会话
            user_id: 学员ID
            lesson_id: 课时ID
            completed: 是否完成（False 表示重新打开）

        Returns:
            LessonProgress: 更新后的进度记录

        Raises:
            NotFoundError: 课时不存在
        """
        lesson = CourseService.get_lesson(db, lesson_id)

        progress = ProgressService._find(db, user_id, lesson_id)
        if progress:
            ProgressService._apply(progress, completed)
            db.commit()
            db.refresh(progress)
            return progress

        progress = LessonProgress(
            id=str(uuid.uuid4()),
            user_id=user_id,
            lesson_id=lesson.id,
            course_id=lesson.course_id,
            completed=False
        )
        ProgressService._apply(progress, completed)
        db.add(progress)
        try:
            db.commit()
        except IntegrityError:
            # 并发请求已先插入同一 (学员, 课时) 记录，改为更新
            db.rollback()
            logger.warning(f"进度记录并发插入，改为更新: user={user_id}, lesson={lesson_id}")
            progress = ProgressService._find(db, user_id, lesson_id)
            if progress is None:
                raise
            ProgressService._apply(progress, completed)
            db.commit()

        db.refresh(progress)
        return progress

    @staticmethod
    def get_progress_rows(
        db: Session,
        user_id: str,
        course_id: Optional[int] = None
    ) -> List[LessonProgress]:
        """获取学员的课时进度记录，可按课程过滤"""
        query = db.query(LessonProgress).filter(LessonProgress.user_id == user_id)
        if course_id is not None:
            if not SlugCodec.is_valid_id(course_id):
                return []
            query = query.filter(LessonProgress.course_id == course_id)
        return query.order_by(LessonProgress.updated_at.asc()).all()

    @staticmethod
    def get_course_summary(
        db: Session,
        user_id: str,
        course_id: int,
        lessons: Optional[Sequence[Lesson]] = None,
        settings: Optional[Settings] = None
    ) -> CourseProgressSummary:
        """
        获取学员在指定课程中的进度摘要

        Args:
            db: 数据库会话
            user_id: 学员ID
            course_id: 课程ID
            lessons: 已查询的课时列表（可选，避免重复查询）
            settings: 业务配置（可选）

        Returns:
            CourseProgressSummary: 进度摘要
        """
        settings = settings or get_settings()
        if lessons is None:
            lessons = CourseService.get_lessons(db, course_id)
        rows = ProgressService.get_progress_rows(db, user_id, course_id)

        return ProgressAggregator.summarize(
            lessons,
            rows,
            empty_course_completed=settings.empty_course_completed
        )
