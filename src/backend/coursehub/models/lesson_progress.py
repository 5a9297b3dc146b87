"""
课时进度模型
每个 (学员, 课时) 最多一条记录，只更新不删除
"""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint
from datetime import datetime

from .base import Base


class LessonProgress(Base):
    """课时进度模型"""
    __tablename__ = "lesson_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_lesson_progress_user_lesson"),
    )

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)  # 学员ID（外部认证服务分配）
    lesson_id = Column(Integer, ForeignKey('lessons.id'), nullable=False, index=True)
    course_id = Column(Integer, nullable=False, index=True)  # 冗余字段，便于按课程查询
    completed = Column(Boolean, default=False)
    completed_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<LessonProgress(user='{self.user_id}' lesson={self.lesson_id} completed={self.completed})>"
