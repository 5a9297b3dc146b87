"""
课时模型 - 课程下的有序课时
"""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey
from datetime import datetime

from .base import Base


class Lesson(Base):
    """课时模型"""

    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    course_id = Column(Integer, ForeignKey('courses.id'), nullable=False, index=True)  # 所属课程ID
    title = Column(String(200), nullable=False)  # 课时标题
    lesson_type = Column(String(20), default="text")  # video | text | quiz
    sort_order = Column(Integer, default=0)  # 课时排序
    created_at = Column(DateTime, default=datetime.utcnow)
    is_deleted = Column(Boolean, default=False)

    def __repr__(self):
        return f"<Lesson(id={self.id} title='{self.title}' course_id={self.course_id})>"
