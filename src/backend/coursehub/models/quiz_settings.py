"""
测验设置模型
每个测验课时最多一条，没有记录时按不限次数、乱序展示处理
"""
from sqlalchemy import Column, Integer, Float, Boolean, DateTime, ForeignKey
from datetime import datetime

from .base import Base


class QuizSettings(Base):
    """课时测验设置"""
    __tablename__ = "quiz_settings"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    lesson_id = Column(Integer, ForeignKey('lessons.id'), nullable=False, unique=True, index=True)
    max_attempts = Column(Integer, default=3)  # 最多尝试次数
    allow_multiple_attempts = Column(Boolean, default=True)  # False 时只能尝试一次
    shuffle_quiz = Column(Boolean, default=True)  # 是否打乱题目和选项顺序
    show_correct_answers = Column(Boolean, default=True)  # 提交后是否返回正确答案和解析
    passing_score = Column(Float, nullable=True)  # 及格分（百分比），为空时使用全局默认值
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def attempt_limit(self) -> int:
        return self.max_attempts if self.allow_multiple_attempts else 1

    def __repr__(self):
        return f"<QuizSettings(lesson={self.lesson_id} max_attempts={self.max_attempts} shuffle={self.shuffle_quiz})>"
