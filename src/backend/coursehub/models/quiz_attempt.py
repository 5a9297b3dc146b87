"""
测验尝试模型
记录每次尝试的编号、题目顺序和选项顺序
"""
from sqlalchemy import Column, String, Integer, Float, DateTime, JSON, UniqueConstraint
from datetime import datetime

from .base import Base


class QuizAttempt(Base):
    """测验尝试模型"""
    __tablename__ = "quiz_attempts"
    __table_args__ = (
        # 并发创建时由唯一约束保证编号不重复
        UniqueConstraint(
            "user_id", "lesson_id", "course_id", "attempt_number",
            name="uq_quiz_attempt_number"
        ),
    )

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    lesson_id = Column(Integer, nullable=False, index=True)
    course_id = Column(Integer, nullable=False, index=True)
    attempt_number = Column(Integer, nullable=False)  # 从1开始递增
    question_order = Column(JSON, default=list)  # 展示顺序的题目ID
    answer_orders = Column(JSON, default=dict)  # 题目ID -> 选项原始下标的展示顺序
    score = Column(Float, nullable=True)  # 得分百分比，提交后写入
    created_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)  # 只能从空变为有值一次

    @property
    def status(self) -> str:
        return "completed" if self.completed_at else "created"

    def __repr__(self):
        return f"<QuizAttempt(user='{self.user_id}' lesson={self.lesson_id} number={self.attempt_number} status={self.status})>"
