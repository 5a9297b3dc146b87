"""
测验题目模型
"""
from sqlalchemy import Column, String, Integer, Text, JSON, ForeignKey

from .base import Base


class QuizQuestion(Base):
    """测验题目模型（选择题 / 判断题）"""
    __tablename__ = "quiz_questions"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    lesson_id = Column(Integer, ForeignKey('lessons.id'), nullable=False, index=True)
    question_type = Column(String(20), default="multiple_choice")  # multiple_choice | true_false
    question_text = Column(Text, nullable=False)
    options = Column(JSON, nullable=False, default=list)  # ["选项A", "选项B", ...]
    correct_option = Column(Integer, nullable=False, default=0)  # 正确选项的原始下标
    explanation = Column(Text, nullable=True)
    points = Column(Integer, default=1)
    order_index = Column(Integer, default=0)

    def __repr__(self):
        return f"<QuizQuestion(id={self.id} type='{self.question_type}' text='{self.question_text[:30]}...')>"
