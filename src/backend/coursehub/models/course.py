"""
课程模型
"""
from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime
from datetime import datetime

from .base import Base
from ..core.slug import SlugCodec


class Course(Base):
    """课程模型"""
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)  # 数据库分配，永不复用
    title = Column(String(200), nullable=False)  # 课程标题
    description = Column(Text)  # 课程描述
    is_published = Column(Boolean, default=True)  # 是否发布
    created_at = Column(DateTime, default=datetime.utcnow)
    is_deleted = Column(Boolean, default=False)

    @property
    def slug(self) -> str:
        return SlugCodec.encode(self.title, self.id)

    def __repr__(self):
        return f"<Course(id={self.id} title='{self.title}')>"
