"""
报名模型
"""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime

from .base import Base


class Enrollment(Base):
    """课程报名记录"""
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),
    )

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    status = Column(String(20), default="active")  # active | cancelled
    enrolled_at = Column(DateTime, default=datetime.utcnow)

    # 关系
    course = relationship("Course")

    def __repr__(self):
        return f"<Enrollment(user='{self.user_id}' course={self.course_id} status={self.status})>"
