"""
报名服务
"""
import uuid
import logging
from datetime import datetime
from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError
from ..models import Enrollment
from .course_service import CourseService

logger = logging.getLogger(__name__)


class EnrollmentService:
    """报名服务"""

    @staticmethod
    def get_enrollment(db: Session, user_id: str, course_id: int):
        return db.query(Enrollment).filter(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id
        ).first()

    @staticmethod
    def enroll(db: Session, user_id: str, course_id: int) -> Enrollment:
        """
        报名课程（幂等，已取消的报名会被重新激活）

        Raises:
            NotFoundError: 课程不存在
        """
        CourseService.get_course_by_id(db, course_id)

        enrollment = EnrollmentService.get_enrollment(db, user_id, course_id)
        if enrollment:
            if enrollment.status != "active":
                enrollment.status = "active"
                enrollment.enrolled_at = datetime.utcnow()
                db.commit()
                db.refresh(enrollment)
            return enrollment

        enrollment = Enrollment(
            id=str(uuid.uuid4()),
            user_id=user_id,
            course_id=course_id,
            status="active",
            enrolled_at=datetime.utcnow()
        )
        db.add(enrollment)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(f"报名记录并发插入: user={user_id}, course={course_id}")
            enrollment = EnrollmentService.get_enrollment(db, user_id, course_id)
            if enrollment is None:
                raise
            return enrollment

        db.refresh(enrollment)
        logger.info(f"学员已报名: user={user_id}, course={course_id}")
        return enrollment

    @staticmethod
    def cancel(db: Session, user_id: str, course_id: int) -> Enrollment:
        """
        取消报名（保留记录，再次报名时重新激活）

        Raises:
            NotFoundError: 没有有效的报名记录
        """
        CourseService.get_course_by_id(db, course_id)

        enrollment = EnrollmentService.get_enrollment(db, user_id, course_id)
        if enrollment is None or enrollment.status != "active":
            raise NotFoundError(f"学员未报名课程 {course_id}")

        enrollment.status = "cancelled"
        db.commit()
        db.refresh(enrollment)
        logger.info(f"学员已取消报名: user={user_id}, course={course_id}")
        return enrollment

    @staticmethod
    def is_enrolled(db: Session, user_id: str, course_id: int) -> bool:
        enrollment = EnrollmentService.get_enrollment(db, user_id, course_id)
        return enrollment is not None and enrollment.status == "active"

    @staticmethod
    def list_enrollments(db: Session, user_id: str) -> List[Enrollment]:
        """列出学员的所有有效报名"""
        return db.query(Enrollment).filter(
            Enrollment.user_id == user_id,
            Enrollment.status == "active"
        ).order_by(Enrollment.enrolled_at.desc()).all()
