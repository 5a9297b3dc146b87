"""
报名API
"""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import List

from ..core.database import get_db
from ..models import Enrollment
from ..services import EnrollmentService


router = APIRouter(prefix="/enrollments", tags=["报名管理"])


class EnrollRequest(BaseModel):
    """报名请求"""
    course_id: int


def _enrollment_to_dict(enrollment: Enrollment) -> dict:
    return {
        "id": enrollment.id,
        "user_id": enrollment.user_id,
        "course_id": enrollment.course_id,
        "course_slug": enrollment.course.slug if enrollment.course else None,
        "status": enrollment.status,
        "enrolled_at": enrollment.enrolled_at.isoformat() if enrollment.enrolled_at else None,
    }


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
def enroll(
    request: EnrollRequest,
    user_id: str,
    db: Session = Depends(get_db)
):
    """报名课程（重复报名返回已有记录）"""
    if not user_id:
        raise HTTPException(status_code=400, detail="用户 ID 不能为空")

    try:
        enrollment = EnrollmentService.enroll(db, user_id, request.course_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return _enrollment_to_dict(enrollment)


@router.get("", response_model=List[dict])
def list_enrollments(
    user_id: str,
    db: Session = Depends(get_db)
):
    """列出学员的报名记录"""
    if not user_id:
        raise HTTPException(status_code=400, detail="用户 ID 不能为空")

    return [_enrollment_to_dict(e) for e in EnrollmentService.list_enrollments(db, user_id)]


@router.delete("/{course_id}", response_model=dict)
def cancel_enrollment(
    course_id: int,
    user_id: str,
    db: Session = Depends(get_db)
):
    """取消报名（测验需重新报名后才能继续）"""
    if not user_id:
        raise HTTPException(status_code=400, detail="用户 ID 不能为空")

    try:
        enrollment = EnrollmentService.cancel(db, user_id, course_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return _enrollment_to_dict(enrollment)
