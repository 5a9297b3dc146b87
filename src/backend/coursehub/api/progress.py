"""
学习进度API
"""
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.database import get_db
from ..models import LessonProgress
from ..services import ProgressService


router = APIRouter(prefix="/progress", tags=["学习进度"])


class ProgressUpdate(BaseModel):
    """进度更新请求"""
    lesson_id: int
    completed: bool = True


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if isinstance(value, datetime) else None


def _progress_to_dict(progress: LessonProgress) -> dict:
    return {
        "id": progress.id,
        "user_id": progress.user_id,
        "lesson_id": progress.lesson_id,
        "course_id": progress.course_id,
        "completed": progress.completed,
        "completed_at": _iso(progress.completed_at),
        "updated_at": _iso(progress.updated_at),
    }


@router.post("", response_model=dict)
def update_progress(
    request: ProgressUpdate,
    user_id: str,
    db: Session = Depends(get_db)
):
    """
    更新课时进度（按 学员+课时 更新插入）

    Raises:
        400: 用户 ID 为空
        404: 课时不存在
    """
    if not user_id:
        raise HTTPException(status_code=400, detail="用户 ID 不能为空")

    try:
        progress = ProgressService.set_lesson_progress(db, user_id, request.lesson_id, request.completed)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return _progress_to_dict(progress)


@router.get("", response_model=List[dict])
def get_progress(
    user_id: str,
    course_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """获取学员的课时进度记录，可按课程过滤"""
    if not user_id:
        raise HTTPException(status_code=400, detail="用户 ID 不能为空")

    rows = ProgressService.get_progress_rows(db, user_id, course_id)
    return [_progress_to_dict(p) for p in rows]
