"""
测验尝试API路由
开始尝试（编号 + 乱序）和统一判分
"""
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..core.errors import (
    AttemptAlreadyCompletedError,
    AttemptConflictError,
    AttemptLimitReachedError,
    NotEnrolledError,
)
from ..models import QuizAttempt
from ..services import CourseService, QuizAttemptService


router = APIRouter(prefix="/courses", tags=["测验尝试"])


# Schemas
class StartAttemptRequest(BaseModel):
    """开始尝试请求"""
    lesson_id: int


class SubmitAttemptRequest(BaseModel):
    """提交尝试请求：题目ID -> 选择的展示位置下标"""
    answers: Dict[int, int]


class AttemptInfoResponse(BaseModel):
    """尝试信息响应"""
    id: str
    user_id: str
    course_id: int
    lesson_id: int
    attempt_number: int
    question_order: List[int]
    answer_orders: Dict[str, List[int]]
    status: str
    score: Optional[float] = None
    created_at: Optional[str] = None
    completed_at: Optional[str] = None


def _attempt_info(attempt: QuizAttempt) -> AttemptInfoResponse:
    return AttemptInfoResponse(
        id=attempt.id,
        user_id=attempt.user_id,
        course_id=attempt.course_id,
        lesson_id=attempt.lesson_id,
        attempt_number=attempt.attempt_number,
        question_order=attempt.question_order or [],
        answer_orders=attempt.answer_orders or {},
        status=attempt.status,
        score=attempt.score,
        created_at=attempt.created_at.isoformat() if attempt.created_at else None,
        completed_at=attempt.completed_at.isoformat() if attempt.completed_at else None
    )


def _require_user(user_id: str) -> None:
    if not user_id:
        raise HTTPException(status_code=400, detail="用户 ID 不能为空")


def _resolve_course_id(db: Session, slug: str) -> int:
    try:
        return CourseService.get_course_by_slug(db, slug).id
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _resolve_lesson_id(db: Session, course_id: int, lesson_id: int) -> int:
    try:
        lesson = CourseService.get_lesson(db, lesson_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if lesson.course_id != course_id:
        raise HTTPException(status_code=404, detail=f"课时 {lesson_id} 不存在")
    return lesson.id


# Endpoints
@router.get("/{slug}/quiz-attempts", response_model=dict)
def get_latest_attempt(
    slug: str,
    lesson_id: int,
    user_id: str,
    db: Session = Depends(get_db)
):
    """
    获取最近一次尝试（没有时 attempt 为 null，attempt_number 为 0）

    max_attempts 为 null 表示该测验不限次数
    """
    _require_user(user_id)
    course_id = _resolve_course_id(db, slug)
    lesson_id = _resolve_lesson_id(db, course_id, lesson_id)

    attempt = QuizAttemptService.get_latest_attempt(db, user_id, lesson_id, course_id)
    limit = QuizAttemptService.attempt_limit(CourseService.get_quiz_settings(db, lesson_id))
    return {
        "attempt": _attempt_info(attempt).model_dump() if attempt else None,
        "attempt_number": attempt.attempt_number if attempt else 0,
        "max_attempts": limit,
    }


@router.get("/{slug}/quiz-attempts/history", response_model=List[AttemptInfoResponse])
def get_attempt_history(
    slug: str,
    lesson_id: int,
    user_id: str,
    db: Session = Depends(get_db)
):
    """获取学员在某个测验课时的全部尝试记录（按编号正序）"""
    _require_user(user_id)
    course_id = _resolve_course_id(db, slug)
    lesson_id = _resolve_lesson_id(db, course_id, lesson_id)

    attempts = QuizAttemptService.list_attempts(db, user_id, lesson_id, course_id)
    return [_attempt_info(a) for a in attempts]


@router.post("/{slug}/quiz-attempts", response_model=dict, status_code=status.HTTP_201_CREATED)
def start_attempt(
    slug: str,
    request: StartAttemptRequest,
    user_id: str,
    db: Session = Depends(get_db)
):
    """开始新的测验尝试，返回尝试信息和按乱序排列的题目"""
    _require_user(user_id)
    course_id = _resolve_course_id(db, slug)
    try:
        attempt = QuizAttemptService.start_attempt(db, user_id, course_id, request.lesson_id)
    except NotEnrolledError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except (AttemptConflictError, AttemptLimitReachedError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        "attempt": _attempt_info(attempt).model_dump(),
        "questions": QuizAttemptService.get_presented_questions(db, attempt),
    }


@router.get("/{slug}/quiz-attempts/{attempt_id}", response_model=dict)
def get_attempt(
    slug: str,
    attempt_id: str,
    user_id: str,
    db: Session = Depends(get_db)
):
    """获取某次尝试及其题目（按该次尝试的顺序）"""
    _require_user(user_id)
    course_id = _resolve_course_id(db, slug)
    try:
        attempt = QuizAttemptService.get_attempt(db, user_id, attempt_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if attempt.course_id != course_id:
        raise HTTPException(status_code=404, detail=f"测验尝试 {attempt_id} 不存在")

    return {
        "attempt": _attempt_info(attempt).model_dump(),
        "questions": QuizAttemptService.get_presented_questions(db, attempt),
    }


@router.post("/{slug}/quiz-attempts/{attempt_id}/submit", response_model=dict)
def submit_attempt(
    slug: str,
    attempt_id: str,
    request: SubmitAttemptRequest,
    user_id: str,
    db: Session = Depends(get_db)
):
    """提交尝试（统一判分，只能提交一次；及格时课时自动标记为完成）"""
    _require_user(user_id)
    course_id = _resolve_course_id(db, slug)
    try:
        attempt = QuizAttemptService.get_attempt(db, user_id, attempt_id)
        if attempt.course_id != course_id:
            raise HTTPException(status_code=404, detail=f"测验尝试 {attempt_id} 不存在")
        return QuizAttemptService.submit_attempt(db, user_id, attempt_id, request.answers)
    except AttemptAlreadyCompletedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
