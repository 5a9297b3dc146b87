"""
课时测验题目API
"""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.database import get_db
from ..core.errors import NotFoundError
from ..models import QuizSettings
from ..services import CourseService


router = APIRouter(prefix="/lessons", tags=["课时测验"])


class QuestionCreate(BaseModel):
    """添加题目请求"""
    question_text: str
    question_type: str = "multiple_choice"  # multiple_choice | true_false
    options: List[str] = []
    correct_option: int = 0
    points: int = 1
    explanation: Optional[str] = None


class QuizSettingsUpdate(BaseModel):
    """测验设置请求"""
    max_attempts: int = 3
    allow_multiple_attempts: bool = True
    shuffle_quiz: bool = True
    show_correct_answers: bool = True
    passing_score: Optional[float] = None


def _quiz_settings_to_dict(quiz_settings: QuizSettings) -> dict:
    return {
        "lesson_id": quiz_settings.lesson_id,
        "max_attempts": quiz_settings.max_attempts,
        "allow_multiple_attempts": quiz_settings.allow_multiple_attempts,
        "shuffle_quiz": quiz_settings.shuffle_quiz,
        "show_correct_answers": quiz_settings.show_correct_answers,
        "passing_score": quiz_settings.passing_score,
    }


@router.post("/{lesson_id}/questions", response_model=dict, status_code=status.HTTP_201_CREATED)
def add_question(
    lesson_id: int,
    request: QuestionCreate,
    db: Session = Depends(get_db)
):
    """为课时添加测验题目"""
    try:
        question = CourseService.add_question(
            db,
            lesson_id,
            question_text=request.question_text,
            options=request.options,
            correct_option=request.correct_option,
            question_type=request.question_type,
            points=request.points,
            explanation=request.explanation
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "id": question.id,
        "lesson_id": question.lesson_id,
        "question_type": question.question_type,
        "question_text": question.question_text,
        "options": question.options,
        "correct_option": question.correct_option,
        "points": question.points,
        "order_index": question.order_index,
    }


@router.get("/{lesson_id}/questions", response_model=List[dict])
def get_questions(
    lesson_id: int,
    db: Session = Depends(get_db)
):
    """获取课时的测验题目（原始顺序，含正确答案，供编辑使用）"""
    try:
        CourseService.get_lesson(db, lesson_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return [
        {
            "id": q.id,
            "question_type": q.question_type,
            "question_text": q.question_text,
            "options": q.options,
            "correct_option": q.correct_option,
            "points": q.points,
            "order_index": q.order_index,
        }
        for q in CourseService.get_questions(db, lesson_id)
    ]


@router.get("/{lesson_id}/quiz-settings", response_model=dict)
def get_quiz_settings(
    lesson_id: int,
    db: Session = Depends(get_db)
):
    """获取课时的测验设置，未设置时 settings 为 null（不限次数、乱序展示）"""
    try:
        CourseService.get_lesson(db, lesson_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    quiz_settings = CourseService.get_quiz_settings(db, lesson_id)
    return {"settings": _quiz_settings_to_dict(quiz_settings) if quiz_settings else None}


@router.put("/{lesson_id}/quiz-settings", response_model=dict)
def save_quiz_settings(
    lesson_id: int,
    request: QuizSettingsUpdate,
    db: Session = Depends(get_db)
):
    """保存课时的测验设置"""
    try:
        quiz_settings = CourseService.save_quiz_settings(db, lesson_id, **request.model_dump())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _quiz_settings_to_dict(quiz_settings)
