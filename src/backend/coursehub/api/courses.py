"""
课程管理API
"""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.database import get_db
from ..models import Course
from ..services import CourseService, ProgressService


router = APIRouter(prefix="/courses", tags=["课程管理"])


# 请求模型
class CourseCreate(BaseModel):
    """创建课程请求"""
    title: str
    description: Optional[str] = None
    is_published: bool = True


class LessonCreate(BaseModel):
    """添加课时请求"""
    title: str
    lesson_type: str = "text"  # video | text | quiz
    sort_order: Optional[int] = None


def _course_to_dict(course: Course) -> dict:
    return {
        "id": course.id,
        "slug": course.slug,
        "title": course.title,
        "description": course.description,
        "is_published": course.is_published,
        "created_at": course.created_at.isoformat() if course.created_at else None,
    }


@router.get("", response_model=List[dict])
def get_courses(
    published_only: bool = True,
    db: Session = Depends(get_db)
):
    """
    获取课程列表

    Args:
        published_only: 是否只返回已发布的课程（默认True）
        db: 数据库会话

    Returns:
        List[dict]: 课程列表（含 slug）
    """
    courses = CourseService.get_courses(db, published_only)
    return [_course_to_dict(c) for c in courses]


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
def create_course(
    request: CourseCreate,
    db: Session = Depends(get_db)
):
    """创建课程"""
    if not request.title.strip():
        raise HTTPException(status_code=400, detail="课程标题不能为空")

    course = CourseService.create_course(
        db,
        title=request.title,
        description=request.description,
        is_published=request.is_published
    )
    return _course_to_dict(course)


@router.get("/{slug}", response_model=dict)
def get_course(
    slug: str,
    user_id: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    获取课程详情，如果提供了用户 ID，则同时返回课程进度摘要

    Args:
        slug: 课程 slug（如 "python-basics-42"）或纯数字ID
        user_id: 用户 ID（可选）
        db: 数据库会话

    Returns:
        dict: 课程详情

    Raises:
        404: slug 无法解析或课程不存在
    """
    try:
        course = CourseService.get_course_by_slug(db, slug)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    lessons = CourseService.get_lessons(db, course.id)
    result = _course_to_dict(course)
    result["lessons"] = [
        {
            "id": lesson.id,
            "title": lesson.title,
            "lesson_type": lesson.lesson_type,
            "sort_order": lesson.sort_order,
        }
        for lesson in lessons
    ]

    if user_id:
        summary = ProgressService.get_course_summary(db, user_id, course.id, lessons=lessons)
        result["progress"] = summary.to_dict()

    return result


@router.post("/{slug}/lessons", response_model=dict, status_code=status.HTTP_201_CREATED)
def add_lesson(
    slug: str,
    request: LessonCreate,
    db: Session = Depends(get_db)
):
    """为课程添加课时"""
    try:
        course = CourseService.get_course_by_slug(db, slug)
        lesson = CourseService.add_lesson(
            db,
            course.id,
            title=request.title,
            lesson_type=request.lesson_type,
            sort_order=request.sort_order
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        "id": lesson.id,
        "course_id": lesson.course_id,
        "title": lesson.title,
        "lesson_type": lesson.lesson_type,
        "sort_order": lesson.sort_order,
    }


@router.delete("/{slug}/lessons/{lesson_id}", response_model=dict)
def delete_lesson(
    slug: str,
    lesson_id: int,
    db: Session = Depends(get_db)
):
    """删除课时（软删除，学员已有的进度记录不会再计入课程进度）"""
    try:
        course = CourseService.get_course_by_slug(db, slug)
        lesson = CourseService.get_lesson(db, lesson_id)
        if lesson.course_id != course.id:
            raise HTTPException(status_code=404, detail=f"课时 {lesson_id} 不存在")
        CourseService.delete_lesson(db, lesson_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"id": lesson_id, "deleted": True}
