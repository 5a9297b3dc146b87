"""
课程服务
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError
from ..core.slug import SlugCodec
from ..models import Course, Lesson, QuizQuestion, QuizSettings

logger = logging.getLogger(__name__)


class CourseService:
    """课程服务"""

    @staticmethod
    def create_course(
        db: Session,
        title: str,
        description: Optional[str] = None,
        is_published: bool = True
    ) -> Course:
        """创建课程，ID 由数据库分配"""
        course = Course(title=title, description=description, is_published=is_published)
        db.add(course)
        db.commit()
        db.refresh(course)
        logger.info(f"课程已创建: id={course.id}, slug={course.slug}")
        return course

    @staticmethod
    def get_courses(db: Session, published_only: bool = True) -> List[Course]:
        """
        获取课程列表

        Args:
            db: 数据库会话
            published_only: 是否只返回已发布的课程

        Returns:
            List[Course]: 课程列表
        """
        query = db.query(Course).filter(Course.is_deleted == False)

        if published_only:
            query = query.filter(Course.is_published == True)

        return query.order_by(Course.created_at.desc(), Course.id.desc()).all()

    @staticmethod
    def get_course_by_id(db: Session, course_id: int) -> Course:
        """
        根据ID获取课程

        Raises:
            NotFoundError: 课程不存在或已删除
        """
        if not SlugCodec.is_valid_id(course_id):
            raise NotFoundError(f"课程 {course_id} 不存在")

        course = db.query(Course).filter(
            Course.id == course_id,
            Course.is_deleted == False
        ).first()

        if not course:
            raise NotFoundError(f"课程 {course_id} 不存在")
        return course

    @staticmethod
    def get_course_by_slug(db: Session, slug: str) -> Course:
        """
        根据 slug（或纯数字ID）获取课程

        Args:
            db: 数据库会话
            slug: 形如 "python-basics-42" 或 "42"

        Returns:
            Course: 课程对象

        Raises:
            NotFoundError: slug 中无法解析出ID，或课程不存在
        """
        course_id = SlugCodec.to_id(slug)
        if course_id is None:
            logger.info(f"无法从 slug 解析课程ID: {slug}")
            raise NotFoundError(f"课程 {slug} 不存在")
        return CourseService.get_course_by_id(db, course_id)

    @staticmethod
    def get_lessons(db: Session, course_id: int) -> List[Lesson]:
        """获取课程的课时列表，按排序顺序返回"""
        return db.query(Lesson).filter(
            Lesson.course_id == course_id,
            Lesson.is_deleted == False
        ).order_by(Lesson.sort_order.asc(), Lesson.id.asc()).all()

    @staticmethod
    def get_lesson(db: Session, lesson_id: int) -> Lesson:
        """
        获取单个课时

        Raises:
            NotFoundError: 课时不存在或已删除
        """
        if not SlugCodec.is_valid_id(lesson_id):
            raise NotFoundError(f"课时 {lesson_id} 不存在")

        lesson = db.query(Lesson).filter(
            Lesson.id == lesson_id,
            Lesson.is_deleted == False
        ).first()

        if not lesson:
            raise NotFoundError(f"课时 {lesson_id} 不存在")
        return lesson

    @staticmethod
    def add_lesson(
        db: Session,
        course_id: int,
        title: str,
        lesson_type: str = "text",
        sort_order: Optional[int] = None
    ) -> Lesson:
        """
        为课程添加课时

        未指定 sort_order 时追加到末尾
        """
        CourseService.get_course_by_id(db, course_id)

        if sort_order is None:
            sort_order = len(CourseService.get_lessons(db, course_id))

        lesson = Lesson(
            course_id=course_id,
            title=title,
            lesson_type=lesson_type,
            sort_order=sort_order
        )
        db.add(lesson)
        db.commit()
        db.refresh(lesson)
        return lesson

    @staticmethod
    def delete_lesson(db: Session, lesson_id: int) -> Lesson:
        """软删除课时，已有的进度记录保留"""
        lesson = CourseService.get_lesson(db, lesson_id)
        lesson.is_deleted = True
        db.commit()
        db.refresh(lesson)
        return lesson

    @staticmethod
    def add_question(
        db: Session,
        lesson_id: int,
        question_text: str,
        options: List[str],
        correct_option: int,
        question_type: str = "multiple_choice",
        points: int = 1,
        explanation: Optional[str] = None
    ) -> QuizQuestion:
        """
        为课时添加测验题目

        Raises:
            NotFoundError: 课时不存在
            ValueError: 正确选项下标越界
        """
        lesson = CourseService.get_lesson(db, lesson_id)

        if question_type == "true_false" and not options:
            options = ["True", "False"]
        if not 0 <= correct_option < len(options):
            raise ValueError(f"正确选项下标 {correct_option} 超出选项范围")

        order_index = db.query(QuizQuestion).filter(QuizQuestion.lesson_id == lesson.id).count()
        question = QuizQuestion(
            lesson_id=lesson.id,
            question_type=question_type,
            question_text=question_text,
            options=list(options),
            correct_option=correct_option,
            points=points,
            explanation=explanation,
            order_index=order_index
        )
        db.add(question)
        db.commit()
        db.refresh(question)
        return question

    @staticmethod
    def get_questions(db: Session, lesson_id: int) -> List[QuizQuestion]:
        """获取课时的测验题目（原始顺序）"""
        return db.query(QuizQuestion).filter(
            QuizQuestion.lesson_id == lesson_id
        ).order_by(QuizQuestion.order_index.asc(), QuizQuestion.id.asc()).all()

    @staticmethod
    def get_quiz_settings(db: Session, lesson_id: int) -> Optional[QuizSettings]:
        """获取课时的测验设置，未设置时返回 None"""
        return db.query(QuizSettings).filter(QuizSettings.lesson_id == lesson_id).first()

    @staticmethod
    def save_quiz_settings(
        db: Session,
        lesson_id: int,
        max_attempts: int = 3,
        allow_multiple_attempts: bool = True,
        shuffle_quiz: bool = True,
        show_correct_answers: bool = True,
        passing_score: Optional[float] = None
    ) -> QuizSettings:
        """
        保存课时的测验设置（按课时更新插入）

        Args:
            db: 数据库会话
            lesson_id: 课时ID
            max_attempts: 最多尝试次数
            allow_multiple_attempts: 是否允许多次尝试
            shuffle_quiz: 是否打乱题目和选项顺序
            show_correct_answers: 提交后是否返回正确答案
            passing_score: 及格分（百分比），None 表示使用全局默认值

        Returns:
            QuizSettings: 保存后的设置

        Raises:
            NotFoundError: 课时不存在
            ValueError: 参数越界
        """
        lesson = CourseService.get_lesson(db, lesson_id)

        if max_attempts < 1:
            raise ValueError("最多尝试次数必须大于等于 1")
        if passing_score is not None and not 0 <= passing_score <= 100:
            raise ValueError("及格分必须在 0 到 100 之间")

        quiz_settings = CourseService.get_quiz_settings(db, lesson.id)
        if quiz_settings is None:
            quiz_settings = QuizSettings(lesson_id=lesson.id)
            db.add(quiz_settings)

        quiz_settings.max_attempts = max_attempts
        quiz_settings.allow_multiple_attempts = allow_multiple_attempts
        quiz_settings.shuffle_quiz = shuffle_quiz
        quiz_settings.show_correct_answers = show_correct_answers
        quiz_settings.passing_score = passing_score
        db.commit()
        db.refresh(quiz_settings)
        logger.info(f"测验设置已保存: lesson={lesson.id}, max_attempts={max_attempts}, shuffle={shuffle_quiz}")
        return quiz_settings
