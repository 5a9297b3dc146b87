"""
测验尝试服务
负责尝试编号、乱序持久化和统一判分
"""
import uuid
import logging
from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import (
    AttemptAlreadyCompletedError,
    AttemptConflictError,
    AttemptLimitReachedError,
    NotEnrolledError,
    NotFoundError,
)
from ..core.quiz_order import QuizAttemptSequencer, map_answer_to_original
from ..core.settings import Settings, get_settings
from ..models import QuizAttempt, QuizSettings
from .course_service import CourseService
from .enrollment_service import EnrollmentService
from .progress_service import ProgressService

logger = logging.getLogger(__name__)


class QuizAttemptService:
    """测验尝试服务"""

    @staticmethod
    def get_latest_attempt(
        db: Session,
        user_id: str,
        lesson_id: int,
        course_id: int
    ) -> Optional[QuizAttempt]:
        """获取 (学员, 课时, 课程) 最近一次尝试，按编号倒序取第一条"""
        return db.query(QuizAttempt).filter(
            QuizAttempt.user_id == user_id,
            QuizAttempt.lesson_id == lesson_id,
            QuizAttempt.course_id == course_id
        ).order_by(QuizAttempt.attempt_number.desc()).first()

    @staticmethod
    def list_attempts(
        db: Session,
        user_id: str,
        lesson_id: int,
        course_id: int
    ) -> List[QuizAttempt]:
        """获取 (学员, 课时, 课程) 的全部尝试记录，按编号正序"""
        return db.query(QuizAttempt).filter(
            QuizAttempt.user_id == user_id,
            QuizAttempt.lesson_id == lesson_id,
            QuizAttempt.course_id == course_id
        ).order_by(QuizAttempt.attempt_number.asc()).all()

    @staticmethod
    def attempt_limit(quiz_settings: Optional[QuizSettings]) -> Optional[int]:
        """课时允许的最多尝试次数，未设置测验设置时不限次数（None）"""
        if quiz_settings is None:
            return None
        return quiz_settings.attempt_limit

    @staticmethod
    def start_attempt(
        db: Session,
        user_id: str,
        course_id: int,
        lesson_id: int,
        sequencer: Optional[QuizAttemptSequencer] = None,
        settings: Optional[Settings] = None
    ) -> QuizAttempt:
        """
        开始一次新的测验尝试

        读取最近一次尝试并计算下一个编号，写入时由唯一约束兜底；
        发生编号冲突时回滚并重新读取，最多重试 attempt_insert_retries 次。
        课时设置了测验设置时，超过尝试次数上限的请求会被拒绝，
        关闭乱序时按原始顺序展示。

        Args:
            db: 数据库会话
            user_id: 学员ID
            course_id: 课程ID
            lesson_id: 课时ID
            sequencer: 编号与乱序生成器（可选，测试时注入）
            settings: 业务配置（可选）

        Returns:
            QuizAttempt: 新建的尝试（未完成状态）

        Raises:
            NotFoundError: 课程或课时不存在，或课时不属于该课程
            NotEnrolledError: 学员未报名该课程
            AttemptLimitReachedError: 尝试次数已用完
            AttemptConflictError: 重试耗尽仍然编号冲突
        """
        settings = settings or get_settings()
        sequencer = sequencer or QuizAttemptSequencer()

        CourseService.get_course_by_id(db, course_id)
        lesson = CourseService.get_lesson(db, lesson_id)
        if lesson.course_id != course_id:
            raise NotFoundError(f"课时 {lesson_id} 不属于课程 {course_id}")

        if not EnrollmentService.is_enrolled(db, user_id, course_id):
            raise NotEnrolledError("报名课程后才能参加测验")

        questions = CourseService.get_questions(db, lesson_id)
        quiz_settings = CourseService.get_quiz_settings(db, lesson_id)
        limit = QuizAttemptService.attempt_limit(quiz_settings)
        shuffle = quiz_settings is None or quiz_settings.shuffle_quiz

        for retry in range(settings.attempt_insert_retries):
            last_attempt = QuizAttemptService.get_latest_attempt(db, user_id, lesson_id, course_id)
            attempt_number = sequencer.next_attempt_number(last_attempt)
            if limit is not None and attempt_number > limit:
                logger.info(f"测验尝试次数已用完: user={user_id}, lesson={lesson_id}, limit={limit}")
                raise AttemptLimitReachedError(f"该测验最多允许尝试 {limit} 次")

            if shuffle:
                order = sequencer.generate_order(questions)
            else:
                order = sequencer.original_order(questions)

            attempt = QuizAttempt(
                id=str(uuid.uuid4()),
                user_id=user_id,
                lesson_id=lesson_id,
                course_id=course_id,
                attempt_number=attempt_number,
                question_order=order.question_order,
                answer_orders=order.answer_orders,
                created_at=datetime.utcnow()
            )
            db.add(attempt)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.warning(
                    f"测验尝试编号冲突，重新读取: user={user_id}, lesson={lesson_id}, "
                    f"number={attempt_number}, retry={retry + 1}"
                )
                continue

            db.refresh(attempt)
            logger.info(
                f"测验尝试已创建: user={user_id}, course={course_id}, "
                f"lesson={lesson_id}, number={attempt_number}"
            )
            return attempt

        logger.error(f"测验尝试创建失败，重试耗尽: user={user_id}, lesson={lesson_id}")
        raise AttemptConflictError("测验尝试创建冲突，请稍后重试")

    @staticmethod
    def get_attempt(db: Session, user_id: str, attempt_id: str) -> QuizAttempt:
        """
        获取学员自己的某次尝试

        Raises:
            NotFoundError: 尝试不存在或不属于该学员
        """
        attempt = db.query(QuizAttempt).filter(
            QuizAttempt.id == attempt_id,
            QuizAttempt.user_id == user_id
        ).first()

        if not attempt:
            raise NotFoundError(f"测验尝试 {attempt_id} 不存在")
        return attempt

    @staticmethod
    def get_presented_questions(db: Session, attempt: QuizAttempt) -> List[dict]:
        """
        按尝试记录的顺序返回题目，选项也按乱序展示（不含正确答案）
        """
        questions = {q.id: q for q in CourseService.get_questions(db, attempt.lesson_id)}
        answer_orders = attempt.answer_orders or {}

        result = []
        for question_id in attempt.question_order or []:
            question = questions.get(question_id)
            if question is None:
                # 题目在尝试创建后被删除
                continue
            options = question.options or []
            order = answer_orders.get(str(question_id)) or list(range(len(options)))
            result.append({
                "id": question.id,
                "question_type": question.question_type,
                "question_text": question.question_text,
                "options": [options[i] for i in order if 0 <= i < len(options)],
                "points": question.points,
            })
        return result

    @staticmethod
    def submit_attempt(
        db: Session,
        user_id: str,
        attempt_id: str,
        answers: Dict[int, int],
        settings: Optional[Settings] = None
    ) -> dict:
        """
        提交尝试并统一判分

        得分达到及格线时自动把该课时标记为已完成；
        测验设置关闭了 show_correct_answers 时结果中不含正确答案和解析。

        Args:
            db: 数据库会话
            user_id: 学员ID
            attempt_id: 尝试ID
            answers: 题目ID -> 学员选择的展示位置下标
            settings: 业务配置（可选，提供默认及格分）

        Returns:
            dict: 判分结果（含 passed 和 passing_score）

        Raises:
            NotFoundError: 尝试不存在
            AttemptAlreadyCompletedError: 尝试已提交过
        """
        settings = settings or get_settings()
        attempt = QuizAttemptService.get_attempt(db, user_id, attempt_id)
        if attempt.completed_at is not None:
            raise AttemptAlreadyCompletedError(f"测验尝试 {attempt_id} 已提交")

        questions = {q.id: q for q in CourseService.get_questions(db, attempt.lesson_id)}
        answer_orders = attempt.answer_orders or {}
        quiz_settings = CourseService.get_quiz_settings(db, attempt.lesson_id)
        show_answers = quiz_settings is None or quiz_settings.show_correct_answers
        passing_score = settings.default_passing_score
        if quiz_settings is not None and quiz_settings.passing_score is not None:
            passing_score = quiz_settings.passing_score

        results = []
        correct = 0
        total_points = 0
        points_earned = 0

        for question_id in attempt.question_order or []:
            question = questions.get(question_id)
            if question is None:
                continue

            selected = answers.get(question_id)
            original = None
            if selected is not None:
                original = map_answer_to_original(selected, answer_orders.get(str(question_id), []))
            is_correct = original is not None and original == question.correct_option

            points = question.points or 1
            total_points += points
            if is_correct:
                correct += 1
                points_earned += points

            result = {
                "question_id": question_id,
                "selected_index": selected,
                "original_index": original,
                "is_correct": is_correct,
            }
            if show_answers:
                result["correct_option"] = question.correct_option
                result["explanation"] = question.explanation
            results.append(result)

        score = round(points_earned / total_points * 100, 2) if total_points > 0 else 0.0
        passed = score >= passing_score
        completed_at = datetime.utcnow()

        # 条件更新保证 completed_at 只会被写入一次
        updated = db.query(QuizAttempt).filter(
            QuizAttempt.id == attempt_id,
            QuizAttempt.completed_at.is_(None)
        ).update({"completed_at": completed_at, "score": score}, synchronize_session=False)

        if updated == 0:
            db.rollback()
            raise AttemptAlreadyCompletedError(f"测验尝试 {attempt_id} 已提交")

        db.commit()
        db.refresh(attempt)
        logger.info(
            f"测验尝试已提交: attempt={attempt_id}, number={attempt.attempt_number}, "
            f"score={score}, passed={passed}"
        )

        if passed:
            try:
                ProgressService.set_lesson_progress(db, user_id, attempt.lesson_id, True)
            except NotFoundError:
                # 课时在尝试创建后被删除，成绩照常保留
                logger.warning(f"课时已删除，跳过完成标记: lesson={attempt.lesson_id}")

        return {
            "attempt_id": attempt.id,
            "attempt_number": attempt.attempt_number,
            "total": len(results),
            "correct": correct,
            "wrong": len(results) - correct,
            "total_points": total_points,
            "points_earned": points_earned,
            "score": score,
            "passing_score": passing_score,
            "passed": passed,
            "completed_at": attempt.completed_at.isoformat() if attempt.completed_at else None,
            "answers": results,
        }
