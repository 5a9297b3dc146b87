"""
Pytest 配置和通用 Fixtures

提供内存 SQLite 数据库会话、FastAPI 测试客户端和示例课程数据
"""
import os
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from coursehub.core.database import get_db
from coursehub.models import Base
from coursehub.services import CourseService, EnrollmentService


LEARNER_ID = "learner-0001"


# ==================== 数据库 ====================

@pytest.fixture
def engine():
    """每个测试独立的内存数据库"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """创建数据库会话"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_policy_env(monkeypatch):
    """避免外部环境变量影响业务配置"""
    monkeypatch.delenv("EMPTY_COURSE_COMPLETED", raising=False)
    monkeypatch.delenv("QUIZ_ATTEMPT_INSERT_RETRIES", raising=False)
    monkeypatch.delenv("QUIZ_DEFAULT_PASSING_SCORE", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)


# ==================== API 客户端 ====================

@pytest.fixture
def client(session_factory):
    """FastAPI 测试客户端，数据库依赖替换为内存数据库"""
    from main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ==================== 测试数据 ====================

@pytest.fixture
def sample_course(db_session):
    """
    示例课程：3 个课时，最后一个为测验课时（3 道题）

    Returns:
        dict: course / lessons / questions
    """
    course = CourseService.create_course(db_session, title="Python Basics 101", description="入门课程")
    lessons = [
        CourseService.add_lesson(db_session, course.id, "Variables", lesson_type="text"),
        CourseService.add_lesson(db_session, course.id, "Functions", lesson_type="video"),
        CourseService.add_lesson(db_session, course.id, "Quiz", lesson_type="quiz"),
    ]
    quiz_lesson = lessons[2]
    questions = [
        CourseService.add_question(
            db_session, quiz_lesson.id, "2 + 2 = ?", ["3", "4", "5", "22"], correct_option=1
        ),
        CourseService.add_question(
            db_session, quiz_lesson.id, "Python 是解释型语言", [], correct_option=0,
            question_type="true_false"
        ),
        CourseService.add_question(
            db_session, quiz_lesson.id, "len('abc') = ?", ["1", "2", "3"], correct_option=2, points=2
        ),
    ]
    return {"course": course, "lessons": lessons, "questions": questions}


@pytest.fixture
def enrolled_learner(db_session, sample_course):
    """已报名示例课程的学员ID"""
    EnrollmentService.enroll(db_session, LEARNER_ID, sample_course["course"].id)
    return LEARNER_ID
