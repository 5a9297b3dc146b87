"""
业务配置测试
"""
import pytest
from sqlalchemy import text

from coursehub.core.database import build_engine
from coursehub.core.settings import DEFAULT_DATABASE_URL, Settings, get_settings


class TestGetSettings:
    def test_defaults(self):
        assert get_settings() == Settings(
            database_url=DEFAULT_DATABASE_URL,
            empty_course_completed=False,
            attempt_insert_retries=3,
            default_passing_score=50.0,
        )

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("EMPTY_COURSE_COMPLETED", "true")
        monkeypatch.setenv("QUIZ_ATTEMPT_INSERT_RETRIES", "5")
        monkeypatch.setenv("QUIZ_DEFAULT_PASSING_SCORE", "80")
        monkeypatch.setenv("DATABASE_URL", "sqlite:///./data/other.db")
        settings = get_settings()
        assert settings.empty_course_completed is True
        assert settings.attempt_insert_retries == 5
        assert settings.default_passing_score == 80.0
        assert settings.database_url == "sqlite:///./data/other.db"

    def test_unknown_bool_falls_back(self, monkeypatch):
        monkeypatch.setenv("EMPTY_COURSE_COMPLETED", "maybe")
        assert get_settings().empty_course_completed is False

    def test_invalid_retries(self, monkeypatch):
        monkeypatch.setenv("QUIZ_ATTEMPT_INSERT_RETRIES", "0")
        with pytest.raises(ValueError):
            get_settings()

    def test_invalid_passing_score(self, monkeypatch):
        monkeypatch.setenv("QUIZ_DEFAULT_PASSING_SCORE", "120")
        with pytest.raises(ValueError):
            get_settings()


class TestBuildEngine:
    def test_sqlite_engine_from_url(self):
        engine = build_engine("sqlite://")
        try:
            with engine.connect() as conn:
                assert conn.execute(text("SELECT 1")).scalar() == 1
        finally:
            engine.dispose()
