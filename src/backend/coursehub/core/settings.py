"""
业务配置模块

统一管理数据库连接以及进度与测验相关的可调策略。
配置优先级：环境变量 > 默认值
"""

import os
from dataclasses import dataclass


DEFAULT_DATABASE_URL = "sqlite:///./data/coursehub.db"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name, "").strip().lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


@dataclass
class Settings:
    """
    业务配置

    Attributes:
        database_url: 数据库连接串（SQLite 开发，PostgreSQL 生产）
        empty_course_completed: 没有任何课时的课程是否视为"已完成"
        attempt_insert_retries: 测验尝试编号冲突时的最大重试次数
        default_passing_score: 测验未单独设置及格分时使用的及格线（百分比）
    """
    database_url: str = DEFAULT_DATABASE_URL
    empty_course_completed: bool = False
    attempt_insert_retries: int = 3
    default_passing_score: float = 50.0


def get_settings() -> Settings:
    """
    从环境变量获取业务配置

    环境变量：
        DATABASE_URL: 数据库连接串（默认 SQLite 文件）
        EMPTY_COURSE_COMPLETED: 空课程是否视为已完成（默认 false）
        QUIZ_ATTEMPT_INSERT_RETRIES: 尝试编号冲突重试次数（默认 3）
        QUIZ_DEFAULT_PASSING_SCORE: 默认及格分（默认 50）

    Returns:
        Settings 配置对象

    Raises:
        ValueError: 配置值不合法
    """
    retries = int(os.getenv("QUIZ_ATTEMPT_INSERT_RETRIES", "3"))
    if retries < 1:
        raise ValueError("QUIZ_ATTEMPT_INSERT_RETRIES 必须大于等于 1")

    passing_score = float(os.getenv("QUIZ_DEFAULT_PASSING_SCORE", "50"))
    if not 0 <= passing_score <= 100:
        raise ValueError("QUIZ_DEFAULT_PASSING_SCORE 必须在 0 到 100 之间")

    return Settings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        empty_course_completed=_env_bool("EMPTY_COURSE_COMPLETED", False),
        attempt_insert_retries=retries,
        default_passing_score=passing_score,
    )
