"""
核心模块

纯计算逻辑（slug 编解码、进度汇总、测验尝试编号与乱序）
以及数据库、配置等基础设施
"""

from .slug import SlugCodec
from .progress import ProgressAggregator, CourseProgressSummary
from .quiz_order import QuizAttemptSequencer, QuizOrder

__all__ = [
    "SlugCodec",
    "ProgressAggregator",
    "CourseProgressSummary",
    "QuizAttemptSequencer",
    "QuizOrder",
]
