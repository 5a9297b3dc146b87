"""
测验尝试编号与题目乱序

每次测验尝试按 (学员, 课时, 课程) 递增编号，
并为题目顺序和每道题的选项顺序生成独立的随机排列。
"""
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .progress import get_field


# 操作系统熵源，不依赖时间戳播种
_system_random = random.SystemRandom()


@dataclass
class QuizOrder:
    """一次尝试的题目与选项展示顺序"""
    question_order: List[Any] = field(default_factory=list)  # 按展示顺序排列的题目ID
    answer_orders: Dict[str, List[int]] = field(default_factory=dict)  # 题目ID -> 原始选项下标的展示顺序


class QuizAttemptSequencer:
    """测验尝试编号与乱序生成器"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or _system_random

    @staticmethod
    def next_attempt_number(last_attempt: Optional[Any]) -> int:
        """
        计算下一次尝试的编号

        Args:
            last_attempt: 最近一次尝试（按 attempt_number 倒序取第一条），没有则为 None

        Returns:
            int: 第一次为 1，否则为上一次编号 + 1
        """
        if last_attempt is None:
            return 1
        return int(get_field(last_attempt, "attempt_number")) + 1

    def permutation(self, size: int) -> List[int]:
        """返回 0..size-1 的一个随机排列"""
        order = list(range(size))
        self.rng.shuffle(order)
        return order

    def generate_order(self, questions: Sequence[Any]) -> QuizOrder:
        """
        生成题目顺序和每道题的选项顺序

        Args:
            questions: 题目列表（需有 id 和 options）

        Returns:
            QuizOrder: 空题目列表返回空顺序
        """
        if not questions:
            return QuizOrder()

        question_order = [
            get_field(questions[index], "id") for index in self.permutation(len(questions))
        ]
        answer_orders = {
            str(get_field(question, "id")): self.permutation(len(get_field(question, "options") or []))
            for question in questions
        }
        return QuizOrder(question_order=question_order, answer_orders=answer_orders)

    @staticmethod
    def original_order(questions: Sequence[Any]) -> QuizOrder:
        """不打乱时使用的原始顺序（选项顺序为恒等排列）"""
        return QuizOrder(
            question_order=[get_field(question, "id") for question in questions],
            answer_orders={
                str(get_field(question, "id")): list(range(len(get_field(question, "options") or [])))
                for question in questions
            },
        )


def map_answer_to_original(shuffled_index: int, answer_order: Sequence[int]) -> int:
    """将展示位置的选项下标还原为原始下标"""
    if not answer_order:
        return shuffled_index
    if 0 <= shuffled_index < len(answer_order):
        return answer_order[shuffled_index]
    return shuffled_index


def map_answer_to_shuffled(original_index: int, answer_order: Sequence[int]) -> int:
    """将原始选项下标转换为展示位置，不存在时返回 -1"""
    if not answer_order:
        return original_index
    try:
        return list(answer_order).index(original_index)
    except ValueError:
        return -1
