"""
课程进度汇总

根据课程的课时列表和学员的课时进度记录实时计算完成情况，
不依赖任何预先存储的汇总值。
"""
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Optional, Sequence


def get_field(record: Any, name: str, default: Any = None) -> Any:
    """同时支持 ORM 对象和字典"""
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


@dataclass(frozen=True)
class CourseProgressSummary:
    """课程进度摘要（派生视图，不落库）"""
    completed_indices: FrozenSet[int] = field(default_factory=frozenset)  # 已完成课时在课程中的位置（从0开始）
    percent: float = 0.0  # 完成百分比（0-100）
    all_completed: bool = False  # 是否全部完成
    total_lessons: int = 0

    @property
    def completed_count(self) -> int:
        return len(self.completed_indices)

    @property
    def next_lesson_index(self) -> Optional[int]:
        """第一个未完成课时的位置，全部完成或空课程时为 None"""
        for index in range(self.total_lessons):
            if index not in self.completed_indices:
                return index
        return None

    def to_dict(self) -> dict:
        return {
            "completed_indices": sorted(self.completed_indices),
            "completed_count": self.completed_count,
            "total_lessons": self.total_lessons,
            "percent": self.percent,
            "all_completed": self.all_completed,
            "next_lesson_index": self.next_lesson_index,
        }


class ProgressAggregator:
    """课程进度汇总器"""

    @classmethod
    def summarize(
        cls,
        lessons: Sequence[Any],
        progress_rows: Iterable[Any],
        empty_course_completed: bool = False
    ) -> CourseProgressSummary:
        """
        计算学员在一门课程中的完成情况

        Args:
            lessons: 按顺序排列的课时（需有 id）
            progress_rows: 学员的进度记录（需有 lesson_id、completed）
            empty_course_completed: 没有课时的课程是否视为已完成

        Returns:
            CourseProgressSummary: 进度摘要
        """
        positions = {}
        for index, lesson in enumerate(lessons):
            positions.setdefault(get_field(lesson, "id"), index)

        completed = set()
        for row in progress_rows:
            if not get_field(row, "completed", False):
                continue
            # 课时已被删除的进度记录直接忽略
            index = positions.get(get_field(row, "lesson_id"))
            if index is not None:
                completed.add(index)

        total = len(lessons)
        if total == 0:
            return CourseProgressSummary(
                completed_indices=frozenset(),
                percent=0.0,
                all_completed=empty_course_completed,
                total_lessons=0,
            )

        return CourseProgressSummary(
            completed_indices=frozenset(completed),
            percent=100.0 * len(completed) / total,
            all_completed=len(completed) == total,
            total_lessons=total,
        )
