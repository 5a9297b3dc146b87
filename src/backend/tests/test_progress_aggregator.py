"""
课程进度汇总测试
"""
from types import SimpleNamespace

import pytest

from coursehub.core.progress import ProgressAggregator, CourseProgressSummary


LESSONS = [{"id": 1}, {"id": 2}, {"id": 3}]


class TestSummarize:
    """ProgressAggregator.summarize"""

    def test_empty_course(self):
        summary = ProgressAggregator.summarize([], [{"lesson_id": 1, "completed": True}])
        assert summary.percent == 0
        assert summary.all_completed is False
        assert summary.completed_indices == frozenset()
        assert summary.next_lesson_index is None

    def test_empty_course_policy_configurable(self):
        summary = ProgressAggregator.summarize([], [], empty_course_completed=True)
        assert summary.percent == 0
        assert summary.all_completed is True

    def test_stale_rows_ignored(self):
        rows = [
            {"lesson_id": 1, "completed": True},
            {"lesson_id": 2, "completed": False},
            {"lesson_id": 99, "completed": True},
        ]
        summary = ProgressAggregator.summarize(LESSONS, rows)
        assert summary.completed_indices == {0}
        assert summary.percent == pytest.approx(100 / 3)
        assert summary.all_completed is False

    def test_indices_are_positions_not_ids(self):
        lessons = [{"id": 30}, {"id": 10}, {"id": 20}]
        rows = [{"lesson_id": 20, "completed": True}]
        summary = ProgressAggregator.summarize(lessons, rows)
        assert summary.completed_indices == {2}
        assert summary.next_lesson_index == 0

    def test_all_completed(self):
        rows = [{"lesson_id": i, "completed": True} for i in (3, 1, 2)]
        summary = ProgressAggregator.summarize(LESSONS, rows)
        assert summary.percent == 100
        assert summary.all_completed is True
        assert summary.next_lesson_index is None

    def test_duplicate_rows_counted_once(self):
        rows = [{"lesson_id": 1, "completed": True}, {"lesson_id": 1, "completed": True}]
        summary = ProgressAggregator.summarize(LESSONS, rows)
        assert summary.completed_count == 1
        assert summary.next_lesson_index == 1

    def test_accepts_objects(self):
        lessons = [SimpleNamespace(id=1), SimpleNamespace(id=2)]
        rows = [SimpleNamespace(lesson_id=2, completed=True)]
        summary = ProgressAggregator.summarize(lessons, rows)
        assert summary.completed_indices == {1}
        assert summary.percent == 50

    def test_inputs_not_mutated(self):
        lessons = list(LESSONS)
        rows = [{"lesson_id": 1, "completed": True}]
        ProgressAggregator.summarize(lessons, rows)
        assert lessons == LESSONS
        assert rows == [{"lesson_id": 1, "completed": True}]

    def test_to_dict(self):
        summary = ProgressAggregator.summarize(LESSONS, [{"lesson_id": 2, "completed": True}])
        data = summary.to_dict()
        assert data["completed_indices"] == [1]
        assert data["completed_count"] == 1
        assert data["total_lessons"] == 3
        assert data["all_completed"] is False
        assert data["next_lesson_index"] == 0


class TestSummaryDefaults:
    """CourseProgressSummary 默认值"""

    def test_default_summary(self):
        summary = CourseProgressSummary()
        assert summary.completed_count == 0
        assert summary.percent == 0.0
        assert summary.all_completed is False
