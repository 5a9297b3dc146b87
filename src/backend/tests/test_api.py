"""
API 端点测试

通过 TestClient 走完整流程：创建课程 -> 报名 -> 进度 -> 测验尝试
"""
import pytest

from coursehub.core.quiz_order import map_answer_to_shuffled


USER = "learner-api"


@pytest.fixture
def course(client):
    """通过 API 创建一门含 2 个课时、1 道测验题的课程"""
    response = client.post("/api/courses", json={"title": "Course 2", "description": "slug 以数字结尾"})
    assert response.status_code == 201
    data = response.json()

    slug = data["slug"]
    intro = client.post(f"/api/courses/{slug}/lessons", json={"title": "Intro"}).json()
    quiz = client.post(f"/api/courses/{slug}/lessons", json={"title": "Check", "lesson_type": "quiz"}).json()
    question = client.post(
        f"/api/lessons/{quiz['id']}/questions",
        json={"question_text": "1 + 1 = ?", "options": ["1", "2", "3"], "correct_option": 1},
    ).json()

    return {"id": data["id"], "slug": slug, "intro": intro, "quiz": quiz, "question": question}


class TestHealth:
    def test_root_and_health(self, client):
        assert client.get("/").status_code == 200
        assert client.get("/health").json()["status"] == "healthy"


class TestCoursesAPI:
    """课程与 slug 路由"""

    def test_slug_format(self, course):
        assert course["slug"] == f"course-2-{course['id']}"

    def test_get_by_slug_and_bare_id(self, client, course):
        by_slug = client.get(f"/api/courses/{course['slug']}")
        by_id = client.get(f"/api/courses/{course['id']}")
        assert by_slug.status_code == 200
        assert by_id.status_code == 200
        assert by_slug.json()["id"] == by_id.json()["id"] == course["id"]
        assert [l["title"] for l in by_slug.json()["lessons"]] == ["Intro", "Check"]

    def test_unparseable_slug_is_404(self, client, course):
        response = client.get("/api/courses/no-id-here")
        assert response.status_code == 404

    def test_unknown_id_is_404(self, client, course):
        assert client.get("/api/courses/missing-9999").status_code == 404

    def test_id_beyond_integer_range_is_404(self, client, course):
        assert client.get("/api/courses/python-99999999999999999999").status_code == 404
        assert client.get("/api/courses/99999999999999999999").status_code == 404

    def test_list_courses(self, client, course):
        courses = client.get("/api/courses").json()
        assert [c["slug"] for c in courses] == [course["slug"]]

    def test_blank_title_rejected(self, client):
        assert client.post("/api/courses", json={"title": "   "}).status_code == 400

    def test_progress_included_for_user(self, client, course):
        client.post(f"/api/progress?user_id={USER}", json={"lesson_id": course["quiz"]["id"], "completed": True})

        data = client.get(f"/api/courses/{course['slug']}", params={"user_id": USER}).json()
        assert data["progress"]["completed_indices"] == [1]
        assert data["progress"]["percent"] == 50
        assert data["progress"]["all_completed"] is False
        assert data["progress"]["next_lesson_index"] == 0

    def test_no_progress_without_user(self, client, course):
        assert "progress" not in client.get(f"/api/courses/{course['slug']}").json()

    def test_delete_lesson_drops_it_from_progress(self, client, course):
        for lesson in (course["intro"], course["quiz"]):
            client.post(f"/api/progress?user_id={USER}", json={"lesson_id": lesson["id"], "completed": True})
        response = client.delete(f"/api/courses/{course['slug']}/lessons/{course['intro']['id']}")
        assert response.status_code == 200

        data = client.get(f"/api/courses/{course['slug']}", params={"user_id": USER}).json()
        assert len(data["lessons"]) == 1
        assert data["progress"]["all_completed"] is True


class TestProgressAPI:
    """进度路由"""

    def test_upsert(self, client, course):
        lesson_id = course["intro"]["id"]
        first = client.post(f"/api/progress?user_id={USER}", json={"lesson_id": lesson_id, "completed": True})
        second = client.post(f"/api/progress?user_id={USER}", json={"lesson_id": lesson_id, "completed": False})
        assert first.status_code == 200
        assert first.json()["id"] == second.json()["id"]
        assert second.json()["completed_at"] is None

        rows = client.get("/api/progress", params={"user_id": USER, "course_id": course["id"]}).json()
        assert len(rows) == 1

    def test_unknown_lesson(self, client):
        response = client.post(f"/api/progress?user_id={USER}", json={"lesson_id": 777, "completed": True})
        assert response.status_code == 404

    def test_lesson_id_beyond_integer_range_is_404(self, client, course):
        response = client.post(
            f"/api/progress?user_id={USER}", json={"lesson_id": 99999999999999999999, "completed": True}
        )
        assert response.status_code == 404

    def test_course_filter_beyond_integer_range(self, client, course):
        response = client.get("/api/progress", params={"user_id": USER, "course_id": 99999999999999999999})
        assert response.status_code == 200
        assert response.json() == []


class TestQuizAttemptsAPI:
    """测验尝试路由"""

    def _start(self, client, course):
        return client.post(
            f"/api/courses/{course['slug']}/quiz-attempts",
            params={"user_id": USER},
            json={"lesson_id": course["quiz"]["id"]},
        )

    def test_requires_enrollment(self, client, course):
        assert self._start(client, course).status_code == 403

    def test_full_flow(self, client, course):
        enroll = client.post(f"/api/enrollments?user_id={USER}", json={"course_id": course["id"]})
        assert enroll.status_code == 201
        assert enroll.json()["course_slug"] == course["slug"]

        latest = client.get(
            f"/api/courses/{course['slug']}/quiz-attempts",
            params={"user_id": USER, "lesson_id": course["quiz"]["id"]},
        ).json()
        assert latest == {"attempt": None, "attempt_number": 0, "max_attempts": None}

        started = self._start(client, course)
        assert started.status_code == 201
        attempt = started.json()["attempt"]
        assert attempt["attempt_number"] == 1
        assert attempt["status"] == "created"
        assert len(started.json()["questions"]) == 1

        question_id = course["question"]["id"]
        shuffled = map_answer_to_shuffled(1, attempt["answer_orders"][str(question_id)])
        submitted = client.post(
            f"/api/courses/{course['slug']}/quiz-attempts/{attempt['id']}/submit",
            params={"user_id": USER},
            json={"answers": {str(question_id): shuffled}},
        )
        assert submitted.status_code == 200
        assert submitted.json()["score"] == 100.0

        again = client.post(
            f"/api/courses/{course['slug']}/quiz-attempts/{attempt['id']}/submit",
            params={"user_id": USER},
            json={"answers": {}},
        )
        assert again.status_code == 409

        second = self._start(client, course).json()["attempt"]
        assert second["attempt_number"] == 2

        latest = client.get(
            f"/api/courses/{course['slug']}/quiz-attempts",
            params={"user_id": USER, "lesson_id": course["quiz"]["id"]},
        ).json()
        assert latest["attempt_number"] == 2

    def test_bad_slug_is_404(self, client, course):
        response = client.post(
            "/api/courses/not-a-course/quiz-attempts",
            params={"user_id": USER},
            json={"lesson_id": course["quiz"]["id"]},
        )
        assert response.status_code == 404

    def test_get_attempt_of_other_course_is_404(self, client, course):
        client.post(f"/api/enrollments?user_id={USER}", json={"course_id": course["id"]})
        attempt = self._start(client, course).json()["attempt"]
        other = client.post("/api/courses", json={"title": "Other"}).json()

        response = client.get(
            f"/api/courses/{other['slug']}/quiz-attempts/{attempt['id']}",
            params={"user_id": USER},
        )
        assert response.status_code == 404

        response = client.get(
            f"/api/courses/{course['slug']}/quiz-attempts/{attempt['id']}",
            params={"user_id": USER},
        )
        assert response.status_code == 200
        assert response.json()["attempt"]["id"] == attempt["id"]

    def test_empty_user_id_rejected(self, client, course):
        client.post(f"/api/enrollments?user_id={USER}", json={"course_id": course["id"]})
        attempt = self._start(client, course).json()["attempt"]
        base = f"/api/courses/{course['slug']}/quiz-attempts"
        lesson_id = course["quiz"]["id"]

        assert client.get(base, params={"user_id": "", "lesson_id": lesson_id}).status_code == 400
        assert client.get(f"{base}/history", params={"user_id": "", "lesson_id": lesson_id}).status_code == 400
        assert client.post(base, params={"user_id": ""}, json={"lesson_id": lesson_id}).status_code == 400
        assert client.get(f"{base}/{attempt['id']}", params={"user_id": ""}).status_code == 400
        assert client.post(
            f"{base}/{attempt['id']}/submit", params={"user_id": ""}, json={"answers": {}}
        ).status_code == 400

    def test_lesson_id_beyond_integer_range_is_404(self, client, course):
        client.post(f"/api/enrollments?user_id={USER}", json={"course_id": course["id"]})
        base = f"/api/courses/{course['slug']}/quiz-attempts"
        huge = 99999999999999999999

        assert client.post(base, params={"user_id": USER}, json={"lesson_id": huge}).status_code == 404
        assert client.get(base, params={"user_id": USER, "lesson_id": huge}).status_code == 404

    def test_history(self, client, course):
        client.post(f"/api/enrollments?user_id={USER}", json={"course_id": course["id"]})
        first = self._start(client, course).json()["attempt"]
        second = self._start(client, course).json()["attempt"]

        history = client.get(
            f"/api/courses/{course['slug']}/quiz-attempts/history",
            params={"user_id": USER, "lesson_id": course["quiz"]["id"]},
        )
        assert history.status_code == 200
        assert [a["id"] for a in history.json()] == [first["id"], second["id"]]
        assert [a["attempt_number"] for a in history.json()] == [1, 2]

    def test_attempt_limit_from_quiz_settings(self, client, course):
        client.post(f"/api/enrollments?user_id={USER}", json={"course_id": course["id"]})
        saved = client.put(
            f"/api/lessons/{course['quiz']['id']}/quiz-settings",
            json={"max_attempts": 1, "show_correct_answers": False},
        )
        assert saved.status_code == 200

        attempt = self._start(client, course).json()["attempt"]
        assert self._start(client, course).status_code == 409

        latest = client.get(
            f"/api/courses/{course['slug']}/quiz-attempts",
            params={"user_id": USER, "lesson_id": course["quiz"]["id"]},
        ).json()
        assert latest["max_attempts"] == 1

        result = client.post(
            f"/api/courses/{course['slug']}/quiz-attempts/{attempt['id']}/submit",
            params={"user_id": USER},
            json={"answers": {}},
        ).json()
        assert result["passed"] is False
        assert "correct_option" not in result["answers"][0]

    def test_passing_attempt_completes_lesson(self, client, course):
        client.post(f"/api/enrollments?user_id={USER}", json={"course_id": course["id"]})
        attempt = self._start(client, course).json()["attempt"]
        question_id = course["question"]["id"]

        client.post(
            f"/api/courses/{course['slug']}/quiz-attempts/{attempt['id']}/submit",
            params={"user_id": USER},
            json={"answers": {str(question_id): map_answer_to_shuffled(1, attempt["answer_orders"][str(question_id)])}},
        )

        data = client.get(f"/api/courses/{course['slug']}", params={"user_id": USER}).json()
        assert data["progress"]["completed_indices"] == [1]


class TestQuizSettingsAPI:
    """测验设置路由"""

    def test_get_and_put(self, client, course):
        url = f"/api/lessons/{course['quiz']['id']}/quiz-settings"
        assert client.get(url).json() == {"settings": None}

        saved = client.put(url, json={"max_attempts": 5, "shuffle_quiz": False, "passing_score": 70})
        assert saved.status_code == 200

        settings = client.get(url).json()["settings"]
        assert settings["max_attempts"] == 5
        assert settings["shuffle_quiz"] is False
        assert settings["passing_score"] == 70

    def test_invalid_values_rejected(self, client, course):
        url = f"/api/lessons/{course['quiz']['id']}/quiz-settings"
        assert client.put(url, json={"max_attempts": 0}).status_code == 400
        assert client.put(url, json={"passing_score": 150}).status_code == 400

    def test_unknown_lesson(self, client):
        assert client.get("/api/lessons/4242/quiz-settings").status_code == 404
        assert client.put("/api/lessons/4242/quiz-settings", json={}).status_code == 404


class TestEnrollmentsAPI:
    """报名路由"""

    def test_cancel_blocks_new_attempts(self, client, course):
        client.post(f"/api/enrollments?user_id={USER}", json={"course_id": course["id"]})

        cancelled = client.delete(f"/api/enrollments/{course['id']}", params={"user_id": USER})
        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "cancelled"
        assert client.get("/api/enrollments", params={"user_id": USER}).json() == []

        response = client.post(
            f"/api/courses/{course['slug']}/quiz-attempts",
            params={"user_id": USER},
            json={"lesson_id": course["quiz"]["id"]},
        )
        assert response.status_code == 403

    def test_cancel_unknown(self, client, course):
        assert client.delete(f"/api/enrollments/{course['id']}", params={"user_id": USER}).status_code == 404
        assert client.delete("/api/enrollments/99999999999999999999", params={"user_id": USER}).status_code == 404

    def test_empty_user_id_rejected(self, client, course):
        assert client.post("/api/enrollments?user_id=", json={"course_id": course["id"]}).status_code == 400
        assert client.get("/api/enrollments", params={"user_id": ""}).status_code == 400
