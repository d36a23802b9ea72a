# =============================================================================
# INTEGRATION TESTS - Endpoints
# =============================================================================
# Integration tests using FastAPI TestClient (no external server)
# =============================================================================

from unittest.mock import patch

import pytest


def _start(client, headers, quiz_id="quiz-1", schedule="false"):
    response = client.post(f"/quiz/{quiz_id}/start", params={"schedule": schedule}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


# =============================================================================
# HEALTH
# =============================================================================


class TestHealthEndpoints:
    """Tests for health endpoints."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health(self, client):
        response = client.get("/health")

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["store_backend"] == "memory"
        assert data["generation_enabled"] is False


# =============================================================================
# QUIZ CATALOG
# =============================================================================


class TestCatalogEndpoint:
    """Tests for GET /quiz/catalog."""

    def test_catalog(self, client, seeded_store, student_headers):
        response = client.get("/quiz/catalog", headers=student_headers)

        assert response.status_code == 200
        entries = response.json()
        assert sorted(e["quiz"]["id"] for e in entries) == ["quiz-1", "quiz-timed"]
        assert all(e["status"] == "available" for e in entries)

    def test_missing_student_header(self, client, seeded_store):
        response = client.get("/quiz/catalog")

        assert response.status_code == 422

    def test_unenrolled_student_sees_nothing(self, client, seeded_store):
        response = client.get("/quiz/catalog", headers={"X-Student-Id": "stranger"})

        assert response.json() == []

    def test_completed_filter_after_submit(self, client, seeded_store, student_headers):
        attempt = _start(client, student_headers)
        client.post(
            f"/quiz/attempts/{attempt['attempt_id']}/answer",
            json={"question_index": 0, "option_index": 0},
            headers=student_headers,
        )
        client.post(f"/quiz/attempts/{attempt['attempt_id']}/submit", headers=student_headers)

        completed = client.get(
            "/quiz/catalog", params={"filter": "completed"}, headers=student_headers
        ).json()
        pending = client.get("/quiz/catalog", params={"filter": "pending"}, headers=student_headers).json()

        assert [(e["quiz"]["id"], e["score"]) for e in completed] == [("quiz-1", 33)]
        assert [e["quiz"]["id"] for e in pending] == ["quiz-timed"]


# =============================================================================
# ATTEMPT LIFECYCLE
# =============================================================================


class TestAttemptEndpoints:
    """Tests for the attempt lifecycle over HTTP."""

    def test_full_flow(self, client, seeded_store, student_headers):
        attempt = _start(client, student_headers)
        attempt_id = attempt["attempt_id"]
        assert attempt["status"] == "in_progress"
        assert attempt["answers"] == [-1, -1, -1]

        for index, option in enumerate([0, 1, 3]):
            response = client.post(
                f"/quiz/attempts/{attempt_id}/answer",
                json={"question_index": index, "option_index": option},
                headers=student_headers,
            )
            assert response.status_code == 200

        response = client.post(f"/quiz/attempts/{attempt_id}/submit", headers=student_headers)
        result = response.json()
        assert response.status_code == 200
        assert result["persisted"] is True
        assert result["error"] is None
        assert result["correct_count"] == 2
        assert result["record"]["score"] == 67
        assert result["record"]["trigger"] == "manual"
        assert result["attempt"]["status"] == "submitted"
        assert result["attempt"]["passed"] is False

        review = client.get(f"/quiz/attempts/{attempt_id}/review", headers=student_headers).json()
        assert [item["is_correct"] for item in review] == [True, True, False]

        response = client.post(f"/quiz/attempts/{attempt_id}/reset", headers=student_headers)
        assert response.json()["status"] == "in_progress"
        assert response.json()["answers"] == [-1, -1, -1]

    def test_submit_twice_conflict(self, client, seeded_store, student_headers):
        attempt_id = _start(client, student_headers)["attempt_id"]
        client.post(f"/quiz/attempts/{attempt_id}/submit", headers=student_headers)

        response = client.post(f"/quiz/attempts/{attempt_id}/submit", headers=student_headers)

        assert response.status_code == 409

    def test_invalid_answer_rejected(self, client, seeded_store, student_headers):
        attempt_id = _start(client, student_headers)["attempt_id"]

        response = client.post(
            f"/quiz/attempts/{attempt_id}/answer",
            json={"question_index": 0, "option_index": 4},
            headers=student_headers,
        )

        assert response.status_code == 400
        view = client.get(f"/quiz/attempts/{attempt_id}", headers=student_headers).json()
        assert view["answers"] == [-1, -1, -1]

    def test_review_before_submit_conflict(self, client, seeded_store, student_headers):
        attempt_id = _start(client, student_headers)["attempt_id"]

        response = client.get(f"/quiz/attempts/{attempt_id}/review", headers=student_headers)

        assert response.status_code == 409

    def test_client_driven_tick(self, client, seeded_store, student_headers):
        attempt = _start(client, student_headers, quiz_id="quiz-timed")
        assert attempt["remaining_seconds"] == 60

        response = client.post(f"/quiz/attempts/{attempt['attempt_id']}/tick", headers=student_headers)

        assert response.json()["remaining_seconds"] == 59
        assert response.json()["remaining_display"] == "0:59"

    def test_scheduled_countdown_runs(self, client, seeded_store, student_headers):
        attempt = _start(client, student_headers, quiz_id="quiz-timed", schedule="true")

        response = client.delete(f"/quiz/attempts/{attempt['attempt_id']}", headers=student_headers)

        assert response.status_code == 200
        assert response.json()["cancelled"] is True
        assert response.json()["status"] == "not_started"

    def test_client_tick_rejected_for_scheduled_countdown(self, client, seeded_store, student_headers):
        attempt_id = _start(client, student_headers, quiz_id="quiz-timed", schedule="true")["attempt_id"]

        codes = {
            client.post(f"/quiz/attempts/{attempt_id}/tick", headers=student_headers).status_code
            for _ in range(60)
        }

        view = client.get(f"/quiz/attempts/{attempt_id}", headers=student_headers).json()
        assert codes == {409}
        assert view["status"] == "in_progress"
        assert view["trigger"] is None
        client.delete(f"/quiz/attempts/{attempt_id}", headers=student_headers)

    def test_repeated_attempts_do_not_accumulate(self, client, seeded_store, student_headers):
        import app_state

        attempt_ids = []
        for _ in range(5):
            attempt_id = _start(client, student_headers)["attempt_id"]
            client.post(f"/quiz/attempts/{attempt_id}/submit", headers=student_headers)
            attempt_ids.append(attempt_id)

        assert len(app_state.registry) == 1
        assert client.get(f"/quiz/attempts/{attempt_ids[0]}", headers=student_headers).status_code == 404
        latest = client.get(f"/quiz/attempts/{attempt_ids[-1]}/review", headers=student_headers)
        assert latest.status_code == 200

    def test_cancel_removes_attempt(self, client, seeded_store, student_headers):
        attempt_id = _start(client, student_headers)["attempt_id"]

        client.delete(f"/quiz/attempts/{attempt_id}", headers=student_headers)
        response = client.get(f"/quiz/attempts/{attempt_id}", headers=student_headers)

        assert response.status_code == 404

    def test_unknown_quiz(self, client, seeded_store, student_headers):
        response = client.post("/quiz/missing/start", headers=student_headers)

        assert response.status_code == 404

    def test_unenrolled_student_cannot_start(self, client, seeded_store):
        response = client.post("/quiz/quiz-1/start", headers={"X-Student-Id": "stranger"})

        assert response.status_code == 400

    def test_attempt_hidden_from_other_students(self, client, seeded_store, student_headers):
        attempt_id = _start(client, student_headers)["attempt_id"]

        response = client.get(f"/quiz/attempts/{attempt_id}", headers={"X-Student-Id": "student-2"})

        assert response.status_code == 404


# =============================================================================
# AUTHORING
# =============================================================================


@pytest.fixture
def teacher_headers():
    return {"X-Teacher-Id": "teacher-1"}


def _quiz_payload(count=10, **kwargs):
    payload = {
        "title": "Fractions",
        "course_id": "course-1",
        "time_limit": 15,
        "questions": [
            {"question": f"Q{i + 1}", "options": ["a", "b", "c", "d"], "correctAnswer": i % 4}
            for i in range(count)
        ],
    }
    payload.update(kwargs)
    return payload


class TestAuthoringEndpoints:
    """Tests for quiz creation and publishing."""

    def test_create_quiz_reaches_catalog(self, client, seeded_store, teacher_headers, student_headers):
        client.portal.call(seeded_store.documents.set, "courses/course-1", {"title": "Math 101"})

        response = client.post("/quiz", json=_quiz_payload(), headers=teacher_headers)

        assert response.status_code == 201, response.text
        quiz = response.json()
        assert quiz["published"] is True
        assert quiz["is_active"] is True
        assert quiz["course_name"] == "Math 101"
        assert quiz["teacher_id"] == "teacher-1"
        assert quiz["questions"][3]["correctAnswer"] == 3

        catalog = client.get("/quiz/catalog", headers=student_headers).json()
        assert quiz["id"] in [e["quiz"]["id"] for e in catalog]

    def test_wrong_question_count(self, client, seeded_store, teacher_headers):
        response = client.post("/quiz", json=_quiz_payload(9), headers=teacher_headers)

        assert response.status_code == 400
        assert "exactly 10 questions" in response.json()["detail"]

    def test_malformed_question(self, client, seeded_store, teacher_headers):
        payload = _quiz_payload()
        payload["questions"][0]["options"] = ["a", "b", "c"]

        response = client.post("/quiz", json=payload, headers=teacher_headers)

        assert response.status_code == 422

    def test_teacher_header_required(self, client, seeded_store):
        assert client.post("/quiz", json=_quiz_payload()).status_code == 422
        response = client.post("/quiz", json=_quiz_payload(), headers={"X-Teacher-Id": " "})
        assert response.status_code == 401

    def test_publish_draft_once(self, client, seeded_store, teacher_headers, student_headers):
        draft = client.post(
            "/quiz", json=_quiz_payload(publish=False), headers=teacher_headers
        ).json()
        catalog = client.get("/quiz/catalog", headers=student_headers).json()
        assert draft["id"] not in [e["quiz"]["id"] for e in catalog]

        response = client.post(f"/quiz/{draft['id']}/publish", headers=teacher_headers)
        assert response.status_code == 200
        assert response.json()["published"] is True

        response = client.post(f"/quiz/{draft['id']}/publish", headers=teacher_headers)
        assert response.status_code == 409

    def test_publish_other_teachers_quiz(self, client, seeded_store, teacher_headers):
        draft = client.post(
            "/quiz", json=_quiz_payload(publish=False), headers=teacher_headers
        ).json()

        response = client.post(f"/quiz/{draft['id']}/publish", headers={"X-Teacher-Id": "teacher-2"})

        assert response.status_code == 404

    def test_list_course_quizzes(self, client, seeded_store, teacher_headers):
        draft = client.post(
            "/quiz", json=_quiz_payload(3, publish=False), headers=teacher_headers
        ).json()

        response = client.get("/quiz/courses/course-1", headers=teacher_headers)

        assert response.status_code == 200
        ids = [q["id"] for q in response.json()]
        assert {"quiz-1", "quiz-timed", draft["id"]} == set(ids)

    def test_create_assignment(self, client, seeded_store, teacher_headers, student_headers):
        response = client.post(
            "/assignments",
            json={"title": "Essay", "course_id": "course-1", "points": 15, "assignmentType": "text"},
            headers=teacher_headers,
        )

        assert response.status_code == 201, response.text
        created = response.json()
        assert created["points"] == 15
        listed = client.get("/assignments", headers=student_headers).json()
        assert [e["assignment"]["id"] for e in listed] == [created["id"]]


# =============================================================================
# GENERATION
# =============================================================================


@pytest.fixture
def static_generator():
    """Install a generator backed by canned replies."""
    import app_state
    from classroom.engine import ContentGenerator
    from classroom.llm import StaticGenerationClient

    def _install(*replies):
        app_state.generator = ContentGenerator(StaticGenerationClient(list(replies)))
        return app_state.generator

    return _install


class TestGenerationEndpoints:
    """Tests for quiz generation."""

    def test_generate_quiz(self, client, static_generator, quiz_text):
        static_generator(quiz_text)

        response = client.post(
            "/quiz/generate", json={"topic": "Geography", "difficulty": "easy", "num_questions": 2}
        )

        data = response.json()
        assert response.status_code == 200
        assert data["title"] == "Geography Quiz"
        assert data["total_questions"] == 2
        assert data["questions"][0]["correctAnswer"] == 1

    def test_generate_quiz_parse_failure(self, client, static_generator):
        static_generator("I could not do it.")

        response = client.post("/quiz/generate", json={"topic": "Geography"})

        assert response.status_code == 422

    def test_generate_without_api_key(self, client):
        response = client.post("/quiz/generate", json={"topic": "Geography"})

        assert response.status_code == 502

    def test_generate_from_prompt(self, client, static_generator):
        static_generator(
            '{"title": "T", "questions": [{"question": "Q", "options": ["a","b","c","d"], "correctAnswer": 2}]}'
        )

        response = client.post("/quiz/generate-from-prompt", json={"prompt": "Cells", "num_questions": 3})

        assert response.status_code == 200
        assert response.json()["total_questions"] == 3


# =============================================================================
# ASSIGNMENTS
# =============================================================================


@pytest.fixture
def seeded_assignment(client, seeded_store, tmp_path):
    import app_state
    from classroom.models import Assignment
    from classroom.storage import LocalBlobStore

    app_state.blobs = LocalBlobStore(tmp_path / "uploads")

    async def _seed():
        return await seeded_store.save_assignment(
            Assignment(id="a1", title="Essay", course_id="course-1", points=10)
        )

    return client.portal.call(_seed)


class TestAssignmentEndpoints:
    """Tests for assignment endpoints."""

    def test_list(self, client, seeded_assignment, student_headers):
        response = client.get("/assignments", headers=student_headers)

        assert response.status_code == 200
        assert [e["assignment"]["id"] for e in response.json()] == ["a1"]

    def test_submit_and_grade(self, client, seeded_assignment, student_headers):
        response = client.post(
            "/assignments/a1/submit", data={"content": "My essay"}, headers=student_headers
        )
        assert response.status_code == 200
        submission = response.json()
        assert submission["grade"] is None

        response = client.post(
            f"/assignments/submissions/{submission['id']}/grade",
            json={"grade": 9, "feedback": "Great", "grader_id": "teacher-1"},
        )
        assert response.status_code == 200
        assert response.json()["grade"] == 9

        listed = client.get("/assignments/courses/course-1/submissions").json()
        assert [(s["id"], s["grade"]) for s in listed] == [(submission["id"], 9)]

    def test_submit_file(self, client, seeded_assignment, student_headers):
        response = client.post(
            "/assignments/a1/submit",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=student_headers,
        )

        assert response.status_code == 200
        assert response.json()["file_url"].endswith("_notes.txt")

    def test_empty_submission_rejected(self, client, seeded_assignment, student_headers):
        response = client.post("/assignments/a1/submit", data={"content": ""}, headers=student_headers)

        assert response.status_code == 400

    def test_grade_out_of_range(self, client, seeded_assignment, student_headers):
        submission = client.post(
            "/assignments/a1/submit", data={"content": "x"}, headers=student_headers
        ).json()

        response = client.post(
            f"/assignments/submissions/{submission['id']}/grade", json={"grade": 11}
        )

        assert response.status_code == 400

    def test_suggest_feedback(self, client, seeded_assignment, student_headers, static_generator):
        static_generator("Clear structure. I would give it 7/10.")
        submission = client.post(
            "/assignments/a1/submit", data={"content": "My essay"}, headers=student_headers
        ).json()

        response = client.post("/assignments/suggest-feedback", json={"submission_id": submission["id"]})

        data = response.json()
        assert response.status_code == 200
        assert data["suggested_grade"] == 7
        assert data["points"] == 10

    def test_generate_assignment(self, client, static_generator):
        static_generator("Fractions Project\n\nDetails...")

        response = client.post(
            "/assignments/generate", json={"subject": "Math", "topic": "Fractions"}
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Fractions Project"


# =============================================================================
# CODING LAB
# =============================================================================


def _create_problem(client, headers, **kwargs):
    payload = {
        "title": "FizzBuzz",
        "description": "Classic warm-up",
        "instructions": "Print 1..100",
        "course_id": "course-1",
        "language": "python",
        "points": 10,
    }
    payload.update(kwargs)
    response = client.post("/coding-lab/problems", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCodingLabEndpoints:
    """Tests for coding problems and solutions."""

    def test_problem_flow(self, client, seeded_store, teacher_headers, student_headers):
        problem = _create_problem(client, teacher_headers)

        listed = client.get("/coding-lab/problems", headers=student_headers).json()
        assert [e["problem"]["id"] for e in listed] == [problem["id"]]
        assert listed[0]["submitted"] is False

        response = client.post(
            f"/coding-lab/problems/{problem['id']}/submit",
            json={"content": "for i in range(1, 101): print(i)"},
            headers=student_headers,
        )
        assert response.status_code == 201
        submission = response.json()
        assert submission["status"] == "pending"
        assert submission["problem_title"] == "FizzBuzz"

        submissions = client.get(
            f"/coding-lab/problems/{problem['id']}/submissions", headers=teacher_headers
        ).json()
        assert [s["id"] for s in submissions] == [submission["id"]]

        response = client.post(
            f"/coding-lab/submissions/{submission['id']}/grade",
            json={"grade": 8, "feedback": "Missing Fizz"},
            headers=teacher_headers,
        )
        assert response.status_code == 200
        graded = response.json()
        assert graded["status"] == "graded"
        assert graded["graded_by"] == "teacher-1"

        listed = client.get("/coding-lab/problems", headers=student_headers).json()
        assert listed[0]["submission"]["grade"] == 8

    def test_missing_fields_rejected(self, client, seeded_store, teacher_headers):
        response = client.post(
            "/coding-lab/problems",
            json={"title": "FizzBuzz", "description": " ", "instructions": "x", "course_id": "course-1"},
            headers=teacher_headers,
        )

        assert response.status_code == 400

    def test_empty_solution_rejected(self, client, seeded_store, teacher_headers, student_headers):
        problem = _create_problem(client, teacher_headers)

        response = client.post(
            f"/coding-lab/problems/{problem['id']}/submit",
            json={"content": ""},
            headers=student_headers,
        )

        assert response.status_code == 400

    def test_unenrolled_student_cannot_submit(self, client, seeded_store, teacher_headers):
        problem = _create_problem(client, teacher_headers)

        response = client.post(
            f"/coding-lab/problems/{problem['id']}/submit",
            json={"content": "code"},
            headers={"X-Student-Id": "student-2"},
        )

        assert response.status_code == 404

    def test_course_problems(self, client, seeded_store, teacher_headers):
        problem = _create_problem(client, teacher_headers)

        response = client.get("/coding-lab/courses/course-1/problems", headers=teacher_headers)

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [problem["id"]]

    def test_generate_problem(self, client, static_generator):
        static_generator("Title: Sum Two Numbers\nLanguage: Go\nDifficulty: hard\n")

        response = client.post("/coding-lab/generate", json={"prompt": "addition"})

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Sum Two Numbers"
        assert data["language"] == "go"
        assert data["difficulty"] == "hard"
        assert data["start_code"] == "// Your code here"


# =============================================================================
# TOOLS
# =============================================================================


class TestToolEndpoints:
    """Tests for the simulated tool endpoints."""

    def test_plagiarism_with_matches(self, client):
        with patch("routers.tools.random.randint", return_value=73):
            response = client.post("/check-plagiarism", json={"text": "Essay"})

        data = response.json()
        assert response.status_code == 200
        assert data["plagiarismScore"] == 73
        assert len(data["analysis"]) == 3
        assert len(data["matchedSources"]) == 2

    def test_plagiarism_without_matches(self, client):
        with patch("routers.tools.random.randint", return_value=30):
            data = client.post("/check-plagiarism", json={"text": "Essay"}).json()

        assert data["matchedSources"] == []

    def test_lesson_plan(self, client):
        response = client.post(
            "/generate-lesson-plan",
            json={"subject": "Science", "topic": "Volcanoes", "gradeLevel": "5", "duration": "2 weeks"},
        )

        data = response.json()
        assert response.status_code == 200
        assert data["mainTopic"] == "Volcanoes"
        assert data["subtopics"][0]["title"] == "Introduction to Volcanoes"
        assert data["suggestedTimeframe"] == "2 weeks"
        assert len(data["learningObjectives"]) == 3

    def test_lesson_plan_saved(self, client):
        import app_state

        client.post("/generate-lesson-plan", params={"save": "true"}, json={"topic": "Tides"})

        async def _plans():
            store = await app_state.get_store()
            return await store.documents.children("lesson_plans")

        plans = client.portal.call(_plans)
        assert [p["mainTopic"] for p in plans.values()] == ["Tides"]
