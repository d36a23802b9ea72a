"""Learning Store - typed access to the classroom collections.

Wraps a ``DocumentStore`` and converts raw records to pydantic models.
Records that fail validation are skipped with a warning: the store has
no schema, so a malformed record must never break a whole listing.
"""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.logger import get_logger
from ..models.schemas import (
    Assignment,
    AttemptRecord,
    CodingProblem,
    Enrollment,
    LabSubmission,
    Quiz,
    Submission,
)
from ..models.state import StudentContext
from .documents import DocumentStore, Record, new_key

logger = get_logger("learning_store")

ModelT = TypeVar("ModelT", bound=BaseModel)


class LearningStore:
    """Collection-level operations over the document store.

    Path layout:
        - quizzes/{id}
        - enrollments/{id}
        - quiz_attempts/{id}
        - assignments/{id}
        - submissions/{id}
        - codingProblems/{id}
        - lab_submissions/{id}
        - courses/{id}
        - lesson_plans/{id}

    Example:
        >>> store = LearningStore(MemoryDocumentStore())
        >>> quiz = await store.save_quiz(Quiz(title="Intro", course_id="c1"))
        >>> await store.get_quiz(quiz.id)
    """

    QUIZZES = "quizzes"
    ENROLLMENTS = "enrollments"
    ATTEMPTS = "quiz_attempts"
    ASSIGNMENTS = "assignments"
    SUBMISSIONS = "submissions"
    CODING_PROBLEMS = "codingProblems"
    LAB_SUBMISSIONS = "lab_submissions"
    COURSES = "courses"
    LESSON_PLANS = "lesson_plans"

    def __init__(self, documents: DocumentStore):
        self.documents = documents

    # -------------------------------------------------------------------------
    # helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _dump(model: BaseModel) -> Record:
        return model.model_dump(mode="json", by_alias=True)

    @staticmethod
    def _load(model_cls: type[ModelT], key: str, record: Record) -> ModelT | None:
        data = dict(record)
        data["id"] = key
        try:
            return model_cls.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(
                "Skipping invalid record",
                model=model_cls.__name__,
                key=key,
                errors=e.error_count(),
            )
            return None

    def _load_all(self, model_cls: type[ModelT], records: dict[str, Record]) -> list[ModelT]:
        loaded = (self._load(model_cls, key, record) for key, record in records.items())
        return [item for item in loaded if item is not None]

    async def _save(self, collection: str, model: ModelT) -> ModelT:
        """Write ``model``; records without id get a pushed key."""
        data = self._dump(model)
        record_id = data.get("id") or new_key()
        data["id"] = record_id
        await self.documents.set(f"{collection}/{record_id}", data)
        return model.model_copy(update={"id": record_id})

    # -------------------------------------------------------------------------
    # quizzes
    # -------------------------------------------------------------------------

    async def save_quiz(self, quiz: Quiz) -> Quiz:
        saved = await self._save(self.QUIZZES, quiz)
        logger.info("Quiz saved", quiz_id=saved.id, course_id=saved.course_id)
        return saved

    async def get_quiz(self, quiz_id: str) -> Quiz | None:
        record = await self.documents.get(f"{self.QUIZZES}/{quiz_id}")
        if record is None:
            return None
        return self._load(Quiz, quiz_id, record)

    async def list_quizzes(self) -> list[Quiz]:
        return self._load_all(Quiz, await self.documents.children(self.QUIZZES))

    async def quizzes_for_course(self, course_id: str) -> list[Quiz]:
        records = await self.documents.query_equal(self.QUIZZES, "course_id", course_id)
        return self._load_all(Quiz, records)

    # -------------------------------------------------------------------------
    # enrollments
    # -------------------------------------------------------------------------

    async def enroll(self, student_id: str, course_id: str) -> str:
        enrollment = Enrollment(user_id=student_id, course_id=course_id)
        return await self.documents.push(self.ENROLLMENTS, self._dump(enrollment))

    async def enrolled_course_ids(self, student_id: str) -> set[str]:
        """Course ids resolved by an equality query on ``enrollments.user_id``."""
        records = await self.documents.query_equal(self.ENROLLMENTS, "user_id", student_id)
        return {r["course_id"] for r in records.values() if r.get("course_id")}

    async def load_context(self, student_id: str, name: str = "") -> StudentContext:
        """Build the explicit session object for ``student_id``."""
        course_ids = await self.enrolled_course_ids(student_id)
        return StudentContext(
            student_id=student_id,
            name=name,
            enrolled_course_ids=frozenset(course_ids),
        )

    # -------------------------------------------------------------------------
    # attempts
    # -------------------------------------------------------------------------

    async def save_attempt(self, record: AttemptRecord) -> AttemptRecord:
        return await self._save(self.ATTEMPTS, record)

    async def attempts_for_student(self, student_id: str) -> list[AttemptRecord]:
        records = await self.documents.query_equal(self.ATTEMPTS, "student_id", student_id)
        return self._load_all(AttemptRecord, records)

    async def attempts_for_quiz(self, quiz_id: str) -> list[AttemptRecord]:
        records = await self.documents.query_equal(self.ATTEMPTS, "quiz_id", quiz_id)
        return self._load_all(AttemptRecord, records)

    # -------------------------------------------------------------------------
    # assignments & submissions
    # -------------------------------------------------------------------------

    async def save_assignment(self, assignment: Assignment) -> Assignment:
        return await self._save(self.ASSIGNMENTS, assignment)

    async def get_assignment(self, assignment_id: str) -> Assignment | None:
        record = await self.documents.get(f"{self.ASSIGNMENTS}/{assignment_id}")
        if record is None:
            return None
        return self._load(Assignment, assignment_id, record)

    async def list_assignments(self) -> list[Assignment]:
        return self._load_all(Assignment, await self.documents.children(self.ASSIGNMENTS))

    async def assignments_for_course(self, course_id: str) -> list[Assignment]:
        records = await self.documents.query_equal(self.ASSIGNMENTS, "course_id", course_id)
        return self._load_all(Assignment, records)

    async def save_submission(self, submission: Submission) -> Submission:
        return await self._save(self.SUBMISSIONS, submission)

    async def get_submission(self, submission_id: str) -> Submission | None:
        record = await self.documents.get(f"{self.SUBMISSIONS}/{submission_id}")
        if record is None:
            return None
        return self._load(Submission, submission_id, record)

    async def list_submissions(self) -> list[Submission]:
        return self._load_all(Submission, await self.documents.children(self.SUBMISSIONS))

    async def submissions_for_student(self, student_id: str) -> list[Submission]:
        records = await self.documents.query_equal(self.SUBMISSIONS, "user_id", student_id)
        return self._load_all(Submission, records)

    async def update_submission(self, submission_id: str, fields: dict[str, Any]) -> None:
        await self.documents.update(f"{self.SUBMISSIONS}/{submission_id}", fields)

    # -------------------------------------------------------------------------
    # coding lab
    # -------------------------------------------------------------------------

    async def save_coding_problem(self, problem: CodingProblem) -> CodingProblem:
        saved = await self._save(self.CODING_PROBLEMS, problem)
        logger.info("Coding problem saved", problem_id=saved.id, course_id=saved.course_id)
        return saved

    async def get_coding_problem(self, problem_id: str) -> CodingProblem | None:
        record = await self.documents.get(f"{self.CODING_PROBLEMS}/{problem_id}")
        if record is None:
            return None
        return self._load(CodingProblem, problem_id, record)

    async def coding_problems_for_course(self, course_id: str) -> list[CodingProblem]:
        records = await self.documents.query_equal(self.CODING_PROBLEMS, "course_id", course_id)
        return self._load_all(CodingProblem, records)

    async def save_lab_submission(self, submission: LabSubmission) -> LabSubmission:
        return await self._save(self.LAB_SUBMISSIONS, submission)

    async def get_lab_submission(self, submission_id: str) -> LabSubmission | None:
        record = await self.documents.get(f"{self.LAB_SUBMISSIONS}/{submission_id}")
        if record is None:
            return None
        return self._load(LabSubmission, submission_id, record)

    async def lab_submissions_for_problem(self, problem_id: str) -> list[LabSubmission]:
        records = await self.documents.query_equal(self.LAB_SUBMISSIONS, "problem_id", problem_id)
        return self._load_all(LabSubmission, records)

    async def lab_submissions_for_student(self, student_id: str) -> list[LabSubmission]:
        records = await self.documents.query_equal(self.LAB_SUBMISSIONS, "user_id", student_id)
        return self._load_all(LabSubmission, records)

    async def update_lab_submission(self, submission_id: str, fields: dict[str, Any]) -> None:
        await self.documents.update(f"{self.LAB_SUBMISSIONS}/{submission_id}", fields)

    # -------------------------------------------------------------------------
    # courses & lesson plans
    # -------------------------------------------------------------------------

    async def get_course(self, course_id: str) -> Record | None:
        return await self.documents.get(f"{self.COURSES}/{course_id}")

    async def save_lesson_plan(self, plan: Record) -> str:
        return await self.documents.push(self.LESSON_PLANS, plan)
