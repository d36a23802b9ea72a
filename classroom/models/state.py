"""Session objects passed explicitly into every operation."""

from dataclasses import dataclass, field

from .schemas import AttemptRecord


@dataclass(frozen=True)
class StudentContext:
    """Who is acting, and in which courses.

    Attributes:
        student_id: ID of the student
        name: Display name stored alongside attempts and submissions
        enrolled_course_ids: Courses the student is enrolled in
    """

    student_id: str
    name: str = ""
    enrolled_course_ids: frozenset[str] = field(default_factory=frozenset)

    def is_enrolled(self, course_id: str) -> bool:
        return course_id in self.enrolled_course_ids


@dataclass
class SubmitOutcome:
    """Result of ``QuizAttemptSession.submit``.

    A failed store write is reported here instead of raised: the score was
    still computed and the session is already submitted locally.
    """

    record: AttemptRecord
    correct_count: int
    persisted: bool = False
    error: str | None = None

    @property
    def score(self) -> int:
        return self.record.score
