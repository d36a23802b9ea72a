"""Quiz Catalog - quizzes visible to a student, merged with prior attempts."""

from datetime import datetime

from ..core.logger import get_logger
from ..models.enums import CatalogFilter, CatalogStatus
from ..models.schemas import AttemptRecord, CatalogEntry, Quiz, utcnow
from ..models.state import StudentContext
from ..storage.learning_store import LearningStore

logger = get_logger("catalog")


class QuizCatalog:
    """Loads a student's quiz catalog.

    1. Course ids from an equality query on ``enrollments.user_id``
    2. All quizzes, kept when enrolled, published and active
    3. The student's attempts mark quizzes ``completed`` with their score

    No pagination: the full collections are scanned client-side.

    Example:
        >>> catalog = QuizCatalog(store)
        >>> entries = await catalog.load(context)
        >>> pending = catalog.filter_entries(CatalogFilter.PENDING)
    """

    def __init__(self, store: LearningStore, clock=utcnow):
        self.store = store
        self.clock = clock
        self.entries: list[CatalogEntry] = []

    @staticmethod
    def _latest_by_quiz(attempts: list[AttemptRecord]) -> dict[str, AttemptRecord]:
        latest: dict[str, AttemptRecord] = {}
        for attempt in attempts:
            current = latest.get(attempt.quiz_id)
            if current is None or _submitted_key(attempt) >= _submitted_key(current):
                latest[attempt.quiz_id] = attempt
        return latest

    def status_for(self, quiz: Quiz, completed: bool, now: datetime | None = None) -> CatalogStatus:
        if completed:
            return CatalogStatus.COMPLETED
        if quiz.is_past_due(now or self.clock()):
            return CatalogStatus.OVERDUE
        return CatalogStatus.AVAILABLE

    async def load(self, context: StudentContext) -> list[CatalogEntry]:
        """Load (and cache) the catalog for ``context``'s student."""
        course_ids = await self.store.enrolled_course_ids(context.student_id)
        if not course_ids:
            self.entries = []
            return []

        quizzes = [
            quiz
            for quiz in await self.store.list_quizzes()
            if quiz.course_id in course_ids and quiz.published and quiz.is_active
        ]
        attempts = self._latest_by_quiz(await self.store.attempts_for_student(context.student_id))

        now = self.clock()
        entries = []
        for quiz in quizzes:
            attempt = attempts.get(quiz.id)
            completed = attempt is not None
            entries.append(
                CatalogEntry(
                    quiz=quiz,
                    completed=completed,
                    score=attempt.score if attempt else None,
                    status=self.status_for(quiz, completed, now),
                )
            )

        self.entries = entries
        logger.info(
            "Catalog loaded",
            student_id=context.student_id,
            quizzes=len(entries),
            completed=sum(1 for e in entries if e.completed),
        )
        return entries

    def filter_entries(self, kind: CatalogFilter = CatalogFilter.ALL) -> list[CatalogEntry]:
        if kind == CatalogFilter.PENDING:
            return [e for e in self.entries if not e.completed]
        if kind == CatalogFilter.COMPLETED:
            return [e for e in self.entries if e.completed]
        return list(self.entries)

    def get(self, quiz_id: str) -> CatalogEntry | None:
        return next((e for e in self.entries if e.quiz.id == quiz_id), None)

    def mark_completed(self, quiz_id: str, score: int) -> CatalogEntry | None:
        """Reflect a fresh submission without reloading the catalog."""
        for index, entry in enumerate(self.entries):
            if entry.quiz.id == quiz_id:
                updated = entry.model_copy(
                    update={"completed": True, "score": score, "status": CatalogStatus.COMPLETED}
                )
                self.entries[index] = updated
                return updated
        return None

    def record_submission(self, record: AttemptRecord) -> None:
        """``on_submitted`` callback for attempt sessions."""
        self.mark_completed(record.quiz_id, record.score)

    def can_start(self, entry: CatalogEntry) -> bool:
        """View-level guard: completed or overdue quizzes hide the start button.

        Advisory only; nothing stops a second attempt at the store level.
        """
        return entry.status == CatalogStatus.AVAILABLE


def _submitted_key(attempt: AttemptRecord) -> datetime:
    return attempt.submitted_at or attempt.started_at
