"""Attempt Registry - live attempt sessions and per-student catalogs."""

from collections.abc import Callable
from datetime import datetime, timedelta

from ..core.errors import NotFoundError
from ..core.logger import get_logger
from ..models.enums import AttemptStatus
from ..models.schemas import Quiz, utcnow
from ..models.state import StudentContext
from ..storage.learning_store import LearningStore
from .attempt import QuizAttemptSession
from .catalog import QuizCatalog
from .scoring_engine import QuizScoringEngine

logger = get_logger("registry")


class QuizAttemptRegistry:
    """Owns every in-memory attempt session of the process.

    Sessions are never persisted: only their submitted records reach the
    store. The registry stays bounded:

    - starting a quiz replaces the student's earlier session for that quiz
    - a submitted session is kept for review and retakes for ``session_ttl``
      seconds after submission
    - an unfinished session expires ``session_ttl`` seconds after its time
      limit would have run out (after start, for untimed quizzes)
    - a catalog is dropped once it is idle for ``session_ttl`` seconds and
      its student has no live session

    ``close()`` cancels every countdown on shutdown.
    """

    def __init__(
        self,
        store: LearningStore,
        scoring: QuizScoringEngine | None = None,
        *,
        allow_late_start: bool = True,
        tick_interval: float = 1.0,
        session_ttl: float = 900.0,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.scoring = scoring or QuizScoringEngine()
        self.allow_late_start = allow_late_start
        self.tick_interval = tick_interval
        self.session_ttl = session_ttl
        self.clock = clock
        self._sessions: dict[str, QuizAttemptSession] = {}
        self._catalogs: dict[str, QuizCatalog] = {}
        self._catalog_used: dict[str, datetime] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    @property
    def catalog_count(self) -> int:
        return len(self._catalogs)

    def catalog(self, student_id: str) -> QuizCatalog:
        """Catalog kept per student so submissions update it in place."""
        self.prune()
        catalog = self._catalogs.get(student_id)
        if catalog is None:
            catalog = QuizCatalog(self.store, clock=self.clock)
            self._catalogs[student_id] = catalog
        self._catalog_used[student_id] = self.clock()
        return catalog

    def create(self, quiz: Quiz, context: StudentContext) -> QuizAttemptSession:
        """New session for ``quiz``; an earlier one of the same student is released."""
        self.prune()
        for previous in self._sessions_for(context.student_id, quiz.id):
            previous.cancel()
            del self._sessions[previous.attempt_id]
            logger.info("Attempt session replaced", attempt_id=previous.attempt_id)

        session = QuizAttemptSession(
            quiz,
            context,
            self.store,
            self.scoring,
            allow_late_start=self.allow_late_start,
            tick_interval=self.tick_interval,
            on_submitted=self.catalog(context.student_id).record_submission,
            clock=self.clock,
        )
        self._sessions[session.attempt_id] = session
        return session

    def _sessions_for(self, student_id: str, quiz_id: str) -> list[QuizAttemptSession]:
        return [
            session
            for session in self._sessions.values()
            if session.context.student_id == student_id and session.quiz.id == quiz_id
        ]

    def get(self, attempt_id: str, student_id: str | None = None) -> QuizAttemptSession:
        """Look up a session; another student's session is reported as missing."""
        session = self._sessions.get(attempt_id)
        if session is None or (student_id and session.context.student_id != student_id):
            raise NotFoundError(f"Attempt not found: {attempt_id}")
        return session

    def discard(self, session: QuizAttemptSession) -> None:
        """Drop a session that never started."""
        self._sessions.pop(session.attempt_id, None)

    def remove(self, attempt_id: str, student_id: str | None = None) -> QuizAttemptSession:
        session = self.get(attempt_id, student_id)
        session.cancel()
        del self._sessions[attempt_id]
        return session

    # -------------------------------------------------------------------------
    # eviction
    # -------------------------------------------------------------------------

    def _expires_at(self, session: QuizAttemptSession) -> datetime | None:
        """None means the session holds nothing worth keeping."""
        ttl = timedelta(seconds=self.session_ttl)
        if session.status == AttemptStatus.SUBMITTED and session.outcome is not None:
            submitted_at = session.outcome.record.submitted_at or self.clock()
            return submitted_at + ttl
        if session.status == AttemptStatus.IN_PROGRESS and session.started_at is not None:
            return session.started_at + timedelta(minutes=session.quiz.time_limit) + ttl
        return None

    def prune(self, now: datetime | None = None) -> int:
        """Release expired sessions and idle catalogs.

        Returns:
            Number of sessions released
        """
        now = now or self.clock()
        expired = []
        for attempt_id, session in self._sessions.items():
            expires_at = self._expires_at(session)
            if expires_at is None or expires_at <= now:
                expired.append(attempt_id)
        for attempt_id in expired:
            self._sessions.pop(attempt_id).cancel()

        active_students = {session.context.student_id for session in self._sessions.values()}
        idle_after = timedelta(seconds=self.session_ttl)
        for student_id in list(self._catalogs):
            if student_id in active_students:
                continue
            if self._catalog_used.get(student_id, now) + idle_after <= now:
                del self._catalogs[student_id]
                self._catalog_used.pop(student_id, None)

        if expired:
            logger.info("Expired attempt sessions released", sessions=len(expired))
        return len(expired)

    def close(self) -> None:
        for session in self._sessions.values():
            session.cancel()
        count = len(self._sessions)
        self._sessions.clear()
        self._catalogs.clear()
        self._catalog_used.clear()
        if count:
            logger.info("Attempt sessions released", sessions=count)
