"""Quiz Attempt Session - one student's timed interaction with one quiz.

States::

    NOT_STARTED --start()--> IN_PROGRESS --submit()/timeout--> SUBMITTED
         ^                      |    ^                              |
         +------cancel()--------+    +-----------reset()------------+

The attempt lives in memory until it is submitted; only the submitted
record is ever written to the store.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from ..core.errors import AttemptStateError, AttemptValidationError
from ..core.logger import get_logger
from ..models.enums import AttemptStatus, SubmitTrigger
from ..models.schemas import (
    OPTION_COUNT,
    UNANSWERED,
    AttemptRecord,
    AttemptView,
    Quiz,
    utcnow,
)
from ..models.state import StudentContext, SubmitOutcome
from .review import ReviewCursor
from .scoring_engine import QuizScoringEngine
from .timer import CountdownTimer, format_time

if TYPE_CHECKING:
    from ..storage.learning_store import LearningStore

logger = get_logger("attempt")


class QuizAttemptSession:
    """State machine for a single quiz attempt.

    Args:
        quiz: Published quiz being attempted
        context: Explicit student session (id, name, enrolled courses)
        store: Where the submitted record is written; None keeps the
            attempt local (practice quizzes)
        scoring: Scoring engine (default pass mark 70)
        allow_late_start: Start is allowed after the due date
        tick_interval: Seconds between scheduled ticks
        on_submitted: Called with the stored record after a successful write
        clock: Source of timestamps

    Example:
        >>> session = QuizAttemptSession(quiz, context, store)
        >>> session.start()
        >>> session.select_answer(0, 2)
        >>> outcome = await session.submit()
        >>> cursor = session.review()
    """

    def __init__(
        self,
        quiz: Quiz,
        context: StudentContext,
        store: LearningStore | None = None,
        scoring: QuizScoringEngine | None = None,
        *,
        allow_late_start: bool = True,
        tick_interval: float = 1.0,
        on_submitted: Callable[[AttemptRecord], None] | None = None,
        clock: Callable[[], datetime] = utcnow,
        attempt_id: str | None = None,
    ):
        self.quiz = quiz
        self.context = context
        self.store = store
        self.scoring = scoring or QuizScoringEngine()
        self.allow_late_start = allow_late_start
        self.tick_interval = tick_interval
        self.on_submitted = on_submitted
        self.clock = clock
        self.attempt_id = attempt_id or uuid.uuid4().hex

        self.status = AttemptStatus.NOT_STARTED
        self.answers: list[int] = []
        self.started_at: datetime | None = None
        self.timer: CountdownTimer | None = None
        self.outcome: SubmitOutcome | None = None
        self.history: list[AttemptRecord] = []
        self._scheduled = False

    # -------------------------------------------------------------------------
    # properties
    # -------------------------------------------------------------------------

    @property
    def question_count(self) -> int:
        return self.quiz.question_count

    @property
    def timed(self) -> bool:
        return self.quiz.time_limit > 0

    @property
    def remaining_seconds(self) -> int | None:
        """Seconds left, None for untimed quizzes or before start."""
        if self.timer is None:
            return None
        return self.timer.remaining

    @property
    def answered_count(self) -> int:
        return sum(1 for answer in self.answers if answer != UNANSWERED)

    @property
    def score(self) -> int | None:
        return self.outcome.score if self.outcome else None

    @property
    def passed(self) -> bool | None:
        if self.outcome is None:
            return None
        return self.scoring.passed(self.outcome.score)

    # -------------------------------------------------------------------------
    # transitions
    # -------------------------------------------------------------------------

    def _check_can_start(self) -> None:
        if not self.quiz.published:
            raise AttemptValidationError("Quiz is not published")
        if not self.context.is_enrolled(self.quiz.course_id):
            raise AttemptValidationError("Student is not enrolled in this course")
        if not self.allow_late_start and self.quiz.is_past_due(self.clock()):
            raise AttemptValidationError("Quiz is past its due date")

    def _begin(self) -> None:
        self.answers = [UNANSWERED] * self.question_count
        self.started_at = self.clock()
        self.outcome = None
        self.status = AttemptStatus.IN_PROGRESS
        self.timer = None
        if self.timed:
            self.timer = CountdownTimer(self.quiz.time_limit * 60)
            if self._scheduled:
                self.timer.run(self._advance, self.tick_interval)

    def start(self, schedule: bool = False) -> None:
        """Begin the attempt.

        Args:
            schedule: Run the countdown as an asyncio task (needs a running
                loop). When False, ``tick()`` must be driven by the caller.

        Raises:
            AttemptStateError: Attempt already started
            AttemptValidationError: Quiz unpublished, student not enrolled,
                or past due with late start disabled
        """
        if self.status != AttemptStatus.NOT_STARTED:
            raise AttemptStateError(f"Attempt already {self.status.value}")
        self._check_can_start()

        self._scheduled = schedule
        self._begin()
        logger.info(
            "Attempt started",
            attempt_id=self.attempt_id,
            quiz_id=self.quiz.id,
            student_id=self.context.student_id,
            time_limit=self.quiz.time_limit,
        )

    def select_answer(self, question_index: int, option_index: int) -> None:
        """Record (or overwrite) the answer for one question."""
        if self.status != AttemptStatus.IN_PROGRESS:
            raise AttemptStateError("Answers can only be selected while in progress")
        if not 0 <= question_index < self.question_count:
            raise AttemptValidationError(
                f"Question index {question_index} out of range (0-{self.question_count - 1})"
            )
        if not 0 <= option_index < OPTION_COUNT:
            raise AttemptValidationError(
                f"Option index {option_index} out of range (0-{OPTION_COUNT - 1})"
            )
        self.answers[question_index] = option_index

    async def tick(self) -> SubmitOutcome | None:
        """Advance a caller-driven countdown one second.

        Only valid for attempts started with ``schedule=False``; a scheduled
        countdown has a single ticker, the session's own task.

        Returns:
            The submit outcome on the expiring tick, None otherwise

        Raises:
            AttemptStateError: The countdown is run by the scheduled task
        """
        if self._scheduled and self.status == AttemptStatus.IN_PROGRESS and self.timer is not None:
            raise AttemptStateError("Countdown is run by the server for this attempt")
        return await self._advance()

    async def _advance(self) -> SubmitOutcome | None:
        """One logical second; auto-submits on reaching zero."""
        if self.status != AttemptStatus.IN_PROGRESS or self.timer is None:
            return None
        if not self.timer.tick():
            return None

        logger.info("Time is up, auto-submitting", attempt_id=self.attempt_id)
        return await self.submit(SubmitTrigger.TIMEOUT)

    async def submit(self, trigger: SubmitTrigger = SubmitTrigger.MANUAL) -> SubmitOutcome:
        """Score the attempt and write one immutable record.

        The state changes to SUBMITTED before the store write, so a tick
        racing a manual submit can never submit twice. A failed write is
        returned as ``persisted=False`` with the error message; the score
        stays available locally.

        Raises:
            AttemptStateError: Attempt is not in progress
        """
        if self.status != AttemptStatus.IN_PROGRESS:
            raise AttemptStateError(f"Cannot submit an attempt that is {self.status.value}")

        self._stop_timer()
        self.status = AttemptStatus.SUBMITTED
        answers = list(self.answers)
        correct = self.scoring.count_correct(self.quiz.questions, answers)
        record = AttemptRecord(
            quiz_id=self.quiz.id,
            student_id=self.context.student_id,
            student_name=self.context.name,
            course_id=self.quiz.course_id,
            answers=answers,
            started_at=self.started_at or self.clock(),
            submitted_at=self.clock(),
            score=self.scoring.calculate_percentage(correct, self.question_count),
            status=AttemptStatus.SUBMITTED,
            trigger=trigger,
        )
        outcome = SubmitOutcome(record=record, correct_count=correct)
        self.outcome = outcome

        if self.store is None:
            logger.info("Local attempt scored", attempt_id=self.attempt_id, score=record.score)
            return outcome

        try:
            saved = await self.store.save_attempt(record)
        except Exception as e:
            outcome.error = f"Failed to save attempt: {e}"
            logger.error(
                "Failed to persist attempt",
                attempt_id=self.attempt_id,
                quiz_id=self.quiz.id,
                error=str(e),
            )
            return outcome

        outcome.record = saved
        outcome.persisted = True
        logger.info(
            "Attempt submitted",
            attempt_id=self.attempt_id,
            record_id=saved.id,
            score=saved.score,
            trigger=trigger.value,
        )
        if self.on_submitted is not None:
            self.on_submitted(saved)
        return outcome

    def review(self) -> ReviewCursor:
        """Read-only traversal of the submitted answers."""
        if self.status != AttemptStatus.SUBMITTED:
            raise AttemptStateError("Review is only available after submission")
        return ReviewCursor(self.quiz.questions, list(self.answers))

    def reset(self) -> None:
        """Retake: back to IN_PROGRESS with cleared answers and a fresh timer.

        The previously submitted record is kept in ``history`` (and in the
        store); nothing is deleted.
        """
        if self.status != AttemptStatus.SUBMITTED:
            raise AttemptStateError("Only a submitted attempt can be reset")
        if self.outcome is not None:
            self.history.append(self.outcome.record)
        self._begin()
        logger.info("Attempt reset", attempt_id=self.attempt_id, retakes=len(self.history))

    def cancel(self) -> None:
        """Stop the countdown and abandon an in-progress attempt.

        Safe in any state and idempotent. A submitted attempt keeps its
        result; only its timer resources are released.
        """
        self._stop_timer()
        if self.status == AttemptStatus.IN_PROGRESS:
            self.status = AttemptStatus.NOT_STARTED
            self.answers = []
            self.started_at = None
            self.timer = None
            logger.info("Attempt abandoned", attempt_id=self.attempt_id)

    def _stop_timer(self) -> None:
        if self.timer is not None:
            self.timer.cancel()

    # -------------------------------------------------------------------------
    # views
    # -------------------------------------------------------------------------

    def to_view(self) -> AttemptView:
        remaining = self.remaining_seconds
        return AttemptView(
            attempt_id=self.attempt_id,
            quiz_id=self.quiz.id,
            status=self.status,
            answers=list(self.answers),
            remaining_seconds=remaining,
            remaining_display=format_time(remaining) if remaining is not None else None,
            score=self.score,
            passed=self.passed,
            trigger=self.outcome.record.trigger if self.outcome else None,
        )
