"""Quiz Authoring - teacher side of the quiz lifecycle."""

from ..core.errors import NotFoundError, QuizStateError, QuizValidationError
from ..core.logger import get_logger
from ..models.schemas import Quiz, QuizDraft, utcnow
from ..storage.learning_store import LearningStore

logger = get_logger("authoring")


class QuizAuthoringService:
    """Creates and publishes quizzes for a teacher's courses.

    A published quiz is what students see in their catalog and can never
    be published again. Question and option shape is already enforced by
    the ``Question`` model; this service adds the per-quiz rules.

    Example:
        >>> authoring = QuizAuthoringService(store)
        >>> quiz = await authoring.create(draft, teacher_id="t1")
        >>> quiz.published
        True
    """

    def __init__(self, store: LearningStore, clock=utcnow, required_questions: int = 10):
        self.store = store
        self.clock = clock
        self.required_questions = required_questions

    def _check_question_count(self, count: int) -> None:
        if self.required_questions and count != self.required_questions:
            raise QuizValidationError(
                f"Quiz must have exactly {self.required_questions} questions."
            )

    async def _course_name(self, course_id: str) -> str:
        course = await self.store.get_course(course_id)
        return (course or {}).get("title", "") or ""

    async def create(self, draft: QuizDraft, teacher_id: str) -> Quiz:
        """Write a new quiz; published unless ``draft.publish`` is False.

        Raises:
            QuizValidationError: Missing teacher or wrong question count
        """
        if not teacher_id:
            raise QuizValidationError("A teacher id is required to create a quiz")
        if draft.publish:
            self._check_question_count(len(draft.questions))

        quiz = Quiz(
            title=draft.title,
            description=draft.description,
            questions=draft.questions,
            time_limit=draft.time_limit,
            due_date=draft.due_date,
            published=draft.publish,
            is_active=True,
            course_id=draft.course_id,
            course_name=await self._course_name(draft.course_id),
            teacher_id=teacher_id,
            created_at=self.clock(),
            topic=draft.topic,
            difficulty=draft.difficulty,
        )
        saved = await self.store.save_quiz(quiz)
        logger.info(
            "Quiz created",
            quiz_id=saved.id,
            teacher_id=teacher_id,
            published=saved.published,
            questions=saved.question_count,
        )
        return saved

    async def publish(self, quiz_id: str, teacher_id: str) -> Quiz:
        """Publish a draft. Another teacher's quiz is reported as missing.

        Raises:
            NotFoundError: Unknown quiz or not owned by ``teacher_id``
            QuizStateError: Already published
            QuizValidationError: Wrong question count
        """
        quiz = await self.store.get_quiz(quiz_id)
        if quiz is None or quiz.teacher_id != teacher_id:
            raise NotFoundError(f"Quiz not found: {quiz_id}")
        if quiz.published:
            raise QuizStateError("Quiz is already published")
        self._check_question_count(quiz.question_count)

        published = await self.store.save_quiz(quiz.model_copy(update={"published": True}))
        logger.info("Quiz published", quiz_id=quiz_id, teacher_id=teacher_id)
        return published

    async def list_for_course(self, course_id: str) -> list[Quiz]:
        """Teacher view: every quiz of a course, drafts included, newest first."""
        quizzes = await self.store.quizzes_for_course(course_id)
        quizzes.sort(key=lambda q: q.created_at, reverse=True)
        return quizzes
