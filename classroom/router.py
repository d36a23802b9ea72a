"""Quiz Router - catalog, attempt lifecycle, authoring and quiz generation endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Query

import app_state

from .core.errors import ClassroomError, NotFoundError
from .engine.authoring import QuizAuthoringService
from .engine.content_generator import ContentGenerator
from .engine.registry import QuizAttemptRegistry
from .models.enums import CatalogFilter
from .models.schemas import (
    AnswerRequest,
    AttemptView,
    CatalogEntry,
    GenerateFromPromptRequest,
    GenerateQuizRequest,
    GenerateQuizResponse,
    Quiz,
    QuizDraft,
    ReviewItem,
    SubmitResponse,
)
from .models.state import StudentContext
from .storage.learning_store import LearningStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quiz", tags=["Quiz"])


def to_http(error: ClassroomError) -> HTTPException:
    """Translate an application error into its HTTP status."""
    return HTTPException(status_code=error.status_code, detail=error.message)


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================


async def get_store() -> LearningStore:
    try:
        return await app_state.get_store()
    except ClassroomError as e:
        raise to_http(e) from e


async def get_registry() -> QuizAttemptRegistry:
    return await app_state.get_registry()


def get_generator() -> ContentGenerator:
    return app_state.get_generator()


async def get_authoring() -> QuizAuthoringService:
    return await app_state.get_authoring()


def get_teacher_id(
    x_teacher_id: str = Header(..., description="ID of the acting teacher"),
) -> str:
    if not x_teacher_id.strip():
        raise HTTPException(status_code=401, detail="Missing teacher id")
    return x_teacher_id.strip()


async def get_student_context(
    x_student_id: str = Header(..., description="ID of the acting student"),
    x_student_name: str = Header("", description="Display name of the student"),
    store: LearningStore = Depends(get_store),
) -> StudentContext:
    """Explicit session object built from headers plus stored enrollments."""
    if not x_student_id.strip():
        raise HTTPException(status_code=401, detail="Missing student id")
    try:
        return await store.load_context(x_student_id.strip(), x_student_name)
    except ClassroomError as e:
        raise to_http(e) from e


# =============================================================================
# CATALOG
# =============================================================================


@router.get("/catalog", response_model=list[CatalogEntry])
async def get_catalog(
    kind: CatalogFilter = Query(CatalogFilter.ALL, alias="filter"),
    context: StudentContext = Depends(get_student_context),
    registry: QuizAttemptRegistry = Depends(get_registry),
):
    """Published, active quizzes of the student's courses.

    - ``filter=pending``: not yet completed
    - ``filter=completed``: with the stored score
    """
    catalog = registry.catalog(context.student_id)
    try:
        await catalog.load(context)
    except ClassroomError as e:
        raise to_http(e) from e
    return catalog.filter_entries(kind)


# =============================================================================
# ATTEMPT LIFECYCLE
# =============================================================================


@router.post("/{quiz_id}/start", response_model=AttemptView)
async def start_attempt(
    quiz_id: str,
    schedule: bool = True,
    context: StudentContext = Depends(get_student_context),
    store: LearningStore = Depends(get_store),
    registry: QuizAttemptRegistry = Depends(get_registry),
):
    """Start an attempt.

    With ``schedule=true`` (default) the countdown runs server-side and
    submits automatically when time is up. With ``schedule=false`` the
    client drives it through ``/attempts/{id}/tick``.
    """
    try:
        quiz = await store.get_quiz(quiz_id)
        if quiz is None:
            raise NotFoundError(f"Quiz not found: {quiz_id}")

        session = registry.create(quiz, context)
        try:
            session.start(schedule=schedule)
        except ClassroomError:
            registry.discard(session)
            raise
    except ClassroomError as e:
        raise to_http(e) from e

    return session.to_view()


@router.get("/attempts/{attempt_id}", response_model=AttemptView)
async def get_attempt(
    attempt_id: str,
    context: StudentContext = Depends(get_student_context),
    registry: QuizAttemptRegistry = Depends(get_registry),
):
    try:
        return registry.get(attempt_id, context.student_id).to_view()
    except ClassroomError as e:
        raise to_http(e) from e


@router.post("/attempts/{attempt_id}/answer", response_model=AttemptView)
async def select_answer(
    attempt_id: str,
    request: AnswerRequest,
    context: StudentContext = Depends(get_student_context),
    registry: QuizAttemptRegistry = Depends(get_registry),
):
    try:
        session = registry.get(attempt_id, context.student_id)
        session.select_answer(request.question_index, request.option_index)
    except ClassroomError as e:
        raise to_http(e) from e
    return session.to_view()


@router.post("/attempts/{attempt_id}/tick", response_model=AttemptView)
async def tick_attempt(
    attempt_id: str,
    context: StudentContext = Depends(get_student_context),
    registry: QuizAttemptRegistry = Depends(get_registry),
):
    """Advance a client-driven countdown by one second.

    Attempts started with ``schedule=true`` answer 409: the server owns
    their countdown.
    """
    try:
        session = registry.get(attempt_id, context.student_id)
        await session.tick()
    except ClassroomError as e:
        raise to_http(e) from e
    return session.to_view()


@router.post("/attempts/{attempt_id}/submit", response_model=SubmitResponse)
async def submit_attempt(
    attempt_id: str,
    context: StudentContext = Depends(get_student_context),
    registry: QuizAttemptRegistry = Depends(get_registry),
):
    """Score and persist the attempt.

    A failed store write still returns the score, with ``persisted=false``
    and the error message.
    """
    try:
        session = registry.get(attempt_id, context.student_id)
        outcome = await session.submit()
    except ClassroomError as e:
        raise to_http(e) from e

    return SubmitResponse(
        attempt=session.to_view(),
        record=outcome.record,
        persisted=outcome.persisted,
        error=outcome.error,
        correct_count=outcome.correct_count,
    )


@router.get("/attempts/{attempt_id}/review", response_model=list[ReviewItem])
async def review_attempt(
    attempt_id: str,
    context: StudentContext = Depends(get_student_context),
    registry: QuizAttemptRegistry = Depends(get_registry),
):
    try:
        cursor = registry.get(attempt_id, context.student_id).review()
    except ClassroomError as e:
        raise to_http(e) from e
    return list(cursor)


@router.post("/attempts/{attempt_id}/reset", response_model=AttemptView)
async def reset_attempt(
    attempt_id: str,
    context: StudentContext = Depends(get_student_context),
    registry: QuizAttemptRegistry = Depends(get_registry),
):
    """Retake a submitted quiz with cleared answers and a fresh timer."""
    try:
        session = registry.get(attempt_id, context.student_id)
        session.reset()
    except ClassroomError as e:
        raise to_http(e) from e
    return session.to_view()


@router.delete("/attempts/{attempt_id}")
async def cancel_attempt(
    attempt_id: str,
    context: StudentContext = Depends(get_student_context),
    registry: QuizAttemptRegistry = Depends(get_registry),
):
    """Abandon the attempt and release its countdown."""
    try:
        session = registry.remove(attempt_id, context.student_id)
    except ClassroomError as e:
        raise to_http(e) from e
    return {"attempt_id": attempt_id, "status": session.status.value, "cancelled": True}


# =============================================================================
# AUTHORING
# =============================================================================


@router.post("", response_model=Quiz, status_code=201)
async def create_quiz(
    draft: QuizDraft,
    teacher_id: str = Depends(get_teacher_id),
    authoring: QuizAuthoringService = Depends(get_authoring),
):
    """Save a teacher's quiz; published right away unless ``publish`` is false.

    A published quiz needs exactly the configured number of questions
    (``QUIZ_QUESTION_COUNT``, 10 by default).
    """
    try:
        return await authoring.create(draft, teacher_id)
    except ClassroomError as e:
        raise to_http(e) from e


@router.post("/{quiz_id}/publish", response_model=Quiz)
async def publish_quiz(
    quiz_id: str,
    teacher_id: str = Depends(get_teacher_id),
    authoring: QuizAuthoringService = Depends(get_authoring),
):
    try:
        return await authoring.publish(quiz_id, teacher_id)
    except ClassroomError as e:
        raise to_http(e) from e


@router.get("/courses/{course_id}", response_model=list[Quiz])
async def list_course_quizzes(
    course_id: str,
    teacher_id: str = Depends(get_teacher_id),
    authoring: QuizAuthoringService = Depends(get_authoring),
):
    """Teacher view: quizzes of a course, drafts included, newest first."""
    try:
        return await authoring.list_for_course(course_id)
    except ClassroomError as e:
        raise to_http(e) from e


# =============================================================================
# GENERATION
# =============================================================================


@router.post("/generate", response_model=GenerateQuizResponse)
async def generate_quiz(
    request: GenerateQuizRequest,
    generator: ContentGenerator = Depends(get_generator),
):
    """Practice quiz in the line format; nothing is stored."""
    try:
        return await generator.generate_quiz(request.topic, request.difficulty, request.num_questions)
    except ClassroomError as e:
        logger.error("Quiz generation failed: %s", e.message)
        raise to_http(e) from e


@router.post("/generate-from-prompt", response_model=GenerateQuizResponse)
async def generate_quiz_from_prompt(
    request: GenerateFromPromptRequest,
    generator: ContentGenerator = Depends(get_generator),
):
    """Draft quiz in JSON mode for a teacher to review before saving."""
    try:
        return await generator.generate_quiz_from_prompt(request.prompt, request.num_questions)
    except ClassroomError as e:
        logger.error("Quiz generation failed: %s", e.message)
        raise to_http(e) from e
