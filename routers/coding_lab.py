"""Coding lab endpoints - problems, solutions, grading and AI problem drafts."""

import logging

from fastapi import APIRouter, Depends

import app_state
from classroom.core.errors import ClassroomError
from classroom.engine import CodingLabService, ContentGenerator
from classroom.models import (
    CodingProblem,
    CodingProblemDraft,
    CodingProblemEntry,
    GenerateCodingProblemRequest,
    GeneratedCodingProblem,
    GradeRequest,
    LabSubmission,
    LabSubmitRequest,
    StudentContext,
)
from classroom.router import get_generator, get_student_context, get_teacher_id, to_http

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/coding-lab", tags=["Coding Lab"])


async def get_coding_lab() -> CodingLabService:
    return await app_state.get_coding_lab()


# =============================================================================
# STUDENT
# =============================================================================


@router.get("/problems", response_model=list[CodingProblemEntry])
async def list_problems(
    context: StudentContext = Depends(get_student_context),
    lab: CodingLabService = Depends(get_coding_lab),
):
    """Problems of the student's courses, earliest due date first."""
    try:
        return await lab.list_for_student(context)
    except ClassroomError as e:
        raise to_http(e) from e


@router.post("/problems/{problem_id}/submit", response_model=LabSubmission, status_code=201)
async def submit_solution(
    problem_id: str,
    request: LabSubmitRequest,
    context: StudentContext = Depends(get_student_context),
    lab: CodingLabService = Depends(get_coding_lab),
):
    try:
        return await lab.submit(context, problem_id, request.content)
    except ClassroomError as e:
        raise to_http(e) from e


# =============================================================================
# TEACHER
# =============================================================================


@router.post("/problems", response_model=CodingProblem, status_code=201)
async def create_problem(
    draft: CodingProblemDraft,
    teacher_id: str = Depends(get_teacher_id),
    lab: CodingLabService = Depends(get_coding_lab),
):
    try:
        return await lab.create_problem(draft, teacher_id)
    except ClassroomError as e:
        raise to_http(e) from e


@router.get("/courses/{course_id}/problems", response_model=list[CodingProblem])
async def list_course_problems(
    course_id: str,
    teacher_id: str = Depends(get_teacher_id),
    lab: CodingLabService = Depends(get_coding_lab),
):
    try:
        return await lab.list_for_course(course_id)
    except ClassroomError as e:
        raise to_http(e) from e


@router.get("/problems/{problem_id}/submissions", response_model=list[LabSubmission])
async def list_problem_submissions(
    problem_id: str,
    teacher_id: str = Depends(get_teacher_id),
    lab: CodingLabService = Depends(get_coding_lab),
):
    """Every solution to a problem, newest first."""
    try:
        return await lab.submissions_for_problem(problem_id)
    except ClassroomError as e:
        raise to_http(e) from e


@router.post("/submissions/{submission_id}/grade", response_model=LabSubmission)
async def grade_solution(
    submission_id: str,
    request: GradeRequest,
    teacher_id: str = Depends(get_teacher_id),
    lab: CodingLabService = Depends(get_coding_lab),
):
    try:
        return await lab.grade(
            submission_id, request.grade, request.feedback, grader_id=request.grader_id or teacher_id
        )
    except ClassroomError as e:
        raise to_http(e) from e


@router.post("/generate", response_model=GeneratedCodingProblem)
async def generate_problem(
    request: GenerateCodingProblemRequest,
    generator: ContentGenerator = Depends(get_generator),
):
    """Problem draft for a teacher to review; nothing is stored."""
    try:
        return await generator.generate_coding_problem(request.prompt)
    except ClassroomError as e:
        logger.error("Coding problem generation failed: %s", e.message)
        raise to_http(e) from e
