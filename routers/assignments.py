"""Assignment endpoints - authoring, listing, submission, grading and AI assistance."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

import app_state
from classroom.core.errors import ClassroomError, NotFoundError
from classroom.engine import AssignmentService, ContentGenerator
from classroom.models import (
    Assignment,
    AssignmentDraft,
    AssignmentEntry,
    FeedbackRequest,
    FeedbackSuggestion,
    GenerateAssignmentRequest,
    GeneratedAssignment,
    GradeRequest,
    StudentContext,
    Submission,
)
from classroom.router import (
    get_generator,
    get_store,
    get_student_context,
    get_teacher_id,
    to_http,
)
from classroom.storage import LearningStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["Assignments"])


async def get_assignment_service() -> AssignmentService:
    return await app_state.get_assignments()


@router.post("", response_model=Assignment, status_code=201)
async def create_assignment(
    draft: AssignmentDraft,
    teacher_id: str = Depends(get_teacher_id),
    service: AssignmentService = Depends(get_assignment_service),
):
    try:
        return await service.create(draft, teacher_id)
    except ClassroomError as e:
        raise to_http(e) from e


@router.get("", response_model=list[AssignmentEntry])
async def list_assignments(
    context: StudentContext = Depends(get_student_context),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Assignments of the student's courses, earliest due date first."""
    try:
        return await service.list_for_student(context)
    except ClassroomError as e:
        raise to_http(e) from e


@router.post("/{assignment_id}/submit", response_model=Submission)
async def submit_assignment(
    assignment_id: str,
    content: str = Form(""),
    file: Optional[UploadFile] = File(None),
    context: StudentContext = Depends(get_student_context),
    service: AssignmentService = Depends(get_assignment_service),
):
    """Submit text content, a file, or both (multipart form)."""
    file_name = file_data = None
    content_type = ""
    if file is not None and file.filename:
        file_name = file.filename
        file_data = await file.read()
        content_type = file.content_type or ""

    try:
        return await service.submit(
            context,
            assignment_id,
            content=content,
            file_name=file_name,
            file_data=file_data,
            content_type=content_type,
        )
    except ClassroomError as e:
        raise to_http(e) from e


@router.post("/submissions/{submission_id}/grade", response_model=Submission)
async def grade_submission(
    submission_id: str,
    request: GradeRequest,
    service: AssignmentService = Depends(get_assignment_service),
):
    try:
        return await service.grade(
            submission_id, request.grade, request.feedback, grader_id=request.grader_id
        )
    except ClassroomError as e:
        raise to_http(e) from e


@router.get("/courses/{course_id}/submissions", response_model=list[Submission])
async def list_course_submissions(
    course_id: str,
    service: AssignmentService = Depends(get_assignment_service),
):
    """Teacher view: every submission of a course, newest first."""
    try:
        return await service.list_for_course(course_id)
    except ClassroomError as e:
        raise to_http(e) from e


@router.post("/generate", response_model=GeneratedAssignment)
async def generate_assignment(
    request: GenerateAssignmentRequest,
    generator: ContentGenerator = Depends(get_generator),
):
    try:
        return await generator.generate_assignment(
            request.subject, request.topic, request.difficulty_level, request.grade
        )
    except ClassroomError as e:
        logger.error("Assignment generation failed: %s", e.message)
        raise to_http(e) from e


@router.post("/suggest-feedback", response_model=FeedbackSuggestion)
async def suggest_feedback(
    request: FeedbackRequest,
    store: LearningStore = Depends(get_store),
    generator: ContentGenerator = Depends(get_generator),
):
    """AI feedback on a submission, with a suggested grade when one is found."""
    try:
        submission = await store.get_submission(request.submission_id)
        if submission is None:
            raise NotFoundError(f"Submission not found: {request.submission_id}")
        assignment = await store.get_assignment(submission.assignment_id)
        if assignment is None:
            raise NotFoundError(f"Assignment not found: {submission.assignment_id}")

        feedback, suggested = await generator.suggest_feedback(
            submission.assignment_title or assignment.title,
            submission.content,
            assignment.points,
        )
    except ClassroomError as e:
        raise to_http(e) from e

    return FeedbackSuggestion(
        submission_id=submission.id,
        feedback=feedback,
        suggested_grade=suggested,
        points=assignment.points,
    )
