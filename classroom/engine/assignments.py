"""Assignment Service - listing, submission and grading of assignments."""

from datetime import datetime

from ..core.errors import NotFoundError, SubmissionValidationError
from ..core.logger import get_logger
from ..models.schemas import Assignment, AssignmentDraft, AssignmentEntry, Submission, utcnow
from ..models.state import StudentContext
from ..storage.blobs import BlobStore
from ..storage.learning_store import LearningStore

logger = get_logger("assignments")


class AssignmentService:
    """Same flow as quizzes, without a timer.

    Example:
        >>> service = AssignmentService(store, blobs)
        >>> entries = await service.list_for_student(context)
        >>> submission = await service.submit(context, "a1", content="My essay")
        >>> await service.grade(submission.id, 8, "Good work", grader_id="t1")
    """

    def __init__(self, store: LearningStore, blobs: BlobStore | None = None, clock=utcnow):
        self.store = store
        self.blobs = blobs
        self.clock = clock

    async def list_for_student(self, context: StudentContext) -> list[AssignmentEntry]:
        """Assignments of enrolled courses, with the student's submission attached.

        Sorted by due date ascending; undated assignments come last.
        """
        course_ids = context.enrolled_course_ids or frozenset(
            await self.store.enrolled_course_ids(context.student_id)
        )
        if not course_ids:
            return []

        assignments = [a for a in await self.store.list_assignments() if a.course_id in course_ids]
        submissions = {
            s.assignment_id: s for s in await self.store.submissions_for_student(context.student_id)
        }

        entries = [
            AssignmentEntry(
                assignment=assignment,
                submitted=assignment.id in submissions,
                submission=submissions.get(assignment.id),
            )
            for assignment in assignments
        ]
        entries.sort(key=lambda e: (e.assignment.due_date is None, _timestamp(e.assignment)))
        return entries

    async def create(self, draft: AssignmentDraft, teacher_id: str) -> Assignment:
        """Teacher side: write a new assignment under ``assignments``."""
        if not teacher_id:
            raise SubmissionValidationError("A teacher id is required to create an assignment")
        course = await self.store.get_course(draft.course_id) or {}
        assignment = Assignment(
            title=draft.title,
            description=draft.description,
            course_id=draft.course_id,
            course_name=course.get("title", "") or "",
            due_date=draft.due_date,
            points=draft.points,
            teacher_id=teacher_id,
            assignment_type=draft.assignment_type,
            text_content=draft.text_content,
            file_url=draft.file_url,
        )
        saved = await self.store.save_assignment(assignment)
        logger.info("Assignment created", assignment_id=saved.id, teacher_id=teacher_id)
        return saved

    async def _require_assignment(self, assignment_id: str) -> Assignment:
        assignment = await self.store.get_assignment(assignment_id)
        if assignment is None:
            raise NotFoundError(f"Assignment not found: {assignment_id}")
        return assignment

    async def submit(
        self,
        context: StudentContext,
        assignment_id: str,
        content: str = "",
        file_name: str | None = None,
        file_data: bytes | None = None,
        content_type: str = "",
    ) -> Submission:
        """Write one submission record (``grade`` and ``feedback`` unset).

        Raises:
            SubmissionValidationError: Neither content nor a file was given
            NotFoundError: Unknown assignment
            StoreError: Upload or write failed
        """
        has_file = bool(file_name) and file_data is not None
        if not content.strip() and not has_file:
            raise SubmissionValidationError("Please provide either text content or upload a file")

        assignment = await self._require_assignment(assignment_id)

        file_url = None
        if has_file:
            if self.blobs is None:
                raise SubmissionValidationError("File uploads are not configured")
            file_url = await self.blobs.upload(file_name, file_data, content_type)

        submission = Submission(
            assignment_id=assignment.id,
            user_id=context.student_id,
            student_name=context.name,
            content=content,
            file_url=file_url,
            submitted_at=self.clock(),
            course_id=assignment.course_id,
            course_name=assignment.course_name,
            teacher_id=assignment.teacher_id,
            assignment_title=assignment.title,
        )
        saved = await self.store.save_submission(submission)
        logger.info(
            "Assignment submitted",
            submission_id=saved.id,
            assignment_id=assignment.id,
            student_id=context.student_id,
            has_file=has_file,
        )
        return saved

    async def grade(
        self, submission_id: str, grade: int, feedback: str = "", grader_id: str = ""
    ) -> Submission:
        """Grade a submission; ``0 <= grade <= assignment.points``."""
        submission = await self.store.get_submission(submission_id)
        if submission is None:
            raise NotFoundError(f"Submission not found: {submission_id}")
        assignment = await self._require_assignment(submission.assignment_id)

        if not 0 <= grade <= assignment.points:
            raise SubmissionValidationError(
                f"Please enter a valid grade between 0 and {assignment.points}"
            )

        graded_at = self.clock()
        fields = {
            "grade": grade,
            "feedback": feedback,
            "graded_at": graded_at.isoformat(),
            "graded_by": grader_id,
        }
        await self.store.update_submission(submission_id, fields)
        logger.info("Submission graded", submission_id=submission_id, grade=grade)
        return submission.model_copy(
            update={
                "grade": grade,
                "feedback": feedback,
                "graded_at": graded_at,
                "graded_by": grader_id,
            }
        )

    async def list_for_course(self, course_id: str) -> list[Submission]:
        """Teacher view: all submissions of a course, newest first."""
        submissions = [s for s in await self.store.list_submissions() if s.course_id == course_id]
        submissions.sort(key=lambda s: s.submitted_at, reverse=True)
        return submissions

    def is_past_due(self, assignment: Assignment, now: datetime | None = None) -> bool:
        return assignment.is_past_due(now or self.clock())

    @staticmethod
    def format_content_for_student(assignment: Assignment) -> str:
        """Description followed by the text content, when it adds something."""
        content = assignment.description
        if assignment.text_content and assignment.text_content != assignment.description:
            content = f"{content}\n\n{assignment.text_content}" if content else assignment.text_content
        return content


def _timestamp(assignment: Assignment) -> float:
    return assignment.due_date.timestamp() if assignment.due_date else 0.0
