"""Coding Lab - programming problems, solutions and grading."""

from ..core.errors import NotFoundError, SubmissionValidationError
from ..core.logger import get_logger
from ..models.enums import LabSubmissionStatus
from ..models.schemas import (
    CodingProblem,
    CodingProblemDraft,
    CodingProblemEntry,
    LabSubmission,
    utcnow,
)
from ..models.state import StudentContext
from ..storage.learning_store import LearningStore

logger = get_logger("coding_lab")


class CodingLabService:
    """Assignment flow for coding problems: code in, grade out.

    Example:
        >>> lab = CodingLabService(store)
        >>> problem = await lab.create_problem(draft, teacher_id="t1")
        >>> entries = await lab.list_for_student(context)
        >>> submission = await lab.submit(context, problem.id, "print('hi')")
        >>> await lab.grade(submission.id, 9, "Nice", grader_id="t1")
    """

    def __init__(self, store: LearningStore, clock=utcnow):
        self.store = store
        self.clock = clock

    # -------------------------------------------------------------------------
    # teacher
    # -------------------------------------------------------------------------

    async def create_problem(self, draft: CodingProblemDraft, teacher_id: str) -> CodingProblem:
        if not teacher_id:
            raise SubmissionValidationError("A teacher id is required to create a problem")
        if not (draft.title.strip() and draft.description.strip() and draft.instructions.strip()):
            raise SubmissionValidationError("Please fill in all required fields")

        course = await self.store.get_course(draft.course_id) or {}
        problem = CodingProblem(
            title=draft.title.strip(),
            description=draft.description,
            instructions=draft.instructions,
            difficulty=draft.difficulty,
            language=draft.language,
            due_date=draft.due_date,
            start_code=draft.start_code,
            points=draft.points,
            course_id=draft.course_id,
            course_name=course.get("title", "") or "",
            teacher_id=teacher_id,
            created_at=self.clock(),
        )
        return await self.store.save_coding_problem(problem)

    async def list_for_course(self, course_id: str) -> list[CodingProblem]:
        """Teacher view: problems of a course, newest first."""
        problems = await self.store.coding_problems_for_course(course_id)
        problems.sort(key=lambda p: p.created_at, reverse=True)
        return problems

    async def submissions_for_problem(self, problem_id: str) -> list[LabSubmission]:
        """Teacher view: every solution to a problem, newest first."""
        await self._require_problem(problem_id)
        submissions = await self.store.lab_submissions_for_problem(problem_id)
        submissions.sort(key=lambda s: s.submitted_at, reverse=True)
        return submissions

    async def grade(
        self, submission_id: str, grade: int, feedback: str = "", grader_id: str = ""
    ) -> LabSubmission:
        """Grade a solution; ``0 <= grade <= problem.points``."""
        submission = await self.store.get_lab_submission(submission_id)
        if submission is None:
            raise NotFoundError(f"Lab submission not found: {submission_id}")
        problem = await self._require_problem(submission.problem_id)

        if not 0 <= grade <= problem.points:
            raise SubmissionValidationError(
                f"Please enter a valid grade between 0 and {problem.points}"
            )

        graded_at = self.clock()
        await self.store.update_lab_submission(
            submission_id,
            {
                "grade": grade,
                "feedback": feedback,
                "status": LabSubmissionStatus.GRADED.value,
                "graded_at": graded_at.isoformat(),
                "graded_by": grader_id,
            },
        )
        logger.info("Lab submission graded", submission_id=submission_id, grade=grade)
        return submission.model_copy(
            update={
                "grade": grade,
                "feedback": feedback,
                "status": LabSubmissionStatus.GRADED,
                "graded_at": graded_at,
                "graded_by": grader_id,
            }
        )

    # -------------------------------------------------------------------------
    # student
    # -------------------------------------------------------------------------

    async def _enrolled_courses(self, context: StudentContext) -> frozenset[str]:
        return context.enrolled_course_ids or frozenset(
            await self.store.enrolled_course_ids(context.student_id)
        )

    async def list_for_student(self, context: StudentContext) -> list[CodingProblemEntry]:
        """Problems of enrolled courses with the latest own solution attached.

        Sorted by due date ascending; undated problems come last.
        """
        course_ids = await self._enrolled_courses(context)
        if not course_ids:
            return []

        problems: list[CodingProblem] = []
        for course_id in sorted(course_ids):
            problems.extend(await self.store.coding_problems_for_course(course_id))

        latest: dict[str, LabSubmission] = {}
        for submission in await self.store.lab_submissions_for_student(context.student_id):
            current = latest.get(submission.problem_id)
            if current is None or submission.submitted_at > current.submitted_at:
                latest[submission.problem_id] = submission

        now = self.clock()
        entries = [
            CodingProblemEntry(
                problem=problem,
                submitted=problem.id in latest,
                past_due=problem.due_date is not None and now > problem.due_date,
                submission=latest.get(problem.id),
            )
            for problem in problems
        ]
        entries.sort(
            key=lambda e: (
                e.problem.due_date is None,
                e.problem.due_date.timestamp() if e.problem.due_date else 0.0,
            )
        )
        return entries

    async def submit(self, context: StudentContext, problem_id: str, content: str) -> LabSubmission:
        """Write one pending solution record.

        Raises:
            SubmissionValidationError: Empty solution
            NotFoundError: Unknown problem, or a course the student is not in
        """
        if not content.strip():
            raise SubmissionValidationError("Please provide a solution before submitting")

        problem = await self._require_problem(problem_id)
        if problem.course_id not in await self._enrolled_courses(context):
            raise NotFoundError(f"Coding problem not found: {problem_id}")

        submission = LabSubmission(
            problem_id=problem.id,
            user_id=context.student_id,
            student_name=context.name,
            content=content,
            submitted_at=self.clock(),
            teacher_id=problem.teacher_id,
            problem_title=problem.title,
            course_id=problem.course_id,
            course_name=problem.course_name,
            status=LabSubmissionStatus.PENDING,
        )
        saved = await self.store.save_lab_submission(submission)
        logger.info(
            "Solution submitted",
            submission_id=saved.id,
            problem_id=problem.id,
            student_id=context.student_id,
        )
        return saved

    async def _require_problem(self, problem_id: str) -> CodingProblem:
        problem = await self.store.get_coding_problem(problem_id)
        if problem is None:
            raise NotFoundError(f"Coding problem not found: {problem_id}")
        return problem
