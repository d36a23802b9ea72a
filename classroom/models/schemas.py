"""Pydantic schemas - stored records and request/response models."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import AttemptStatus, CatalogStatus, LabSubmissionStatus, QuizDifficulty, SubmitTrigger

OPTION_COUNT = 4
UNANSWERED = -1
DEFAULT_START_CODE = "// Your starter code here"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes coming from the store are treated as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


# =============================================================================
# STORED RECORDS
# =============================================================================


class Question(BaseModel):
    """Multiple choice question with exactly four options."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str = Field(..., min_length=1, description="Prompt text")
    options: list[str] = Field(
        ..., min_length=OPTION_COUNT, max_length=OPTION_COUNT, description="4 options"
    )
    correct_answer: int = Field(
        ..., ge=0, le=OPTION_COUNT - 1, alias="correctAnswer", description="Zero-based index"
    )
    explanation: str = Field(default="", description="Why the correct option is correct")


class Quiz(BaseModel):
    """Quiz definition; immutable once published."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = ""
    title: str = Field(..., min_length=1)
    description: str = ""
    questions: list[Question] = Field(default_factory=list)
    time_limit: int = Field(default=0, ge=0, description="Minutes, 0 = unlimited")
    due_date: datetime | None = None
    published: bool = False
    is_active: bool = True
    course_id: str = ""
    course_name: str = ""
    teacher_id: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    topic: str = ""
    difficulty: QuizDifficulty = QuizDifficulty.MEDIUM

    @field_validator("due_date", "created_at")
    @classmethod
    def _normalize_tz(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def is_past_due(self, now: datetime | None = None) -> bool:
        if self.due_date is None:
            return False
        return self.due_date < (now or utcnow())


class AttemptRecord(BaseModel):
    """One submitted attempt as written to ``quiz_attempts``."""

    id: str = ""
    quiz_id: str
    student_id: str
    student_name: str = ""
    course_id: str = ""
    answers: list[int]
    started_at: datetime
    submitted_at: datetime | None = None
    score: int = Field(..., ge=0, le=100)
    status: AttemptStatus = AttemptStatus.SUBMITTED
    trigger: SubmitTrigger | None = None

    @field_validator("started_at", "submitted_at")
    @classmethod
    def _normalize_tz(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


class Enrollment(BaseModel):
    """Student enrolled in a course."""

    user_id: str
    course_id: str


class Assignment(BaseModel):
    """Assignment published by a teacher."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    title: str = Field(..., min_length=1)
    description: str = ""
    course_id: str = ""
    course_name: str = ""
    due_date: datetime | None = None
    points: int = Field(default=10, ge=0)
    teacher_id: str = ""
    assignment_type: str = Field(default="text", alias="assignmentType")
    text_content: str = Field(default="", alias="textContent")
    file_url: str | None = None
    ai_generated_content: str | None = Field(default=None, alias="aiGeneratedContent")

    @field_validator("due_date")
    @classmethod
    def _normalize_tz(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    def is_past_due(self, now: datetime | None = None) -> bool:
        if self.due_date is None:
            return False
        return (now or utcnow()) > self.due_date


class Submission(BaseModel):
    """Student submission for an assignment."""

    id: str = ""
    assignment_id: str
    user_id: str
    student_name: str = ""
    content: str = ""
    file_url: str | None = None
    submitted_at: datetime = Field(default_factory=utcnow)
    course_id: str = ""
    course_name: str = ""
    teacher_id: str = ""
    assignment_title: str = ""
    grade: int | None = None
    feedback: str | None = None
    graded_at: datetime | None = None
    graded_by: str | None = None

    @field_validator("submitted_at", "graded_at")
    @classmethod
    def _normalize_tz(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    @property
    def graded(self) -> bool:
        return self.grade is not None


class CodingProblem(BaseModel):
    """Coding-lab problem, stored under ``codingProblems``."""

    id: str = ""
    title: str = Field(..., min_length=1)
    description: str = ""
    instructions: str = ""
    difficulty: QuizDifficulty = QuizDifficulty.MEDIUM
    language: str = "javascript"
    due_date: datetime | None = None
    start_code: str = DEFAULT_START_CODE
    points: int = Field(default=10, ge=0)
    course_id: str = ""
    course_name: str = ""
    teacher_id: str = ""
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("due_date", "created_at")
    @classmethod
    def _normalize_tz(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    @field_validator("language")
    @classmethod
    def _lower_language(cls, value: str) -> str:
        return value.strip().lower() or "javascript"


class LabSubmission(BaseModel):
    """Student solution to a coding problem, stored under ``lab_submissions``."""

    id: str = ""
    problem_id: str
    user_id: str
    student_name: str = ""
    content: str
    submitted_at: datetime = Field(default_factory=utcnow)
    teacher_id: str = ""
    problem_title: str = ""
    course_id: str = ""
    course_name: str = ""
    status: LabSubmissionStatus = LabSubmissionStatus.PENDING
    grade: int | None = None
    feedback: str | None = None
    graded_at: datetime | None = None
    graded_by: str | None = None

    @field_validator("submitted_at", "graded_at")
    @classmethod
    def _normalize_tz(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


# =============================================================================
# VIEWS
# =============================================================================


class CatalogEntry(BaseModel):
    """Quiz as listed in a student's catalog."""

    quiz: Quiz
    completed: bool = False
    score: int | None = None
    status: CatalogStatus = CatalogStatus.AVAILABLE


class AssignmentEntry(BaseModel):
    """Assignment as listed for a student, with their submission if any."""

    assignment: Assignment
    submitted: bool = False
    submission: Submission | None = None


class CodingProblemEntry(BaseModel):
    """Coding problem as listed for a student."""

    problem: CodingProblem
    submitted: bool = False
    past_due: bool = False
    submission: LabSubmission | None = None


class ReviewItem(BaseModel):
    """One question seen in review mode."""

    index: int
    question: str
    options: list[str]
    selected: int
    correct_answer: int
    is_correct: bool
    explanation: str = ""


class AttemptView(BaseModel):
    """Current state of an attempt as returned by the API."""

    attempt_id: str
    quiz_id: str
    status: AttemptStatus
    answers: list[int]
    remaining_seconds: int | None = None
    remaining_display: str | None = None
    score: int | None = None
    passed: bool | None = None
    trigger: SubmitTrigger | None = None


class SubmitResponse(BaseModel):
    """Result of a submit call; ``persisted`` is False when the store write failed."""

    attempt: AttemptView
    record: AttemptRecord
    persisted: bool
    error: str | None = None
    correct_count: int


# =============================================================================
# REQUESTS
# =============================================================================


class AnswerRequest(BaseModel):
    question_index: int = Field(..., description="Zero-based question index")
    option_index: int = Field(..., description="Zero-based option index (0-3)")


class GenerateQuizRequest(BaseModel):
    """Request for the line-format quiz generator."""

    topic: str = Field(..., description="Quiz topic")
    difficulty: QuizDifficulty = QuizDifficulty.MEDIUM
    num_questions: int = Field(default=5, ge=1, le=20)


class GenerateFromPromptRequest(BaseModel):
    """Request for the JSON-format quiz generator."""

    prompt: str = Field(..., description="Free-form quiz topic or instructions")
    num_questions: int = Field(default=10, ge=1, le=20)


class GenerateAssignmentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subject: str
    topic: str
    difficulty_level: str | None = Field(default=None, alias="difficultyLevel")
    grade: str | None = None


class GradeRequest(BaseModel):
    grade: int
    feedback: str = ""
    grader_id: str = ""


class GeneratedAssignment(BaseModel):
    title: str
    description: str


class FeedbackRequest(BaseModel):
    submission_id: str


class FeedbackSuggestion(BaseModel):
    submission_id: str = ""
    feedback: str
    suggested_grade: int | None = None
    points: int


class GenerateQuizResponse(BaseModel):
    title: str
    description: str = ""
    topic: str
    difficulty: QuizDifficulty
    total_questions: int
    questions: list[Question]


class QuizDraft(BaseModel):
    """Quiz as authored by a teacher before it reaches ``quizzes``."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    description: str = ""
    course_id: str = Field(..., min_length=1)
    questions: list[Question] = Field(..., min_length=1)
    time_limit: int = Field(default=30, ge=0, description="Minutes, 0 = unlimited")
    due_date: datetime | None = None
    topic: str = ""
    difficulty: QuizDifficulty = QuizDifficulty.MEDIUM
    publish: bool = True


class AssignmentDraft(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    description: str = ""
    course_id: str = Field(..., min_length=1)
    due_date: datetime | None = None
    points: int = Field(default=10, ge=1)
    assignment_type: str = Field(default="text", alias="assignmentType")
    text_content: str = Field(default="", alias="textContent")
    file_url: str | None = None


class CodingProblemDraft(BaseModel):
    """Coding problem as authored by a teacher."""

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    instructions: str = Field(..., min_length=1)
    course_id: str = Field(..., min_length=1)
    difficulty: QuizDifficulty = QuizDifficulty.MEDIUM
    language: str = "javascript"
    due_date: datetime | None = None
    start_code: str = DEFAULT_START_CODE
    points: int = Field(default=10, ge=1)


class LabSubmitRequest(BaseModel):
    content: str = Field(..., description="Solution source code")


class GenerateCodingProblemRequest(BaseModel):
    prompt: str = Field(..., description="What the problem should exercise")


class GeneratedCodingProblem(BaseModel):
    """Coding problem parsed from a model reply; fields feed a CodingProblemDraft."""

    title: str
    description: str
    instructions: str
    language: str = "javascript"
    difficulty: QuizDifficulty = QuizDifficulty.MEDIUM
    start_code: str = "// Your code here"
    expected_output: str = ""
