"""Models - Enums, Schemas and session state."""

from .enums import (
    AttemptStatus,
    CatalogFilter,
    CatalogStatus,
    LabSubmissionStatus,
    QuizDifficulty,
    SubmitTrigger,
)
from .schemas import (
    DEFAULT_START_CODE,
    OPTION_COUNT,
    UNANSWERED,
    AnswerRequest,
    Assignment,
    AssignmentDraft,
    AssignmentEntry,
    AttemptRecord,
    AttemptView,
    CatalogEntry,
    CodingProblem,
    CodingProblemDraft,
    CodingProblemEntry,
    Enrollment,
    FeedbackRequest,
    FeedbackSuggestion,
    GenerateAssignmentRequest,
    GenerateCodingProblemRequest,
    GeneratedAssignment,
    GeneratedCodingProblem,
    GenerateFromPromptRequest,
    GenerateQuizRequest,
    GenerateQuizResponse,
    GradeRequest,
    LabSubmission,
    LabSubmitRequest,
    Question,
    Quiz,
    QuizDraft,
    ReviewItem,
    Submission,
    SubmitResponse,
    utcnow,
)
from .state import StudentContext, SubmitOutcome

__all__ = [
    # Enums
    "AttemptStatus",
    "CatalogFilter",
    "CatalogStatus",
    "LabSubmissionStatus",
    "QuizDifficulty",
    "SubmitTrigger",
    # Records
    "OPTION_COUNT",
    "UNANSWERED",
    "DEFAULT_START_CODE",
    "Question",
    "Quiz",
    "AttemptRecord",
    "Enrollment",
    "Assignment",
    "Submission",
    "CodingProblem",
    "LabSubmission",
    # Views & requests
    "CatalogEntry",
    "AssignmentEntry",
    "CodingProblemEntry",
    "ReviewItem",
    "AttemptView",
    "SubmitResponse",
    "AnswerRequest",
    "GenerateQuizRequest",
    "GenerateFromPromptRequest",
    "GenerateQuizResponse",
    "GenerateAssignmentRequest",
    "GeneratedAssignment",
    "GradeRequest",
    "FeedbackRequest",
    "FeedbackSuggestion",
    "QuizDraft",
    "AssignmentDraft",
    "CodingProblemDraft",
    "LabSubmitRequest",
    "GenerateCodingProblemRequest",
    "GeneratedCodingProblem",
    # State
    "StudentContext",
    "SubmitOutcome",
    "utcnow",
]
