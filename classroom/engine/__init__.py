"""Engine - attempt state machine, scoring, catalog, authoring, coursework and generation."""

from .assignments import AssignmentService
from .attempt import QuizAttemptSession
from .authoring import QuizAuthoringService
from .catalog import QuizCatalog
from .coding_lab import CodingLabService
from .content_generator import (
    ContentGenerator,
    extract_coding_problem,
    extract_suggested_grade,
    extract_title,
)
from .parsers import ParsedQuiz, QuizJsonParser, QuizParser, QuizTextParser
from .registry import QuizAttemptRegistry
from .review import ReviewCursor
from .scoring_engine import QuizScoringEngine
from .timer import CountdownTimer, format_time

__all__ = [
    "QuizAttemptSession",
    "QuizAttemptRegistry",
    "QuizScoringEngine",
    "CountdownTimer",
    "format_time",
    "ReviewCursor",
    "QuizCatalog",
    "AssignmentService",
    "QuizAuthoringService",
    "CodingLabService",
    "ContentGenerator",
    "extract_title",
    "extract_suggested_grade",
    "extract_coding_problem",
    "QuizParser",
    "QuizTextParser",
    "QuizJsonParser",
    "ParsedQuiz",
]
