"""Enums - attempt lifecycle, catalog status and generation difficulty."""

from enum import Enum


class AttemptStatus(str, Enum):
    """Lifecycle of one quiz attempt."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


class SubmitTrigger(str, Enum):
    """What caused the submission."""

    MANUAL = "manual"
    TIMEOUT = "timeout"  # countdown reached zero


class QuizDifficulty(str, Enum):
    """Difficulty requested from the generator."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class CatalogStatus(str, Enum):
    """Badge shown next to a quiz in the student's catalog."""

    COMPLETED = "completed"
    OVERDUE = "overdue"
    AVAILABLE = "available"


class CatalogFilter(str, Enum):
    """Catalog views."""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


class LabSubmissionStatus(str, Enum):
    """Review state of a coding-lab solution."""

    PENDING = "pending"
    GRADED = "graded"
