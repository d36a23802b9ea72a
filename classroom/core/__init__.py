"""Core - config, logging and errors shared by every module."""

from .config import ClassroomConfig, StoreBackend, get_config, reset_config
from .errors import (
    AttemptStateError,
    AttemptValidationError,
    ClassroomError,
    GenerationError,
    GenerationValidationError,
    NotFoundError,
    QuizParseError,
    QuizStateError,
    QuizValidationError,
    StoreError,
    SubmissionValidationError,
    ValidationError,
)
from .logger import configure_logging, get_logger

__all__ = [
    "ClassroomConfig",
    "StoreBackend",
    "get_config",
    "reset_config",
    "configure_logging",
    "get_logger",
    "ClassroomError",
    "ValidationError",
    "AttemptValidationError",
    "SubmissionValidationError",
    "QuizValidationError",
    "GenerationValidationError",
    "AttemptStateError",
    "NotFoundError",
    "StoreError",
    "GenerationError",
    "QuizParseError",
    "QuizStateError",
]
