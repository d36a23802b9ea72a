"""Classroom - quiz attempts, coursework and generated content.

Architecture:
- core/: config, structured logger, error hierarchy
- models/: Enums, Pydantic schemas, StudentContext
- engine/: QuizAttemptSession, CountdownTimer, QuizScoringEngine, QuizCatalog,
  QuizAuthoringService, AssignmentService, CodingLabService, ContentGenerator
- llm/: GenerationClientFactory
- storage/: LearningStore (memory or AgentFS documents), blob uploads
- prompts/: generation prompt templates
- router.py: FastAPI endpoints
"""

from .engine import (
    AssignmentService,
    CodingLabService,
    ContentGenerator,
    QuizAttemptRegistry,
    QuizAttemptSession,
    QuizAuthoringService,
    QuizCatalog,
    QuizScoringEngine,
)
from .llm import GenerationClientFactory
from .models import AttemptStatus, Question, Quiz, QuizDifficulty, StudentContext
from .storage import LearningStore

__all__ = [
    # Models
    "AttemptStatus",
    "QuizDifficulty",
    "Question",
    "Quiz",
    "StudentContext",
    # Engines
    "QuizAttemptSession",
    "QuizAttemptRegistry",
    "QuizScoringEngine",
    "QuizCatalog",
    "QuizAuthoringService",
    "AssignmentService",
    "CodingLabService",
    "ContentGenerator",
    # LLM
    "GenerationClientFactory",
    # Storage
    "LearningStore",
]
