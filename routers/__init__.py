"""Routers module for the Classroom API."""

from classroom.router import router as quiz_router

from .assignments import router as assignments_router
from .coding_lab import router as coding_lab_router
from .tools import router as tools_router

__all__ = [
    "quiz_router",
    "assignments_router",
    "coding_lab_router",
    "tools_router",
]
