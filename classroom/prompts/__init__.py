"""Prompt templates for content generation."""

from .templates import (
    ASSIGNMENT_PROMPT,
    CODING_PROBLEM_PROMPT,
    FEEDBACK_PROMPT,
    QUIZ_JSON_PROMPT,
    QUIZ_TEXT_PROMPT,
    build_assignment_prompt,
    build_coding_problem_prompt,
    build_feedback_prompt,
    build_quiz_json_prompt,
    build_quiz_text_prompt,
)

__all__ = [
    "QUIZ_TEXT_PROMPT",
    "QUIZ_JSON_PROMPT",
    "ASSIGNMENT_PROMPT",
    "FEEDBACK_PROMPT",
    "CODING_PROBLEM_PROMPT",
    "build_quiz_text_prompt",
    "build_quiz_json_prompt",
    "build_assignment_prompt",
    "build_feedback_prompt",
    "build_coding_problem_prompt",
]
