"""Quiz Parsers - turn generated text into validated questions.

Both parsers are all-or-nothing: a single malformed question fails the
whole parse with ``QuizParseError`` and no partial quiz is returned.
"""

import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError

from ..core.errors import QuizParseError
from ..core.logger import get_logger
from ..models.schemas import OPTION_COUNT, Question

logger = get_logger("parsers")


@dataclass
class ParsedQuiz:
    """Questions recovered from generated text, plus optional metadata."""

    questions: list[Question]
    title: str = ""
    description: str = ""


class QuizParser(ABC):
    """Interface shared by the line-format and JSON parsers."""

    @abstractmethod
    def parse(self, text: str) -> ParsedQuiz:
        """Parse ``text`` or raise ``QuizParseError``."""


class QuizTextParser(QuizParser):
    """Strict line-oriented parser.

    Each question is exactly seven consecutive lines::

        Question: <prompt>
        1. <option>
        2. <option>
        3. <option>
        4. <option>
        Correct Answer: <1-4>
        Explanation: <text>

    Lines outside a group that do not start with ``Question:`` are skipped.
    """

    QUESTION_PREFIX = "Question:"
    ANSWER_PREFIX = "Correct Answer:"
    EXPLANATION_PREFIX = "Explanation:"
    GROUP_SIZE = OPTION_COUNT + 3

    _ANSWER_NUMBER = re.compile(r"^(\d+)")

    def _line(self, lines: list[str], index: int) -> str:
        if index >= len(lines):
            raise QuizParseError("Unexpected end of text inside a question", line_number=index + 1)
        return lines[index].strip()

    def _parse_group(self, lines: list[str], start: int) -> Question:
        prompt = self._line(lines, start)[len(self.QUESTION_PREFIX):].strip()

        options = []
        for number in range(1, OPTION_COUNT + 1):
            index = start + number
            line = self._line(lines, index)
            marker = f"{number}."
            if not line.startswith(marker):
                raise QuizParseError(f"Invalid option format: {line!r}", line_number=index + 1)
            options.append(line[len(marker):].strip())

        answer_index = start + OPTION_COUNT + 1
        answer_line = self._line(lines, answer_index)
        if not answer_line.startswith(self.ANSWER_PREFIX):
            raise QuizParseError(
                f"Invalid correct answer format: {answer_line!r}", line_number=answer_index + 1
            )
        match = self._ANSWER_NUMBER.match(answer_line[len(self.ANSWER_PREFIX):].strip())
        if not match or not 1 <= int(match.group(1)) <= OPTION_COUNT:
            raise QuizParseError(
                f"Invalid correct answer value: {answer_line!r}", line_number=answer_index + 1
            )

        explanation_index = answer_index + 1
        explanation_line = self._line(lines, explanation_index)
        if not explanation_line.startswith(self.EXPLANATION_PREFIX):
            raise QuizParseError(
                f"Invalid explanation format: {explanation_line!r}",
                line_number=explanation_index + 1,
            )

        try:
            return Question(
                question=prompt,
                options=options,
                correct_answer=int(match.group(1)) - 1,
                explanation=explanation_line[len(self.EXPLANATION_PREFIX):].strip(),
            )
        except PydanticValidationError as e:
            raise QuizParseError(f"Invalid question: {e}", line_number=start + 1) from e

    def parse(self, text: str) -> ParsedQuiz:
        lines = text.splitlines()
        questions: list[Question] = []

        i = 0
        while i < len(lines):
            if lines[i].strip().startswith(self.QUESTION_PREFIX):
                questions.append(self._parse_group(lines, i))
                i += self.GROUP_SIZE
            else:
                i += 1

        if not questions:
            raise QuizParseError("No valid questions found in the generated text")

        logger.debug("Parsed line-format quiz", questions=len(questions))
        return ParsedQuiz(questions=questions)


class QuizJsonParser(QuizParser):
    """Structured-output parser.

    Accepts a fenced ```json block, a bare fenced block, or the outermost
    ``{...}`` span of the text. Expected shape::

        {"title": "...", "description": "...",
         "questions": [{"question": "...", "options": [4 strings],
                        "correctAnswer": 0, "explanation": "..."}]}
    """

    _OBJECT = re.compile(r"\{[\s\S]*\}")

    @classmethod
    def extract_json(cls, text: str) -> str:
        content = text
        if "```json" in content:
            content = content.split("```json")[1].split("```")[0].strip()
        elif "```" in content:
            content = content.split("```")[1].split("```")[0].strip()

        if not content.strip().startswith("{"):
            match = cls._OBJECT.search(content)
            if not match:
                raise QuizParseError("No JSON object found in the generated text")
            content = match.group(0)
        return content.strip()

    def parse(self, text: str) -> ParsedQuiz:
        try:
            data = json.loads(self.extract_json(text))
        except json.JSONDecodeError as e:
            raise QuizParseError(f"Invalid JSON: {e.msg}", line_number=e.lineno) from e

        if not isinstance(data, dict):
            raise QuizParseError("Quiz JSON must be an object")
        raw_questions = data.get("questions")
        if not isinstance(raw_questions, list) or not raw_questions:
            raise QuizParseError("Quiz JSON has no questions")

        questions = []
        for number, raw in enumerate(raw_questions, 1):
            try:
                questions.append(Question.model_validate(raw))
            except PydanticValidationError as e:
                raise QuizParseError(f"Question {number} is invalid: {e.error_count()} error(s)") from e

        logger.debug("Parsed JSON quiz", questions=len(questions))
        return ParsedQuiz(
            questions=questions,
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
        )
