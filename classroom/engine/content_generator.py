"""Content Generator - quizzes, assignments and grading feedback from prompts."""

import re

from ..core.errors import GenerationValidationError
from ..core.logger import get_logger
from ..llm.client import GenerationClient
from ..models.enums import QuizDifficulty
from ..models.schemas import (
    GeneratedAssignment,
    GeneratedCodingProblem,
    GenerateQuizResponse,
    Question,
)
from ..prompts.templates import (
    DEFAULT_JSON_QUESTIONS,
    build_assignment_prompt,
    build_coding_problem_prompt,
    build_feedback_prompt,
    build_quiz_json_prompt,
    build_quiz_text_prompt,
)
from .parsers import QuizJsonParser, QuizParser, QuizTextParser

logger = get_logger("content_generator")

DEFAULT_ASSIGNMENT_TITLE = "AI-Generated Assignment"
_GRADE_PATTERN = re.compile(r"\b(\d+)\/\s*(\d+)\b")

DEFAULT_PROBLEM_TITLE = "AI Generated Coding Problem"
DEFAULT_PROBLEM_CODE = "// Your code here"
_CODE_BLOCK = re.compile(r"```(?:\w*\n|\n)?([\s\S]*?)```")
_PROBLEM_SECTIONS = (
    "Title",
    "Description",
    "Instructions",
    "Language",
    "Difficulty",
    "Starter Code",
    "Expected Output or Behavior",
)


def extract_title(content: str) -> str:
    """First short, non-bullet line among the first three; ``:`` and ``#`` removed."""
    for line in content.split("\n")[:3]:
        clean = line.strip()
        if clean and len(clean) < 100 and not clean.startswith(("-", "*")):
            title = re.sub(r"[:#]", "", clean).strip()
            if title:
                return title
    return DEFAULT_ASSIGNMENT_TITLE


def extract_suggested_grade(text: str, points: int) -> int | None:
    """First ``N/M`` in ``text`` whose N lies within ``0..points``."""
    for match in _GRADE_PATTERN.finditer(text):
        grade = int(match.group(1))
        if 0 <= grade <= points:
            return grade
    return None


def _problem_section(text: str, name: str) -> str:
    """Body of ``Name:`` up to the next known header; markdown emphasis tolerated."""
    headers = "|".join(re.escape(section) for section in _PROBLEM_SECTIONS)
    pattern = re.compile(
        rf"^[ \t*#]*{re.escape(name)}[ \t*]*:[ \t*]*(.*?)(?=^[ \t*#]*(?:{headers})[ \t*]*:|\Z)",
        re.MULTILINE | re.DOTALL,
    )
    match = pattern.search(text)
    return match.group(1).strip() if match else ""


def extract_coding_problem(text: str) -> GeneratedCodingProblem:
    """Parse the sectioned coding problem reply; missing sections get defaults."""
    code_match = _CODE_BLOCK.search(text)
    start_code = code_match.group(1).strip() if code_match else ""
    prose = _CODE_BLOCK.sub("", text)

    title = _problem_section(prose, "Title").split("\n")[0].strip()
    language = _problem_section(prose, "Language").split("\n")[0].strip().lower()
    difficulty_text = _problem_section(prose, "Difficulty").split("\n")[0].strip().lower()
    try:
        difficulty = QuizDifficulty(difficulty_text)
    except ValueError:
        difficulty = QuizDifficulty.MEDIUM

    return GeneratedCodingProblem(
        title=title or DEFAULT_PROBLEM_TITLE,
        description=_problem_section(prose, "Description"),
        instructions=_problem_section(prose, "Instructions"),
        language=language or "javascript",
        difficulty=difficulty,
        start_code=start_code or DEFAULT_PROBLEM_CODE,
        expected_output=_problem_section(prose, "Expected Output or Behavior"),
    )


def pad_questions(questions: list[Question], count: int) -> list[Question]:
    """Trim to ``count``; short lists are padded with "Additional ..." copies."""
    if not questions:
        return []
    padded = list(questions[:count])
    originals = list(padded)
    while len(padded) < count:
        source = originals[len(padded) % len(originals)]
        padded.append(source.model_copy(update={"question": f"Additional {source.question}"}))
    return padded


class ContentGenerator:
    """Prompt templates + generation client + parsers.

    Example:
        >>> generator = ContentGenerator(GenerationClientFactory.create())
        >>> quiz = await generator.generate_quiz("Photosynthesis", "easy", 5)
        >>> quiz.total_questions
        5
    """

    def __init__(
        self,
        client: GenerationClient,
        text_parser: QuizParser | None = None,
        json_parser: QuizParser | None = None,
    ):
        self.client = client
        self.text_parser = text_parser or QuizTextParser()
        self.json_parser = json_parser or QuizJsonParser()

    async def generate_quiz(
        self,
        topic: str,
        difficulty: QuizDifficulty = QuizDifficulty.MEDIUM,
        count: int = 5,
    ) -> GenerateQuizResponse:
        """Line-format quiz; any malformed question fails the whole request."""
        topic = (topic or "").strip()
        if not topic:
            raise GenerationValidationError("Please enter a topic")
        if count < 1:
            raise GenerationValidationError("Number of questions must be at least 1")

        difficulty = QuizDifficulty(difficulty)
        text = await self.client.generate(build_quiz_text_prompt(topic, difficulty, count))
        parsed = self.text_parser.parse(text)

        logger.info(
            "Quiz generated",
            topic=topic,
            difficulty=difficulty.value,
            requested=count,
            questions=len(parsed.questions),
        )
        return GenerateQuizResponse(
            title=f"{topic} Quiz",
            topic=topic,
            difficulty=difficulty,
            total_questions=len(parsed.questions),
            questions=parsed.questions,
        )

    async def generate_quiz_from_prompt(
        self, prompt: str, count: int = DEFAULT_JSON_QUESTIONS
    ) -> GenerateQuizResponse:
        """JSON-format quiz, normalized to exactly ``count`` questions."""
        prompt = (prompt or "").strip()
        if not prompt:
            raise GenerationValidationError("Please enter a prompt for the AI")

        text = await self.client.generate(build_quiz_json_prompt(prompt, count))
        parsed = self.json_parser.parse(text)
        questions = pad_questions(parsed.questions, count)

        logger.info(
            "Quiz generated from prompt",
            parsed=len(parsed.questions),
            questions=len(questions),
        )
        return GenerateQuizResponse(
            title=parsed.title or f"{prompt} Quiz",
            description=parsed.description,
            topic=prompt,
            difficulty=QuizDifficulty.MEDIUM,
            total_questions=len(questions),
            questions=questions,
        )

    async def generate_assignment(
        self,
        subject: str,
        topic: str,
        difficulty_level: str | None = None,
        grade: str | None = None,
    ) -> GeneratedAssignment:
        if not (subject or "").strip() or not (topic or "").strip():
            raise GenerationValidationError("Subject and topic are required")

        text = await self.client.generate(
            build_assignment_prompt(subject.strip(), topic.strip(), difficulty_level, grade)
        )
        title = extract_title(text)
        logger.info("Assignment generated", subject=subject, topic=topic, title=title)
        return GeneratedAssignment(title=title, description=text)

    async def suggest_feedback(
        self, assignment_title: str, content: str, points: int
    ) -> tuple[str, int | None]:
        """Feedback text and the grade suggested in it, if one is in range."""
        if not (content or "").strip():
            raise GenerationValidationError("Submission has no text content to review")

        text = await self.client.generate(build_feedback_prompt(assignment_title, content, points))
        suggested = extract_suggested_grade(text, points)
        logger.info("Feedback suggested", points=points, suggested_grade=suggested)
        return text, suggested

    async def generate_coding_problem(self, prompt: str) -> GeneratedCodingProblem:
        prompt = (prompt or "").strip()
        if not prompt:
            raise GenerationValidationError("Please enter a prompt for the AI")

        text = await self.client.generate(build_coding_problem_prompt(prompt))
        problem = extract_coding_problem(text)
        logger.info(
            "Coding problem generated",
            title=problem.title,
            language=problem.language,
            difficulty=problem.difficulty.value,
        )
        return problem
