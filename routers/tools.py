"""Tool endpoints - simulated plagiarism check and lesson plan generation.

Both return canned JSON after a fixed delay; no external service is called.
"""

import asyncio
import logging
import random
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

import app_state
from classroom.core import ClassroomError, get_config
from classroom.router import to_http

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tools"])

PLAGIARISM_THRESHOLD = 30


class PlagiarismRequest(BaseModel):
    text: str = ""


class PlagiarismResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plagiarism_score: int = Field(..., alias="plagiarismScore")
    analysis: list[str]
    matched_sources: list[str] = Field(default_factory=list, alias="matchedSources")


class LessonPlanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subject: str = ""
    topic: str = ""
    grade_level: str = Field(default="", alias="gradeLevel")
    duration: Optional[str] = None


class Subtopic(BaseModel):
    title: str
    description: str
    activities: list[str]
    resources: list[str]


class LessonPlanResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    main_topic: str = Field(..., alias="mainTopic")
    subtopics: list[Subtopic]
    learning_objectives: list[str] = Field(..., alias="learningObjectives")
    suggested_timeframe: Optional[str] = Field(default=None, alias="suggestedTimeframe")
    assessment_ideas: list[str] = Field(..., alias="assessmentIdeas")


async def _simulate_delay() -> None:
    await asyncio.sleep(get_config().stub_delay_seconds)


@router.post("/check-plagiarism", response_model=PlagiarismResponse, response_model_by_alias=True)
async def check_plagiarism(request: PlagiarismRequest):
    """Simulated check: random score 0-99, sources listed above 30."""
    await _simulate_delay()
    score = random.randint(0, 99)
    logger.info("Plagiarism check simulated (chars=%d, score=%d)", len(request.text), score)

    return PlagiarismResponse(
        plagiarism_score=score,
        analysis=[
            "Text analyzed for common patterns and online matches.",
            "Linguistic analysis performed to detect unusual writing styles.",
            "Paragraph structures examined for consistency.",
        ],
        matched_sources=[
            "www.example.com/essay-resources (73% match)",
            "www.academicpapers.org/topics/science (41% match)",
        ]
        if score > PLAGIARISM_THRESHOLD
        else [],
    )


@router.post("/generate-lesson-plan", response_model=LessonPlanResponse, response_model_by_alias=True)
async def generate_lesson_plan(request: LessonPlanRequest, save: bool = False):
    """Canned two-part lesson plan for ``topic``.

    With ``save=true`` the plan is also pushed to ``lesson_plans``.
    """
    await _simulate_delay()
    topic = request.topic
    plan = LessonPlanResponse(
        main_topic=topic,
        subtopics=[
            Subtopic(
                title=f"Introduction to {topic}",
                description="Basic concepts and historical context",
                activities=["Group discussion", "Video introduction", "Interactive timeline"],
                resources=["Introductory video", "Digital timeline", "Reading materials"],
            ),
            Subtopic(
                title=f"Core Concepts of {topic}",
                description="Detailed exploration of fundamental principles",
                activities=["Guided practice", "Concept mapping", "Digital simulation"],
                resources=["Practice worksheet", "Digital simulation tool", "Visual aids"],
            ),
        ],
        learning_objectives=[
            "Students will explain the key principles",
            "Students will apply concepts to solve problems",
            "Students will analyze real-world examples",
        ],
        suggested_timeframe=request.duration,
        assessment_ideas=[
            "Portfolio of concept applications",
            "Project-based assessment with presentation",
            "Formative quizzes throughout the unit",
        ],
    )

    if save:
        data = plan.model_dump(by_alias=True)
        data.update(subject=request.subject, gradeLevel=request.grade_level)
        try:
            store = await app_state.get_store()
            key = await store.save_lesson_plan(data)
        except ClassroomError as e:
            raise to_http(e) from e
        logger.info("Lesson plan saved (key=%s)", key)
    return plan
