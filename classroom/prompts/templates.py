"""Prompt Templates - fixed prompts sent to the generation endpoint."""

from ..models.enums import QuizDifficulty

# =============================================================================
# QUIZ (line format)
# =============================================================================

QUIZ_TEXT_PROMPT = """Generate a {difficulty} level quiz with {num_questions} questions on the topic of {topic}. Each question should have 4 options, a correct answer, and an explanation. Return the response in the following format:

Question: [Your question here]
1. [Option 1]
2. [Option 2]
3. [Option 3]
4. [Option 4]
Correct Answer: [Correct option number]
Explanation: [Explanation for why the correct answer is correct]"""

# =============================================================================
# QUIZ (JSON format)
# =============================================================================

QUIZ_JSON_PROMPT = """Create a quiz with the following specifications:

Topic: {topic}

Format:
- Generate a title for the quiz
- Include a brief description
- Create {num_questions} multiple-choice questions, each with 4 options and the correct answer marked

Return in JSON format:
{{
  "title": "Quiz Title",
  "description": "Quiz description",
  "questions": [
    {{
      "question": "Question text?",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctAnswer": 0
    }}
  ]
}}"""

# =============================================================================
# ASSIGNMENTS & FEEDBACK
# =============================================================================

ASSIGNMENT_PROMPT = """Create an educational assignment for students on the subject of {subject},
specifically about {topic}.

Difficulty level: {difficulty_level}
Grade level: {grade}

Please provide:
1. A clear title for the assignment
2. A detailed description that explains what students need to do
3. Learning objectives (3-5 bullet points)
4. Requirements for completion
5. Grading criteria
6. Suggested resources for students

Format the response in a clear, well-structured way that's ready to be presented to students."""

FEEDBACK_PROMPT = """You are an educational AI assistant. Based on the following student submission, provide helpful, constructive feedback in plain text (100-200 words). Avoid bold text or formatting. Suggest a good grade out of {points} points. Focus on strengths and areas for improvement.

Assignment: {assignment_title}
Student Submission: {content}"""

# =============================================================================
# CODING LAB
# =============================================================================

CODING_PROBLEM_PROMPT = """As a programming instructor, create a coding problem based on the following prompt: "{prompt}".

Format the response as follows:

Title: [Problem title]

Description: [Brief problem description]

Instructions: [Detailed instructions for the student]

Language: [Recommended programming language]

Difficulty: [easy/medium/hard]

Starter Code:
```
[Starter code that students will begin with]
```

Expected Output or Behavior:
[What the solution should accomplish]"""

DEFAULT_DIFFICULTY_LEVEL = "Intermediate"
DEFAULT_GRADE_LEVEL = "High School"
DEFAULT_JSON_QUESTIONS = 10


def build_quiz_text_prompt(topic: str, difficulty: QuizDifficulty, num_questions: int) -> str:
    return QUIZ_TEXT_PROMPT.format(
        topic=topic,
        difficulty=QuizDifficulty(difficulty).value,
        num_questions=num_questions,
    )


def build_quiz_json_prompt(topic: str, num_questions: int = DEFAULT_JSON_QUESTIONS) -> str:
    return QUIZ_JSON_PROMPT.format(topic=topic, num_questions=num_questions)


def build_assignment_prompt(
    subject: str,
    topic: str,
    difficulty_level: str | None = None,
    grade: str | None = None,
) -> str:
    return ASSIGNMENT_PROMPT.format(
        subject=subject,
        topic=topic,
        difficulty_level=difficulty_level or DEFAULT_DIFFICULTY_LEVEL,
        grade=grade or DEFAULT_GRADE_LEVEL,
    )


def build_feedback_prompt(assignment_title: str, content: str, points: int) -> str:
    return FEEDBACK_PROMPT.format(assignment_title=assignment_title, content=content, points=points)


def build_coding_problem_prompt(prompt: str) -> str:
    return CODING_PROBLEM_PROMPT.format(prompt=prompt)
