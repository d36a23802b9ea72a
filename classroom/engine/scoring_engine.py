"""Quiz Scoring Engine - percentage scoring and pass/fail feedback."""

from ..models.schemas import UNANSWERED, Question


class QuizScoringEngine:
    """Scoring for quiz attempts.

    Every question weighs the same. Unanswered questions (``-1``) count as
    incorrect and never block scoring. Percentages are rounded half up, so
    2 of 3 correct scores 67 and 1 of 8 scores 13.

    Example:
        >>> engine = QuizScoringEngine()
        >>> engine.calculate_percentage(2, 3)
        67
    """

    PASS_MESSAGE = "Great job! You've passed this quiz."
    FAIL_MESSAGE = "Keep practicing to improve your score."

    def __init__(self, pass_mark: int = 70):
        self.pass_mark = pass_mark

    def count_correct(self, questions: list[Question], answers: list[int]) -> int:
        """Count answers equal to their question's correct index.

        Args:
            questions: Quiz questions, in order
            answers: Selected option per question (``-1`` = unanswered)

        Returns:
            Number of correct answers
        """
        if len(questions) != len(answers):
            raise ValueError(
                f"Number of answers ({len(answers)}) differs from number of questions ({len(questions)})"
            )

        return sum(
            1
            for question, answer in zip(questions, answers)
            if answer != UNANSWERED and answer == question.correct_answer
        )

    @staticmethod
    def calculate_percentage(correct: int, total: int) -> int:
        """``round(100 * correct / total)`` half up; an empty quiz scores 0.

        Only a perfect attempt scores 100, even on very long quizzes where
        rounding alone would reach it.
        """
        if total <= 0:
            return 0
        percentage = (200 * correct + total) // (2 * total)
        if correct < total:
            percentage = min(percentage, 99)
        return percentage

    def calculate_score(self, questions: list[Question], answers: list[int]) -> dict:
        """Score a full attempt.

        Returns:
            Dict with total_questions, correct_answers, score, passed and message
        """
        correct = self.count_correct(questions, answers)
        score = self.calculate_percentage(correct, len(questions))
        return {
            "total_questions": len(questions),
            "correct_answers": correct,
            "score": score,
            "passed": self.passed(score),
            "message": self.result_message(score),
        }

    def passed(self, score: int) -> bool:
        return score >= self.pass_mark

    def result_message(self, score: int) -> str:
        return self.PASS_MESSAGE if self.passed(score) else self.FAIL_MESSAGE

    def evaluate_answer(self, question: Question, selected_index: int) -> dict:
        """Evaluate one answer for review.

        Args:
            question: Question answered
            selected_index: Selected option (0-3, or -1)

        Returns:
            Dict with is_correct, correct_index and explanation
        """
        return {
            "is_correct": selected_index == question.correct_answer,
            "correct_index": question.correct_answer,
            "explanation": question.explanation,
        }
