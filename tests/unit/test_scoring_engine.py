# =============================================================================
# TESTS - Quiz Scoring Engine
# =============================================================================
# Unit tests for percentage scoring and pass/fail messages
# =============================================================================

import pytest


class TestCalculatePercentage:
    """Tests for half-up percentage rounding."""

    def test_two_of_three(self):
        from classroom.engine import QuizScoringEngine

        assert QuizScoringEngine.calculate_percentage(2, 3) == 67

    def test_rounds_half_up(self):
        from classroom.engine import QuizScoringEngine

        assert QuizScoringEngine.calculate_percentage(1, 8) == 13
        assert QuizScoringEngine.calculate_percentage(1, 2) == 50

    def test_zero_questions_scores_zero(self):
        """An empty quiz never divides by zero."""
        from classroom.engine import QuizScoringEngine

        assert QuizScoringEngine.calculate_percentage(0, 0) == 0

    def test_hundred_only_when_perfect(self):
        from classroom.engine import QuizScoringEngine

        assert QuizScoringEngine.calculate_percentage(10, 10) == 100
        assert QuizScoringEngine.calculate_percentage(999, 1000) == 99

    def test_score_always_in_range(self):
        from classroom.engine import QuizScoringEngine

        for total in range(1, 40):
            for correct in range(total + 1):
                score = QuizScoringEngine.calculate_percentage(correct, total)
                assert 0 <= score <= 100
                assert (score == 100) == (correct == total)


class TestCountCorrect:
    """Tests for counting correct answers."""

    def test_answers_against_correct_indices(self, sample_quiz):
        """[0, 1, 3] against [0, 1, 2] is 2 correct and scores 67."""
        from classroom.engine import QuizScoringEngine

        engine = QuizScoringEngine()
        result = engine.calculate_score(sample_quiz.questions, [0, 1, 3])

        assert result["correct_answers"] == 2
        assert result["score"] == 67
        assert result["passed"] is False

    def test_unanswered_counts_as_incorrect(self, sample_quiz):
        from classroom.engine import QuizScoringEngine

        engine = QuizScoringEngine()

        assert engine.count_correct(sample_quiz.questions, [-1, -1, 2]) == 1

    def test_length_mismatch_raises(self, sample_quiz):
        from classroom.engine import QuizScoringEngine

        with pytest.raises(ValueError):
            QuizScoringEngine().count_correct(sample_quiz.questions, [0, 1])


class TestPassMark:
    """Tests for pass/fail feedback."""

    def test_default_pass_mark(self):
        from classroom.engine import QuizScoringEngine

        engine = QuizScoringEngine()

        assert engine.passed(70) is True
        assert engine.passed(69) is False
        assert engine.result_message(100) == "Great job! You've passed this quiz."
        assert engine.result_message(10) == "Keep practicing to improve your score."

    def test_custom_pass_mark(self):
        from classroom.engine import QuizScoringEngine

        assert QuizScoringEngine(pass_mark=50).passed(50) is True

    def test_evaluate_answer(self, make_question):
        from classroom.engine import QuizScoringEngine

        result = QuizScoringEngine().evaluate_answer(make_question(correct=3), 1)

        assert result == {"is_correct": False, "correct_index": 3, "explanation": "Basic arithmetic"}
