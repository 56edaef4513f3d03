from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from studyhub.core.config import get_settings
from studyhub.models.quiz import QuizQuestion


@dataclass
class QuizResult:
    correct: int
    total: int
    percentage: float
    passed: bool


def is_correct(submitted: Optional[str], expected: str) -> bool:
    """Case-insensitive comparison; a missing or blank answer is wrong."""
    return bool(submitted) and submitted.lower() == expected.lower()


def score_quiz(
    questions: Iterable[QuizQuestion],
    answers: Dict[str, str],
    passing_score: Optional[int] = None,
) -> QuizResult:
    """Grade a submission. `answers` is keyed by question id as a string."""
    if passing_score is None:
        passing_score = get_settings().default_passing_score

    questions = list(questions)
    correct = sum(1 for question in questions if is_correct(answers.get(str(question.id)), question.correct_answer))
    total = len(questions)
    percentage = correct / total * 100 if total else 0.0
    return QuizResult(correct=correct, total=total, percentage=percentage, passed=percentage >= passing_score)
