"""
Student performance analytics derived from quiz attempts.

`summarize_performance` is a pure function over attempts, a quiz -> course
index and a reference time, so the figures can be reproduced in tests
without a database. `student_performance` is the database-facing wrapper
used by the routes: it loads the attempts once and resolves every quiz and
course they reference with a single batched query.

Calendar figures (study days, week buckets) use the server's local time;
naive timestamps are taken as UTC. Weeks start on Sunday.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from studyhub.core.config import get_settings
from studyhub.models.course import Course
from studyhub.models.engagement import Bookmark
from studyhub.models.quiz import Quiz, QuizAttempt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseRef:
    id: int
    title: str


@dataclass(frozen=True)
class AttemptPoint:
    """The parts of a quiz attempt the analytics need."""
    quiz_id: Optional[int]
    completed_at: datetime
    percentage: float
    passed: bool = False


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves upwards (0.5 -> 1, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def score_percentage(score: int, total_questions: int) -> float:
    if not total_questions:
        return 0.0
    return score / total_questions * 100


def to_local(moment: datetime) -> datetime:
    """Naive local wall-clock time for a stored timestamp.

    Naive values are read as UTC, which is what SQLite's CURRENT_TIMESTAMP
    stores; aware values are converted from their own offset.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone().replace(tzinfo=None)


def week_start(day: date) -> date:
    """Sunday on or before `day`."""
    days_since_sunday = (day.weekday() + 1) % 7
    return day - timedelta(days=days_since_sunday)


def to_points(attempts: Iterable[QuizAttempt]) -> List[AttemptPoint]:
    return [
        AttemptPoint(
            quiz_id=attempt.quiz_id,
            completed_at=attempt.completed_at,
            percentage=score_percentage(attempt.score, attempt.total_questions),
            passed=bool(attempt.passed),
        )
        for attempt in attempts
        if attempt.completed_at is not None
    ]


def pass_rate(points: Sequence[AttemptPoint]) -> int:
    """Share of attempts that passed, as a rounded percentage."""
    if not points:
        return 0
    return round_half_up(sum(1 for point in points if point.passed) / len(points) * 100)


def study_days(points: Sequence[AttemptPoint]) -> int:
    """Number of distinct local calendar days with at least one attempt."""
    return len({to_local(point.completed_at).date() for point in points})


def weekly_trend(
    points: Sequence[AttemptPoint],
    now: datetime,
    weeks: Optional[int] = None,
    min_weeks: Optional[int] = None,
) -> List[Dict]:
    """Mean score per Sunday-start week over the last `weeks` weeks, oldest first.

    The `min_weeks` most recent weeks always appear (score 0 when empty);
    older weeks only when they hold attempts. Entries are labelled
    "Week 1".."Week N" in the order they are emitted.
    """
    settings = get_settings()
    weeks = weeks or settings.trend_weeks
    min_weeks = min_weeks or settings.min_trend_weeks

    current_week = week_start(to_local(now).date())
    local_points = [(to_local(point.completed_at), point.percentage) for point in points]

    buckets = []
    for weeks_ago in range(weeks - 1, -1, -1):
        start = datetime.combine(current_week - timedelta(weeks=weeks_ago), time.min)
        end = datetime.combine(current_week - timedelta(weeks=weeks_ago - 1), time.min)
        scores = [pct for moment, pct in local_points if start <= moment < end]
        if scores or weeks_ago < min_weeks:
            buckets.append(scores)

    return [
        {
            "name": f"Week {index}",
            "score": round_half_up(sum(scores) / len(scores)) if scores else 0,
            "attempts": len(scores),
        }
        for index, scores in enumerate(buckets, start=1)
    ]


def course_breakdown(points: Sequence[AttemptPoint], course_by_quiz: Dict[int, CourseRef]) -> List[Dict]:
    """Per-course mean score, best first. Attempts whose quiz has no course are left out."""
    grouped: Dict[int, Dict] = {}
    for point in points:
        course = course_by_quiz.get(point.quiz_id)
        if course is None:
            continue
        entry = grouped.setdefault(course.id, {"course": course.title, "scores": []})
        entry["scores"].append(point.percentage)

    breakdown = [
        {
            "course": entry["course"],
            "score": round_half_up(sum(entry["scores"]) / len(entry["scores"])),
            "attempts": len(entry["scores"]),
        }
        for entry in grouped.values()
    ]
    # sorted() is stable, so equal scores keep the order their courses were first seen
    return sorted(breakdown, key=lambda entry: entry["score"], reverse=True)


def summarize_performance(
    points: Sequence[AttemptPoint],
    course_by_quiz: Dict[int, CourseRef],
    now: Optional[datetime] = None,
) -> Dict:
    """
    Build the performance summary for one student.

    `points` should be ordered most recent first; per-course ties are
    broken by that order.
    """
    settings = get_settings()
    now = now or datetime.now().astimezone()

    total = len(points)
    percentages = [point.percentage for point in points]
    average_score = round_half_up(sum(percentages) / total) if total else 0

    breakdown = course_breakdown(points, course_by_quiz)
    strengths = [entry for entry in breakdown if entry["score"] >= settings.strength_threshold][:3]
    weaknesses = sorted(
        (entry for entry in breakdown if entry["score"] < settings.weakness_threshold),
        key=lambda entry: entry["score"],
    )[:3]

    return {
        "average_score": average_score,
        "completion_rate": pass_rate(points),
        "study_streak": study_days(points),
        "time_spent": round_half_up(total * settings.minutes_per_attempt / 60),
        "weekly_trend": weekly_trend(points, now),
        "course_performance": breakdown,
        "strengths": strengths,
        "weaknesses": weaknesses,
    }


def load_attempts(db: Session, student_id: int) -> List[QuizAttempt]:
    return (
        db.query(QuizAttempt)
        .filter(QuizAttempt.student_id == student_id)
        .order_by(QuizAttempt.completed_at.desc(), QuizAttempt.id.desc())
        .all()
    )


def load_course_index(db: Session, quiz_ids: Iterable[Optional[int]]) -> Dict[int, CourseRef]:
    """Resolve quiz -> course for every distinct quiz id in one query."""
    ids = {quiz_id for quiz_id in quiz_ids if quiz_id is not None}
    if not ids:
        return {}
    rows = (
        db.query(Quiz.id, Course.id, Course.title)
        .join(Course, Quiz.course_id == Course.id)
        .filter(Quiz.id.in_(ids))
        .all()
    )
    return {quiz_id: CourseRef(id=course_id, title=title) for quiz_id, course_id, title in rows}


def student_performance(db: Session, student_id: int, now: Optional[datetime] = None) -> Dict:
    points = to_points(load_attempts(db, student_id))
    course_by_quiz = load_course_index(db, (point.quiz_id for point in points))
    logger.debug(f"Performance for student {student_id}: {len(points)} attempts, {len(course_by_quiz)} quizzes with a course")
    return summarize_performance(points, course_by_quiz, now=now)


def student_stats(db: Session, student_id: int) -> Dict:
    """Dashboard counters for a student."""
    points = to_points(load_attempts(db, student_id))
    total = len(points)
    passed = sum(1 for point in points if point.passed)
    bookmarks = db.query(Bookmark).filter(Bookmark.user_id == student_id).count()
    average = round_half_up(sum(point.percentage for point in points) / total) if total else 0

    return {
        "materials_count": bookmarks,
        "quizzes_completed": total,
        "average_score": average,
        "achievements_count": passed,
        "completion_rate": pass_rate(points),
        "study_streak": study_days(points),
    }


ACHIEVEMENTS = (
    # (name, description, icon, attempts needed, passed attempts needed)
    ("First Steps", "Complete your first quiz", "trophy", 1, 0),
    ("Quiz Master", "Complete 10 quizzes", "star", 10, 0),
    ("High Achiever", "Pass 5 quizzes", "award", 0, 5),
)


def student_achievements(db: Session, student_id: int) -> List[Dict]:
    attempts = db.query(QuizAttempt).filter(QuizAttempt.student_id == student_id).all()
    completed = len(attempts)
    passed = sum(1 for attempt in attempts if attempt.passed)
    return [
        {"name": name, "description": description, "icon": icon}
        for name, description, icon, need_completed, need_passed in ACHIEVEMENTS
        if completed >= need_completed and passed >= need_passed
    ]
