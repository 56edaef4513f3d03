"""
Tests for student performance analytics.

The summary is computed from plain attempt points, so most cases run
without a database. The API tests at the bottom cover the wiring.
"""
from datetime import datetime, timedelta, timezone

import pytest

from studyhub.services.performance import (
    AttemptPoint,
    CourseRef,
    round_half_up,
    score_percentage,
    study_days,
    summarize_performance,
    to_local,
    week_start,
    weekly_trend,
)

# A Wednesday noon in server-local time; its week starts on Sunday 2026-03-01
NOW = datetime(2026, 3, 4, 12, 0, 0).astimezone()
COURSE_A = CourseRef(id=1, title="Course A")
COURSE_B = CourseRef(id=2, title="Course B")


def auth(user):
    return {"X-User-Id": str(user.id)}


def point(quiz_id, percentage, passed=False, at=NOW):
    return AttemptPoint(quiz_id=quiz_id, completed_at=at, percentage=percentage, passed=passed)


class TestHelpers:

    @pytest.mark.parametrize("value,expected", [
        (0.5, 1),
        (1.49, 1),
        (2.5, 3),
        (66.666, 67),
        (76.666, 77),
        (0, 0),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_score_percentage_with_no_questions_is_zero(self):
        assert score_percentage(0, 0) == 0
        assert score_percentage(8, 10) == pytest.approx(80)

    def test_week_starts_on_sunday(self):
        assert week_start(datetime(2026, 3, 4).date()) == datetime(2026, 3, 1).date()
        assert week_start(datetime(2026, 3, 1).date()) == datetime(2026, 3, 1).date()
        assert week_start(datetime(2026, 2, 28).date()) == datetime(2026, 2, 22).date()

    def test_to_local_reads_naive_times_as_utc(self):
        stored = datetime(2026, 3, 4, 23, 30)
        expected = stored.replace(tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        assert to_local(stored) == expected

    def test_to_local_keeps_local_wall_clock(self):
        assert to_local(NOW) == datetime(2026, 3, 4, 12, 0, 0)

    def test_to_local_converts_aware_times(self):
        aware = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)
        local = to_local(aware)
        assert local.tzinfo is None
        assert local == aware.astimezone().replace(tzinfo=None)

    def test_study_days_counts_distinct_dates(self):
        points = [
            point(1, 50, at=NOW),
            point(1, 60, at=NOW - timedelta(hours=2)),
            point(1, 70, at=NOW - timedelta(days=3)),
        ]
        assert study_days(points) == 2


class TestSummary:

    def test_mixed_courses(self):
        """8/10 passed and 6/10 failed in course A, 9/10 passed in course B."""
        points = [
            point(10, 80, passed=True),
            point(10, 60, passed=False),
            point(20, 90, passed=True),
        ]
        course_by_quiz = {10: COURSE_A, 20: COURSE_B}

        summary = summarize_performance(points, course_by_quiz, now=NOW)

        assert summary["average_score"] == 77
        assert summary["completion_rate"] == 67
        assert summary["time_spent"] == 1
        assert summary["study_streak"] == 1
        assert summary["course_performance"] == [
            {"course": "Course B", "score": 90, "attempts": 1},
            {"course": "Course A", "score": 70, "attempts": 2},
        ]
        assert summary["strengths"] == [{"course": "Course B", "score": 90, "attempts": 1}]
        assert summary["weaknesses"] == [{"course": "Course A", "score": 70, "attempts": 2}]

    def test_no_attempts(self):
        summary = summarize_performance([], {}, now=NOW)

        assert summary["average_score"] == 0
        assert summary["completion_rate"] == 0
        assert summary["study_streak"] == 0
        assert summary["time_spent"] == 0
        assert summary["course_performance"] == []
        assert summary["strengths"] == []
        assert summary["weaknesses"] == []
        assert summary["weekly_trend"] == [
            {"name": f"Week {n}", "score": 0, "attempts": 0} for n in range(1, 5)
        ]

    def test_attempts_without_course_count_overall_only(self):
        points = [point(None, 100, passed=True), point(99, 50)]

        summary = summarize_performance(points, {}, now=NOW)

        assert summary["average_score"] == 75
        assert summary["course_performance"] == []

    def test_time_spent_is_fifteen_minutes_per_attempt(self):
        points = [point(1, 50) for _ in range(6)]
        assert summarize_performance(points, {}, now=NOW)["time_spent"] == 2

    def test_weaknesses_are_weakest_first_and_capped(self):
        courses = {n: CourseRef(id=n, title=f"Course {n}") for n in range(1, 6)}
        scores = {1: 70, 2: 40, 3: 60, 4: 50, 5: 74}
        points = [point(n, scores[n]) for n in courses]

        summary = summarize_performance(points, courses, now=NOW)

        assert [entry["score"] for entry in summary["weaknesses"]] == [40, 50, 60]

    def test_strengths_keep_best_three(self):
        courses = {n: CourseRef(id=n, title=f"Course {n}") for n in range(1, 6)}
        scores = {1: 80, 2: 95, 3: 85, 4: 100, 5: 79}
        points = [point(n, scores[n], passed=True) for n in courses]

        summary = summarize_performance(points, courses, now=NOW)

        assert [entry["score"] for entry in summary["strengths"]] == [100, 95, 85]

    def test_equal_course_scores_keep_first_seen_order(self):
        points = [point(20, 90), point(10, 90)]

        breakdown = summarize_performance(points, {10: COURSE_A, 20: COURSE_B}, now=NOW)["course_performance"]

        assert [entry["course"] for entry in breakdown] == ["Course B", "Course A"]


class TestWeeklyTrend:

    def test_recent_weeks_always_present(self):
        trend = weekly_trend([point(1, 80)], NOW)

        assert [entry["name"] for entry in trend] == ["Week 1", "Week 2", "Week 3", "Week 4"]
        assert trend[-1] == {"name": "Week 4", "score": 80, "attempts": 1}
        assert all(entry["score"] == 0 for entry in trend[:3])

    def test_older_weeks_only_when_they_have_attempts(self):
        six_weeks_ago = NOW - timedelta(weeks=6)
        points = [point(1, 60, at=six_weeks_ago), point(1, 100, at=NOW)]

        trend = weekly_trend(points, NOW)

        assert [entry["name"] for entry in trend] == [f"Week {n}" for n in range(1, 6)]
        assert trend[0] == {"name": "Week 1", "score": 60, "attempts": 1}
        assert [entry["attempts"] for entry in trend] == [1, 0, 0, 0, 1]

    def test_attempts_older_than_the_window_are_ignored(self):
        trend = weekly_trend([point(1, 60, at=NOW - timedelta(weeks=9))], NOW)
        assert len(trend) == 4
        assert sum(entry["attempts"] for entry in trend) == 0

    def test_full_window(self):
        points = [point(1, 50 + n, at=NOW - timedelta(weeks=n)) for n in range(8)]

        trend = weekly_trend(points, NOW)

        assert len(trend) == 8
        assert trend[0]["score"] == 57
        assert trend[-1]["score"] == 50

    def test_week_boundary_is_sunday_midnight(self):
        saturday_night = datetime(2026, 2, 28, 23, 59).astimezone()
        sunday_morning = datetime(2026, 3, 1, 0, 0).astimezone()

        trend = weekly_trend([point(1, 40, at=saturday_night), point(1, 90, at=sunday_morning)], NOW)

        assert trend[-2]["score"] == 40
        assert trend[-1]["score"] == 90

    def test_week_score_is_rounded_mean(self):
        trend = weekly_trend([point(1, 50), point(1, 75), point(1, 100)], NOW)
        assert trend[-1] == {"name": "Week 4", "score": 75, "attempts": 3}


class TestPerformanceApi:

    def test_requires_authentication(self, client):
        response = client.get("/api/student/performance")
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}

    def test_summary_for_student(self, client, student, make_course, make_quiz, make_attempt):
        course_a = make_course(title="Course A")
        course_b = make_course(title="Course B")
        quiz_a = make_quiz(course_id=course_a.id)
        quiz_b = make_quiz(course_id=course_b.id)
        make_attempt(student, quiz_a, score=8, total=10, passed=True)
        make_attempt(student, quiz_a, score=6, total=10, passed=False)
        make_attempt(student, quiz_b, score=9, total=10, passed=True)

        response = client.get("/api/student/performance", headers=auth(student))

        assert response.status_code == 200
        data = response.json()
        assert data["averageScore"] == 77
        assert data["completionRate"] == 67
        assert data["studyStreak"] == 1
        assert data["timeSpent"] == 1
        assert data["coursePerformance"][0] == {"course": "Course B", "score": 90, "attempts": 1}
        assert data["strengths"] == [{"course": "Course B", "score": 90, "attempts": 1}]
        assert data["weaknesses"] == [{"course": "Course A", "score": 70, "attempts": 2}]
        assert 4 <= len(data["weeklyTrend"]) <= 8
        assert data["weeklyTrend"][-1]["attempts"] == 3

    def test_only_own_attempts_count(self, client, make_user, make_quiz, make_attempt):
        me = make_user()
        someone_else = make_user()
        quiz = make_quiz()
        make_attempt(someone_else, quiz, score=10, total=10, passed=True)

        data = client.get("/api/student/performance", headers=auth(me)).json()

        assert data["averageScore"] == 0
        assert data["weeklyTrend"] == [
            {"name": f"Week {n}", "score": 0, "attempts": 0} for n in range(1, 5)
        ]

    def test_stats_and_achievements(self, client, student, make_quiz, make_attempt):
        quiz = make_quiz()
        make_attempt(student, quiz, score=9, total=10, passed=True)
        make_attempt(student, quiz, score=3, total=10, passed=False)

        stats = client.get("/api/student/stats", headers=auth(student)).json()
        assert stats == {
            "materialsCount": 0,
            "quizzesCompleted": 2,
            "averageScore": 60,
            "achievementsCount": 1,
            "completionRate": 50,
            "studyStreak": 1,
        }

        achievements = client.get("/api/student/achievements", headers=auth(student)).json()
        assert [a["name"] for a in achievements] == ["First Steps"]
