from typing import List, Optional
from studyhub.schemas.base import BaseSchema
from studyhub.schemas.institution import InstitutionResponse
from studyhub.schemas.user import UserResponse


class WeeklyTrendPoint(BaseSchema):
    name: str
    score: int
    attempts: int


class CoursePerformance(BaseSchema):
    course: str
    score: int
    attempts: int


class PerformanceResponse(BaseSchema):
    average_score: int
    completion_rate: int
    # Distinct days with any quiz activity, not a run of consecutive days
    study_streak: int
    time_spent: int
    weekly_trend: List[WeeklyTrendPoint]
    course_performance: List[CoursePerformance]
    strengths: List[CoursePerformance]
    weaknesses: List[CoursePerformance]


class StudentStatsResponse(BaseSchema):
    materials_count: int
    quizzes_completed: int
    average_score: int
    achievements_count: int
    completion_rate: int
    study_streak: int


class Achievement(BaseSchema):
    name: str
    description: str
    icon: str


class InstructorStatsResponse(BaseSchema):
    courses_count: int
    materials_count: int
    students_count: int
    avg_score: int


class InstitutionStatsResponse(BaseSchema):
    students_count: int
    instructors_count: int
    courses_count: int
    programmes_count: int
    average_performance: int


class AdminStatsResponse(BaseSchema):
    total_users: int
    institutions_count: int
    content_count: int
    activity_rate: int


class OnboardingResponse(BaseSchema):
    message: str
    user: UserResponse
    institution: Optional[InstitutionResponse] = None
