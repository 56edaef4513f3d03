# Import all models here so Base.metadata is complete for Alembic
from studyhub.models.user import User, UserRole
from studyhub.models.institution import Institution, Programme
from studyhub.models.course import Course
from studyhub.models.material import Material, MaterialType, ModerationStatus
from studyhub.models.quiz import Quiz, QuizQuestion, QuizAttempt, QuestionType
from studyhub.models.engagement import (
    Bookmark,
    MaterialReview,
    MaterialRating,
    MaterialReport,
    ReportReason,
    ReportStatus,
)

__all__ = [
    "User",
    "UserRole",
    "Institution",
    "Programme",
    "Course",
    "Material",
    "MaterialType",
    "ModerationStatus",
    "Quiz",
    "QuizQuestion",
    "QuizAttempt",
    "QuestionType",
    # Engagement models
    "Bookmark",
    "MaterialReview",
    "MaterialRating",
    "MaterialReport",
    "ReportReason",
    "ReportStatus",
]
