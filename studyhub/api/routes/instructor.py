from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from studyhub.core.auth import require_role
from studyhub.core.database import get_db
from studyhub.models.course import Course
from studyhub.models.material import Material
from studyhub.models.quiz import Quiz, QuizAttempt
from studyhub.models.user import User, UserRole
from studyhub.schemas.material import MaterialResponse
from studyhub.schemas.quiz import QuizResponse
from studyhub.schemas.stats import InstructorStatsResponse
from studyhub.services.performance import round_half_up, score_percentage

router = APIRouter()

require_instructor = require_role(UserRole.instructor)


@router.get("/stats", response_model=InstructorStatsResponse)
def get_instructor_stats(user: User = Depends(require_instructor), db: Session = Depends(get_db)):
    """
    Teaching dashboard counters.

    Students and average score cover every attempt on quizzes the caller
    created.
    """
    courses_count = db.query(Course).filter(Course.instructor_id == user.id).count()
    materials_count = db.query(Material).filter(Material.uploaded_by_id == user.id).count()

    attempts = (
        db.query(QuizAttempt.student_id, QuizAttempt.score, QuizAttempt.total_questions)
        .join(Quiz, QuizAttempt.quiz_id == Quiz.id)
        .filter(Quiz.created_by_id == user.id)
        .all()
    )
    students = {student_id for student_id, _, _ in attempts}
    avg_score = (
        round_half_up(sum(score_percentage(score, total) for _, score, total in attempts) / len(attempts))
        if attempts
        else 0
    )

    return InstructorStatsResponse(
        courses_count=courses_count,
        materials_count=materials_count,
        students_count=len(students),
        avg_score=avg_score,
    )


@router.get("/materials", response_model=List[MaterialResponse])
def get_instructor_materials(user: User = Depends(require_instructor), db: Session = Depends(get_db)):
    return (
        db.query(Material)
        .filter(Material.uploaded_by_id == user.id)
        .order_by(Material.created_at.desc(), Material.id.desc())
        .all()
    )


@router.get("/quizzes", response_model=List[QuizResponse])
def get_instructor_quizzes(user: User = Depends(require_instructor), db: Session = Depends(get_db)):
    return (
        db.query(Quiz)
        .filter(Quiz.created_by_id == user.id)
        .order_by(Quiz.created_at.desc(), Quiz.id.desc())
        .all()
    )
