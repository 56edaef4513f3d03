from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from studyhub.core.auth import require_onboarding, require_role
from studyhub.core.config import get_settings
from studyhub.core.database import get_db
from studyhub.models.material import ModerationStatus
from studyhub.models.quiz import Quiz, QuizQuestion, QuizAttempt
from studyhub.models.user import User, UserRole
from studyhub.schemas.quiz import (
    QuizCreate,
    QuizSubmission,
    QuizResponse,
    QuizWithCount,
    QuizQuestionResponse,
    QuizAttemptResponse,
    QuizSubmitResponse,
)
from studyhub.services.quiz_scoring import score_quiz
import logging

logger = logging.getLogger(__name__)
router = APIRouter()
attempts_router = APIRouter()

require_quiz_author = require_role(UserRole.instructor, UserRole.institution, UserRole.admin)


def visible_quizzes(db: Session, role: Optional[UserRole]):
    query = db.query(Quiz)
    if role != UserRole.admin:
        query = query.filter(Quiz.moderation_status == ModerationStatus.approved)
    return query


def get_visible_quiz_or_404(db: Session, quiz_id: int, role: Optional[UserRole]) -> Quiz:
    quiz = visible_quizzes(db, role).filter(Quiz.id == quiz_id).first()
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz


def with_question_counts(db: Session, quizzes: List[Quiz]) -> List[QuizWithCount]:
    """Attach question counts using one grouped query."""
    ids = [quiz.id for quiz in quizzes]
    counts = {}
    if ids:
        counts = dict(
            db.query(QuizQuestion.quiz_id, func.count(QuizQuestion.id))
            .filter(QuizQuestion.quiz_id.in_(ids))
            .group_by(QuizQuestion.quiz_id)
            .all()
        )
    return [
        QuizWithCount(**QuizResponse.model_validate(quiz).model_dump(), questions_count=counts.get(quiz.id, 0))
        for quiz in quizzes
    ]


@router.get("", response_model=List[QuizWithCount])
def list_quizzes(user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    quizzes = visible_quizzes(db, user.role).order_by(Quiz.created_at.desc(), Quiz.id.desc()).all()
    return with_question_counts(db, quizzes)


@router.get("/upcoming", response_model=List[QuizWithCount])
def upcoming_quizzes(user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    """First five quizzes, newest first."""
    quizzes = visible_quizzes(db, user.role).order_by(Quiz.created_at.desc(), Quiz.id.desc()).limit(5).all()
    return with_question_counts(db, quizzes)


@router.get("/{quiz_id}", response_model=QuizResponse)
def get_quiz(quiz_id: int, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    return get_visible_quiz_or_404(db, quiz_id, user.role)


@router.get("/{quiz_id}/questions", response_model=List[QuizQuestionResponse])
def get_quiz_questions(quiz_id: int, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    quiz = get_visible_quiz_or_404(db, quiz_id, user.role)
    return quiz.questions


@router.post("", response_model=QuizResponse, status_code=status.HTTP_201_CREATED)
def create_quiz(quiz: QuizCreate, user: User = Depends(require_quiz_author), db: Session = Depends(get_db)):
    """Create a quiz and its questions in the order given. New quizzes await moderation."""
    settings = get_settings()
    try:
        data = quiz.model_dump(exclude={"questions"})
        if data.get("passing_score") is None:
            data["passing_score"] = settings.default_passing_score

        db_quiz = Quiz(**data, created_by_id=user.id, moderation_status=ModerationStatus.pending)
        db.add(db_quiz)
        db.flush()  # Need the quiz id for its questions

        for position, question in enumerate(quiz.questions, start=1):
            db.add(QuizQuestion(quiz_id=db_quiz.id, order=position, **question.model_dump()))

        db.commit()
        db.refresh(db_quiz)
        logger.info(f"Quiz {db_quiz.id} created by user {user.id} with {len(quiz.questions)} questions")
        return db_quiz
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@router.post("/{quiz_id}/submit", response_model=QuizSubmitResponse)
def submit_quiz(
    quiz_id: int,
    submission: QuizSubmission,
    user: User = Depends(require_onboarding),
    db: Session = Depends(get_db),
):
    """
    Grade a submission and record the attempt.

    Answers are compared case-insensitively; `passed` is fixed now against
    the quiz's current passing score.
    """
    quiz = get_visible_quiz_or_404(db, quiz_id, user.role)
    result = score_quiz(quiz.questions, submission.answers, quiz.passing_score)

    try:
        attempt = QuizAttempt(
            quiz_id=quiz.id,
            student_id=user.id,
            answers=submission.answers,
            score=result.correct,
            total_questions=result.total,
            passed=result.passed,
        )
        db.add(attempt)
        db.commit()
        db.refresh(attempt)
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")

    logger.info(
        f"User {user.id} scored {result.correct}/{result.total} on quiz {quiz.id} (passed={result.passed})"
    )
    return QuizSubmitResponse(
        **QuizAttemptResponse.model_validate(attempt).model_dump(),
        score_percentage=result.percentage,
    )


def _my_attempts(db: Session, user: User):
    return (
        db.query(QuizAttempt)
        .filter(QuizAttempt.student_id == user.id)
        .order_by(QuizAttempt.completed_at.desc(), QuizAttempt.id.desc())
    )


@attempts_router.get("", response_model=List[QuizAttemptResponse])
def list_attempts(user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    return _my_attempts(db, user).all()


@attempts_router.get("/recent", response_model=List[QuizAttemptResponse])
def recent_attempts(user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    return _my_attempts(db, user).limit(5).all()
