from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from studyhub.core.auth import require_onboarding
from studyhub.core.database import get_db
from studyhub.models.user import User
from studyhub.schemas.stats import Achievement, PerformanceResponse, StudentStatsResponse
from studyhub.services.performance import student_achievements, student_performance, student_stats
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/stats", response_model=StudentStatsResponse)
def get_student_stats(user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    return StudentStatsResponse(**student_stats(db, user.id))


@router.get("/achievements", response_model=List[Achievement])
def get_achievements(user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    return [Achievement(**achievement) for achievement in student_achievements(db, user.id)]


@router.get("/performance", response_model=PerformanceResponse)
def get_performance(user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    """
    Performance summary over every quiz attempt of the caller.

    Weekly buckets and study days are computed in the server's local time.
    """
    try:
        summary = student_performance(db, user.id)
    except Exception:
        logger.exception(f"Error computing performance for user {user.id}")
        raise HTTPException(status_code=500, detail="Failed to fetch performance")
    return PerformanceResponse(**summary)
