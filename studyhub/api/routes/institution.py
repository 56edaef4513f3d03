"""Dashboard for institution accounts, scoped to the institution linked to the caller."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List
from studyhub.core.auth import require_role
from studyhub.core.database import get_db
from studyhub.models.course import Course
from studyhub.models.institution import Programme
from studyhub.models.user import User, UserRole
from studyhub.schemas.institution import InstitutionProgrammeCreate, ProgrammeResponse
from studyhub.schemas.stats import InstitutionStatsResponse
from studyhub.schemas.user import InstructorProfileResponse, StudentProfileResponse

router = APIRouter()


def require_linked_institution(user: User = Depends(require_role(UserRole.institution))) -> User:
    if not user.institution_id:
        raise HTTPException(status_code=400, detail="Institution not linked to user")
    return user


def _members(db: Session, institution_id: int, role: UserRole):
    return db.query(User).filter(User.institution_id == institution_id, User.role == role)


@router.get("/stats", response_model=InstitutionStatsResponse)
def get_institution_stats(user: User = Depends(require_linked_institution), db: Session = Depends(get_db)):
    return InstitutionStatsResponse(
        students_count=_members(db, user.institution_id, UserRole.student).count(),
        instructors_count=_members(db, user.institution_id, UserRole.instructor).count(),
        courses_count=db.query(Course).filter(Course.institution_id == user.institution_id).count(),
        programmes_count=db.query(Programme).filter(Programme.institution_id == user.institution_id).count(),
        # Not tracked per institution yet
        average_performance=0,
    )


@router.get("/instructors", response_model=List[InstructorProfileResponse])
def get_institution_instructors(user: User = Depends(require_linked_institution), db: Session = Depends(get_db)):
    return _members(db, user.institution_id, UserRole.instructor).order_by(User.id).all()


@router.get("/students", response_model=List[StudentProfileResponse])
def get_institution_students(user: User = Depends(require_linked_institution), db: Session = Depends(get_db)):
    return _members(db, user.institution_id, UserRole.student).order_by(User.id).all()


@router.get("/programmes", response_model=List[ProgrammeResponse])
def get_institution_programmes(user: User = Depends(require_linked_institution), db: Session = Depends(get_db)):
    return (
        db.query(Programme)
        .filter(Programme.institution_id == user.institution_id)
        .order_by(Programme.name)
        .all()
    )


@router.post("/programmes", response_model=ProgrammeResponse, status_code=status.HTTP_201_CREATED)
def create_institution_programme(
    programme: InstitutionProgrammeCreate,
    user: User = Depends(require_linked_institution),
    db: Session = Depends(get_db),
):
    """Add a programme to the caller's own institution."""
    try:
        db_programme = Programme(**programme.model_dump(), institution_id=user.institution_id)
        db.add(db_programme)
        db.commit()
        db.refresh(db_programme)
        return db_programme
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
