from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List
from studyhub.core.auth import require_onboarding
from studyhub.core.database import get_db
from studyhub.models.course import Course
from studyhub.models.user import User
from studyhub.schemas.course import CourseCreate, CourseBulkCreate, CourseResponse
from studyhub.schemas.institution import BulkImportResponse
from studyhub.services.catalogue_import import bulk_create_courses, import_summary
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[CourseResponse])
def list_courses(user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    return db.query(Course).order_by(Course.title, Course.id).all()


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(course: CourseCreate, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    """Create a new course."""
    try:
        db_course = Course(**course.model_dump())
        db.add(db_course)
        db.commit()
        db.refresh(db_course)
        return db_course
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@router.post("/bulk", response_model=BulkImportResponse)
def bulk_create(payload: CourseBulkCreate, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    """
    Import many courses at once.

    A course whose title already exists in the same institution is skipped,
    as is any row that fails to insert; the rest are still created.
    """
    added, skipped = bulk_create_courses(db, payload.courses)
    logger.info(f"Bulk course import by user {user.id}: {added} added, {skipped} skipped")
    return BulkImportResponse(
        success=True,
        added=added,
        skipped=skipped,
        message=import_summary(added, skipped, "course"),
    )
