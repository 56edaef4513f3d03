"""Reviews, ratings and abuse reports attached to materials."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from typing import List
from studyhub.core.auth import require_onboarding
from studyhub.core.database import get_db
from studyhub.models.engagement import MaterialReview, MaterialRating, MaterialReport, ReportStatus
from studyhub.models.material import Material
from studyhub.models.user import User
from studyhub.schemas.engagement import (
    ReviewCreate,
    ReviewResponse,
    RatingCreate,
    RatingResponse,
    RatingSummaryResponse,
    ReportCreate,
    ReportResponse,
    ReportSubmittedResponse,
    MessageResponse,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


def ensure_material_exists(db: Session, material_id: int) -> None:
    if not db.query(Material.id).filter(Material.id == material_id).first():
        raise HTTPException(status_code=404, detail="Material not found")


# Reviews

@router.get("/materials/{material_id}/reviews", response_model=List[ReviewResponse])
def list_reviews(material_id: int, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    return (
        db.query(MaterialReview)
        .filter(MaterialReview.material_id == material_id)
        .order_by(MaterialReview.created_at.desc(), MaterialReview.id.desc())
        .all()
    )


@router.post("/materials/{material_id}/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    material_id: int,
    review: ReviewCreate,
    user: User = Depends(require_onboarding),
    db: Session = Depends(get_db),
):
    """Write a review. Each user may review a material once."""
    ensure_material_exists(db, material_id)
    existing = (
        db.query(MaterialReview)
        .filter(MaterialReview.material_id == material_id, MaterialReview.user_id == user.id)
        .first()
    )
    if existing:
        raise HTTPException(status_code=400, detail="You have already reviewed this material")

    try:
        db_review = MaterialReview(material_id=material_id, user_id=user.id, review_text=review.review_text)
        db.add(db_review)
        db.commit()
        db.refresh(db_review)
        return db_review
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="You have already reviewed this material")
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


def get_own_review(db: Session, review_id: int, user: User) -> MaterialReview:
    review = db.query(MaterialReview).filter(MaterialReview.id == review_id).first()
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    if review.user_id != user.id:
        raise HTTPException(status_code=403, detail="You can only modify your own reviews")
    return review


@router.put("/reviews/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    review_update: ReviewCreate,
    user: User = Depends(require_onboarding),
    db: Session = Depends(get_db),
):
    review = get_own_review(db, review_id, user)
    try:
        review.review_text = review_update.review_text
        db.commit()
        db.refresh(review)
        return review
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@router.delete("/reviews/{review_id}", response_model=MessageResponse)
def delete_review(review_id: int, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    review = get_own_review(db, review_id, user)
    try:
        db.delete(review)
        db.commit()
        return MessageResponse(message="Review deleted")
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


# Ratings

@router.get("/materials/{material_id}/ratings", response_model=RatingSummaryResponse)
def get_ratings(material_id: int, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    """All ratings of a material with their average and the caller's own rating."""
    ratings = (
        db.query(MaterialRating)
        .filter(MaterialRating.material_id == material_id)
        .order_by(MaterialRating.created_at.desc(), MaterialRating.id.desc())
        .all()
    )
    average = (
        db.query(func.coalesce(func.avg(MaterialRating.rating), 0))
        .filter(MaterialRating.material_id == material_id)
        .scalar()
    )
    own = next((rating for rating in ratings if rating.user_id == user.id), None)
    return RatingSummaryResponse(
        ratings=[RatingResponse.model_validate(rating) for rating in ratings],
        average=float(average or 0),
        user_rating=RatingResponse.model_validate(own) if own else None,
        count=len(ratings),
    )


@router.post("/materials/{material_id}/ratings", response_model=RatingResponse)
def rate_material(
    material_id: int,
    rating: RatingCreate,
    user: User = Depends(require_onboarding),
    db: Session = Depends(get_db),
):
    """Rate a material 1-5. Rating again replaces the caller's previous rating."""
    ensure_material_exists(db, material_id)
    try:
        db_rating = (
            db.query(MaterialRating)
            .filter(MaterialRating.material_id == material_id, MaterialRating.user_id == user.id)
            .first()
        )
        if db_rating:
            db_rating.rating = rating.rating
        else:
            db_rating = MaterialRating(material_id=material_id, user_id=user.id, rating=rating.rating)
            db.add(db_rating)
        db.commit()
        db.refresh(db_rating)
        return db_rating
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@router.delete("/ratings/{rating_id}", response_model=MessageResponse)
def delete_rating(rating_id: int, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    rating = db.query(MaterialRating).filter(MaterialRating.id == rating_id).first()
    if not rating:
        raise HTTPException(status_code=404, detail="Rating not found")
    if rating.user_id != user.id:
        raise HTTPException(status_code=403, detail="You can only delete your own ratings")

    try:
        db.delete(rating)
        db.commit()
        return MessageResponse(message="Rating deleted")
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


# Reports

@router.post(
    "/materials/{material_id}/reports",
    response_model=ReportSubmittedResponse,
    status_code=status.HTTP_201_CREATED,
)
def report_material(
    material_id: int,
    report: ReportCreate,
    user: User = Depends(require_onboarding),
    db: Session = Depends(get_db),
):
    ensure_material_exists(db, material_id)
    try:
        db_report = MaterialReport(
            material_id=material_id,
            user_id=user.id,
            reason=report.reason,
            description=report.description,
            status=ReportStatus.pending,
        )
        db.add(db_report)
        db.commit()
        db.refresh(db_report)
        logger.info(f"Material {material_id} reported by user {user.id} ({report.reason.value})")
        return ReportSubmittedResponse(
            message="Report submitted successfully",
            report=ReportResponse.model_validate(db_report),
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
