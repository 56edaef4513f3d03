from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from studyhub.core.auth import require_onboarding
from studyhub.core.database import get_db
from studyhub.models.course import Course
from studyhub.models.material import Material, ModerationStatus
from studyhub.models.user import User, UserRole
from studyhub.schemas.course import CourseSummary
from studyhub.schemas.engagement import MessageResponse
from studyhub.schemas.material import (
    MaterialCreate,
    MaterialUpdate,
    MaterialResponse,
    MaterialWithStats,
    MaterialDetailResponse,
    MaterialListResponse,
    MaterialStats,
    Pagination,
)
from studyhub.schemas.user import UploaderSummary
from studyhub.services.material_query import MaterialFilters, query_materials, visible_materials
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


def with_stats(material: Material, stats) -> MaterialWithStats:
    """Attach aggregate stats to a material for the library listing."""
    base = MaterialResponse.model_validate(material).model_dump()
    return MaterialWithStats(
        **base,
        stats=MaterialStats(
            average_rating=stats.average_rating,
            rating_count=stats.rating_count,
            review_count=stats.review_count,
        ),
    )


def get_material_or_404(db: Session, material_id: int) -> Material:
    material = db.query(Material).filter(Material.id == material_id).first()
    if not material:
        raise HTTPException(status_code=404, detail="Material not found")
    return material


@router.get("", response_model=MaterialListResponse)
def list_materials(
    course_id: Optional[str] = Query(None, alias="courseId"),
    level: Optional[str] = Query(None),
    semester: Optional[str] = Query(None),
    topic: Optional[str] = Query(None),
    material_type: Optional[str] = Query(None, alias="materialType"),
    uploader_role: Optional[str] = Query(None, alias="uploaderRole"),
    search: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    user: User = Depends(require_onboarding),
    db: Session = Depends(get_db),
):
    """
    Browse the resource library.

    Query values are taken as raw strings: bad paging values fall back to
    defaults and bad filter values match nothing, so this never returns 4xx.
    """
    filters = MaterialFilters(
        course_id=course_id,
        level=level,
        semester=semester,
        topic=topic,
        material_type=material_type,
        uploader_role=uploader_role,
        search=search,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    try:
        result = query_materials(db, user.role, filters)
    except Exception:
        logger.exception("Error fetching materials")
        raise HTTPException(status_code=500, detail="Failed to fetch materials")

    return MaterialListResponse(
        materials=[with_stats(material, stats) for material, stats in result.items],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            total_pages=result.total_pages,
        ),
        topics=result.topics,
    )


@router.get("/recent", response_model=List[MaterialResponse])
def recent_materials(user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    """Five newest materials the caller can see."""
    return (
        visible_materials(db, user.role)
        .order_by(Material.created_at.desc(), Material.id.desc())
        .limit(5)
        .all()
    )


@router.get("/my-library", response_model=List[MaterialResponse])
def my_library(user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    """The caller's own uploads in any moderation state."""
    return (
        db.query(Material)
        .filter(Material.uploaded_by_id == user.id)
        .order_by(Material.created_at.desc(), Material.id.desc())
        .all()
    )


@router.get("/{material_id}", response_model=MaterialDetailResponse)
def get_material(material_id: int, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    """Get a material with its uploader and course; each call counts as a view."""
    material = get_material_or_404(db, material_id)
    if user.role != UserRole.admin and material.moderation_status != ModerationStatus.approved:
        raise HTTPException(status_code=404, detail="Material not found")

    try:
        db.query(Material).filter(Material.id == material_id).update(
            {Material.view_count: Material.view_count + 1}, synchronize_session=False
        )
        db.commit()
        db.refresh(material)
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")

    uploaded_by = None
    if material.uploaded_by_id:
        uploader = db.query(User).filter(User.id == material.uploaded_by_id).first()
        if uploader:
            uploaded_by = UploaderSummary.model_validate(uploader)

    course = None
    if material.course_id:
        course_row = db.query(Course).filter(Course.id == material.course_id).first()
        if course_row:
            course = CourseSummary(title=course_row.title)

    return MaterialDetailResponse(
        **MaterialResponse.model_validate(material).model_dump(),
        uploaded_by=uploaded_by,
        course=course,
    )


@router.post("", response_model=MaterialResponse, status_code=status.HTTP_201_CREATED)
def create_material(material: MaterialCreate, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    """Upload a material. It stays pending until an admin moderates it."""
    try:
        db_material = Material(
            **material.model_dump(),
            uploaded_by_id=user.id,
            institution_id=user.institution_id,
            programme_id=user.programme_id,
            moderation_status=ModerationStatus.pending,
        )
        db.add(db_material)
        db.commit()
        db.refresh(db_material)
        logger.info(f"Material {db_material.id} uploaded by user {user.id}")
        return db_material
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@router.put("/{material_id}", response_model=MaterialResponse)
def update_material(
    material_id: int,
    material_update: MaterialUpdate,
    user: User = Depends(require_onboarding),
    db: Session = Depends(get_db),
):
    """Update a material. Only its uploader may edit it."""
    material = get_material_or_404(db, material_id)
    if material.uploaded_by_id != user.id:
        raise HTTPException(status_code=403, detail="You can only edit your own materials")

    try:
        for field, value in material_update.model_dump(exclude_unset=True).items():
            setattr(material, field, value)
        db.commit()
        db.refresh(material)
        return material
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@router.delete("/{material_id}", response_model=MessageResponse)
def delete_material(material_id: int, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    material = get_material_or_404(db, material_id)
    if material.uploaded_by_id != user.id:
        raise HTTPException(status_code=403, detail="You can only delete your own materials")

    try:
        db.delete(material)
        db.commit()
        return MessageResponse(message="Material deleted successfully")
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@router.post("/{material_id}/download", response_model=MessageResponse)
def track_download(material_id: int, user: User = Depends(require_onboarding), db: Session = Depends(get_db)):
    get_material_or_404(db, material_id)
    try:
        db.query(Material).filter(Material.id == material_id).update(
            {Material.download_count: Material.download_count + 1}, synchronize_session=False
        )
        db.commit()
        return MessageResponse(message="Download tracked successfully")
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
