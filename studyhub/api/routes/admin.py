"""
Administration endpoints. Every route here is admin-only through the
router-level `require_admin` dependency.
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from studyhub.core.auth import require_admin
from studyhub.core.database import get_db
from studyhub.models.engagement import MaterialReport, ReportStatus
from studyhub.models.institution import Institution, Programme
from studyhub.models.material import Material, ModerationStatus
from studyhub.models.quiz import Quiz
from studyhub.models.user import User
from studyhub.schemas.engagement import MessageResponse, ReportResponse, ReportStatusUpdate
from studyhub.schemas.institution import (
    InstitutionCreate,
    InstitutionBulkCreate,
    InstitutionResponse,
    ProgrammeCreate,
    ProgrammeBulkCreate,
    ProgrammeResponse,
    BulkImportResponse,
    ProgrammeBulkResponse,
)
from studyhub.schemas.material import MaterialResponse, MaterialModerationResponse, ModerationRequest
from studyhub.schemas.quiz import QuizResponse, QuizModerationResponse
from studyhub.schemas.stats import AdminStatsResponse
from studyhub.schemas.user import UserResponse
from studyhub.services.catalogue_import import (
    bulk_create_institutions,
    bulk_create_programmes,
    import_summary,
    validate_programme_rows,
)
from studyhub.services.moderation import InvalidModerationStatus, moderate
from studyhub.services.performance import round_half_up
import logging

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_admin)])

MODERATION_STATES = tuple(state.value for state in ModerationStatus)


@router.get("/stats", response_model=AdminStatsResponse)
def get_admin_stats(db: Session = Depends(get_db)):
    """Platform-wide counters; activity rate is the share of users who finished onboarding."""
    total_users = db.query(User).count()
    onboarded = db.query(User).filter(User.onboarding_completed.is_(True)).count()
    return AdminStatsResponse(
        total_users=total_users,
        institutions_count=db.query(Institution).count(),
        content_count=db.query(Material).count() + db.query(Quiz).count(),
        activity_rate=round_half_up(onboarded / total_users * 100) if total_users else 0,
    )


@router.get("/users", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db)):
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


# Institutions

@router.get("/institutions", response_model=List[InstitutionResponse])
def list_institutions(db: Session = Depends(get_db)):
    return db.query(Institution).order_by(Institution.name).all()


@router.post("/institutions", response_model=InstitutionResponse, status_code=status.HTTP_201_CREATED)
def create_institution(institution: InstitutionCreate, db: Session = Depends(get_db)):
    try:
        db_institution = Institution(**institution.model_dump())
        db.add(db_institution)
        db.commit()
        db.refresh(db_institution)
        return db_institution
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@router.post("/institutions/bulk", response_model=BulkImportResponse)
def bulk_create_institutions_route(payload: InstitutionBulkCreate, db: Session = Depends(get_db)):
    """Import institutions; names that already exist are skipped."""
    added, skipped = bulk_create_institutions(db, payload.institutions)
    logger.info(f"Bulk institution import: {added} added, {skipped} skipped")
    return BulkImportResponse(
        success=True,
        added=added,
        skipped=skipped,
        message=import_summary(added, skipped, "institution"),
    )


# Programmes

@router.get("/programmes/{institution_id}", response_model=List[ProgrammeResponse])
def list_programmes(institution_id: int, db: Session = Depends(get_db)):
    return (
        db.query(Programme)
        .filter(Programme.institution_id == institution_id)
        .order_by(Programme.name)
        .all()
    )


@router.post("/programmes", response_model=ProgrammeResponse, status_code=status.HTTP_201_CREATED)
def create_programme(programme: ProgrammeCreate, db: Session = Depends(get_db)):
    if not db.query(Institution.id).filter(Institution.id == programme.institution_id).first():
        raise HTTPException(status_code=404, detail="Institution not found")
    try:
        db_programme = Programme(**programme.model_dump())
        db.add(db_programme)
        db.commit()
        db.refresh(db_programme)
        return db_programme
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@router.post("/programmes/bulk", response_model=ProgrammeBulkResponse)
def bulk_create_programmes_route(payload: ProgrammeBulkCreate, db: Session = Depends(get_db)):
    """
    Import programmes for one institution from JSON rows or CSV-shaped rows.

    The institution id in the payload overrides any id inside the rows. One
    invalid row rejects the whole import.
    """
    if not db.query(Institution.id).filter(Institution.id == payload.institution_id).first():
        raise HTTPException(status_code=404, detail="Institution not found")
    try:
        programmes = validate_programme_rows(payload.programmes, payload.institution_id, payload.format)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        created = bulk_create_programmes(db, programmes)
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")

    logger.info(f"Imported {len(created)} programmes for institution {payload.institution_id}")
    return ProgrammeBulkResponse(
        success=True,
        count=len(created),
        programmes=[ProgrammeResponse.model_validate(programme) for programme in created],
    )


@router.delete("/programmes/{programme_id}")
def delete_programme(programme_id: int, db: Session = Depends(get_db)):
    programme = db.query(Programme).filter(Programme.id == programme_id).first()
    if not programme:
        raise HTTPException(status_code=404, detail="Programme not found")
    try:
        db.delete(programme)
        db.commit()
        return {"success": True}
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


# Content moderation

def _moderation_queue(db: Session, model, status_filter: Optional[str]):
    query = db.query(model)
    if status_filter in MODERATION_STATES:
        query = query.filter(model.moderation_status == ModerationStatus(status_filter))
    return query.order_by(model.created_at.desc(), model.id.desc()).all()


@router.get("/content/materials", response_model=List[MaterialResponse])
def list_materials_for_moderation(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    """Materials in a moderation state, newest first. Unknown or missing status lists all."""
    return _moderation_queue(db, Material, status_filter)


@router.get("/content/quizzes", response_model=List[QuizResponse])
def list_quizzes_for_moderation(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    return _moderation_queue(db, Quiz, status_filter)


def _apply_moderation(db: Session, item, request: ModerationRequest, admin: User):
    try:
        moderate(item, request.status, admin, request.reason)
    except InvalidModerationStatus as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        db.commit()
        db.refresh(item)
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
    return item


@router.patch("/content/materials/{material_id}/moderate", response_model=MaterialModerationResponse)
def moderate_material(
    material_id: int,
    request: ModerationRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    material = db.query(Material).filter(Material.id == material_id).first()
    if not material:
        raise HTTPException(status_code=404, detail="Material not found")
    material = _apply_moderation(db, material, request, admin)
    return MaterialModerationResponse(
        message="Material moderated successfully",
        material=MaterialResponse.model_validate(material),
    )


@router.patch("/content/quizzes/{quiz_id}/moderate", response_model=QuizModerationResponse)
def moderate_quiz(
    quiz_id: int,
    request: ModerationRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    quiz = _apply_moderation(db, quiz, request, admin)
    return QuizModerationResponse(
        message="Quiz moderated successfully",
        quiz=QuizResponse.model_validate(quiz),
    )


@router.delete("/content/materials/{material_id}", response_model=MessageResponse)
def delete_material(material_id: int, db: Session = Depends(get_db)):
    material = db.query(Material).filter(Material.id == material_id).first()
    if not material:
        raise HTTPException(status_code=404, detail="Material not found")
    try:
        db.delete(material)
        db.commit()
        return MessageResponse(message="Material deleted successfully")
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@router.delete("/content/quizzes/{quiz_id}", response_model=MessageResponse)
def delete_quiz(quiz_id: int, db: Session = Depends(get_db)):
    quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    try:
        db.delete(quiz)
        db.commit()
        return MessageResponse(message="Quiz deleted successfully")
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


# Reports

@router.get("/reports", response_model=List[ReportResponse])
def list_reports(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    """Abuse reports, newest first, optionally narrowed to one status."""
    query = db.query(MaterialReport)
    if status_filter:
        if status_filter not in ReportStatus.__members__:
            return []
        query = query.filter(MaterialReport.status == ReportStatus(status_filter))
    return query.order_by(MaterialReport.created_at.desc(), MaterialReport.id.desc()).all()


@router.put("/reports/{report_id}", response_model=ReportResponse)
def update_report(
    report_id: int,
    update: ReportStatusUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    report = db.query(MaterialReport).filter(MaterialReport.id == report_id).first()
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    try:
        report.status = update.status
        report.reviewed_by_id = admin.id
        report.reviewed_at = datetime.now(timezone.utc)
        report.admin_notes = update.admin_notes
        db.commit()
        db.refresh(report)
        return report
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
