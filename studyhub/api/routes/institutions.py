from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from studyhub.core.auth import get_current_user
from studyhub.core.database import get_db
from studyhub.models.institution import Institution, Programme
from studyhub.models.user import User
from studyhub.schemas.institution import InstitutionResponse, ProgrammeResponse

# Readable before onboarding: the onboarding form needs institutions and their programmes
router = APIRouter()
programmes_router = APIRouter()


@router.get("", response_model=List[InstitutionResponse])
def list_institutions(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return db.query(Institution).order_by(Institution.name).all()


@router.get("/{institution_id}", response_model=InstitutionResponse)
def get_institution(institution_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    institution = db.query(Institution).filter(Institution.id == institution_id).first()
    if not institution:
        raise HTTPException(status_code=404, detail="Institution not found")
    return institution


@programmes_router.get("/single/{programme_id}", response_model=ProgrammeResponse)
def get_programme(programme_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    programme = db.query(Programme).filter(Programme.id == programme_id).first()
    if not programme:
        raise HTTPException(status_code=404, detail="Programme not found")
    return programme


@programmes_router.get("/{institution_id}", response_model=List[ProgrammeResponse])
def list_programmes(institution_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return (
        db.query(Programme)
        .filter(Programme.institution_id == institution_id)
        .order_by(Programme.name)
        .all()
    )
