from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Annotated, Union
from studyhub.core.auth import get_current_user
from studyhub.core.database import get_db
from studyhub.models.institution import Institution, Programme
from studyhub.models.user import User, UserRole
from studyhub.schemas.institution import InstitutionResponse
from studyhub.schemas.stats import OnboardingResponse
from studyhub.schemas.user import (
    NO_INSTITUTION,
    UserCreate,
    UserResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
    StudentOnboarding,
    InstructorOnboarding,
    InstitutionOnboarding,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter()
auth_router = APIRouter()

OnboardingRequest = Annotated[
    Union[StudentOnboarding, InstructorOnboarding, InstitutionOnboarding],
    Body(discriminator="role"),
]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    """Create the account record for a user the gateway has just registered."""
    try:
        db_user = User(**user.model_dump())
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        return db_user
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists"
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


@auth_router.get("/user", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    return user


def _linked_institution_id(value):
    return None if value == NO_INSTITUTION else value


def _onboard_student(db: Session, user: User, data: StudentOnboarding) -> None:
    institution_id = _linked_institution_id(data.institution_id)
    if institution_id is not None:
        programme = db.query(Programme).filter(Programme.id == data.programme_id).first()
        if not programme:
            raise HTTPException(status_code=400, detail="Invalid programme selected")
        if programme.institution_id != institution_id:
            raise HTTPException(
                status_code=400,
                detail="Selected programme does not belong to the selected institution",
            )
    for field, value in data.model_dump(exclude={"role", "institution_id"}).items():
        setattr(user, field, value)
    user.institution_id = institution_id
    if institution_id is None:
        # Programmes belong to institutions
        user.programme_id = None
    user.role = UserRole.student


def _onboard_instructor(db: Session, user: User, data: InstructorOnboarding) -> None:
    institution_id = _linked_institution_id(data.institution_id)
    if institution_id is not None and not db.query(Institution.id).filter(Institution.id == institution_id).first():
        raise HTTPException(status_code=400, detail="Invalid institution selected")
    for field, value in data.model_dump(exclude={"role", "institution_id"}).items():
        setattr(user, field, value)
    user.institution_id = institution_id
    user.role = UserRole.instructor


def _onboard_institution(db: Session, user: User, data: InstitutionOnboarding) -> Institution:
    """Create the institution the account represents and make the user its owner."""
    institution = Institution(name=data.institution_name, description=data.bio)
    db.add(institution)
    db.flush()
    for field, value in data.model_dump(exclude={"role", "institution_name"}).items():
        setattr(user, field, value)
    user.institution_id = institution.id
    user.role = UserRole.institution
    return institution


@auth_router.post("/onboarding", response_model=OnboardingResponse)
def complete_onboarding(
    data: OnboardingRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Complete onboarding for the chosen role.

    The body is validated against the role's form. Institution accounts
    also get their institution record created and linked here.
    """
    institution = None
    try:
        if isinstance(data, StudentOnboarding):
            _onboard_student(db, user, data)
        elif isinstance(data, InstructorOnboarding):
            _onboard_instructor(db, user, data)
        else:
            institution = _onboard_institution(db, user, data)

        user.onboarding_completed = True
        db.commit()
        db.refresh(user)
        if institution is not None:
            db.refresh(institution)
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")

    logger.info(f"User {user.id} completed onboarding as {user.role.value}")
    return OnboardingResponse(
        message="Onboarding completed",
        user=UserResponse.model_validate(user),
        institution=InstitutionResponse.model_validate(institution) if institution else None,
    )


@auth_router.patch("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    profile: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        for field, value in profile.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        db.commit()
        db.refresh(user)
        return ProfileUpdateResponse(message="Profile updated successfully", user=UserResponse.model_validate(user))
    except SQLAlchemyError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")
