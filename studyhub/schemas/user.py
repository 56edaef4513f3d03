from pydantic import EmailStr, Field
from typing import Optional, List, Literal, Union
from datetime import datetime, date
from enum import Enum
from studyhub.schemas.base import BaseSchema, RequestSchema


class UserRole(str, Enum):
    student = "student"
    instructor = "instructor"
    institution = "institution"
    admin = "admin"


Gender = Literal["male", "female", "other", "prefer_not_to_say"]

# Sentinel sent by the onboarding form for learners not attached to an institution
NO_INSTITUTION = "no-institution"


# Request schemas
class UserCreate(RequestSchema):
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ProfileUpdate(RequestSchema):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)


class OnboardingBase(RequestSchema):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    gender: Optional[Gender] = None
    bio: Optional[str] = None


class StudentOnboarding(OnboardingBase):
    role: Literal["student"]
    institution_id: Union[int, Literal["no-institution"]]
    current_level: int = Field(..., ge=100, le=900)
    year_of_admission: int = Field(..., ge=2011, le=date.today().year)
    expected_graduation_year: int = Field(..., ge=date.today().year, le=date.today().year + 8)
    mode_of_study: Literal["Full-time", "Part-time"]
    programme_id: int
    study_goals: List[str] = Field(..., min_length=2)
    learning_style: List[str] = Field(..., min_length=2)
    study_schedule: List[str] = Field(..., min_length=1)


class InstructorOnboarding(OnboardingBase):
    role: Literal["instructor"]
    institution_id: Union[int, Literal["no-institution"]]
    specialization: List[str] = Field(..., min_length=1)
    years_of_experience: int = Field(..., ge=0, le=50)
    teaching_subjects: List[str] = Field(..., min_length=1)
    qualifications: List[str] = Field(..., min_length=1)
    teaching_methods: List[str] = Field(..., min_length=1)
    bio: str = Field(..., min_length=10)


class InstitutionOnboarding(OnboardingBase):
    role: Literal["institution"]
    institution_name: str = Field(..., min_length=2)
    institution_type: str = Field(..., min_length=1)
    number_of_students: int = Field(..., ge=1)
    departments: List[str] = Field(..., min_length=1)
    institution_address: str = Field(..., min_length=5)
    institution_phone: str = Field(..., min_length=10)
    bio: str = Field(..., min_length=20)


# Response schemas
class UserResponse(BaseSchema):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: Optional[UserRole] = None
    institution_id: Optional[int] = None
    programme_id: Optional[int] = None
    bio: Optional[str] = None
    email_verified: bool = False
    onboarding_completed: bool = False
    current_level: Optional[int] = None
    created_at: datetime


class StudentProfileResponse(BaseSchema):
    """Student view for institution dashboards (no account internals)."""
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: Optional[str] = None
    current_level: Optional[int] = None
    year_of_admission: Optional[int] = None
    expected_graduation_year: Optional[int] = None
    mode_of_study: Optional[str] = None
    programme_id: Optional[int] = None
    study_goals: Optional[List[str]] = None
    learning_style: Optional[List[str]] = None
    study_schedule: Optional[List[str]] = None
    onboarding_completed: bool = False
    created_at: datetime


class InstructorProfileResponse(BaseSchema):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: Optional[str] = None
    specialization: Optional[List[str]] = None
    years_of_experience: Optional[int] = None
    teaching_subjects: Optional[List[str]] = None
    qualifications: Optional[List[str]] = None
    teaching_methods: Optional[List[str]] = None
    bio: Optional[str] = None
    onboarding_completed: bool = False
    created_at: datetime


class UploaderSummary(BaseSchema):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRole] = None


class ProfileUpdateResponse(BaseSchema):
    message: str
    user: UserResponse
