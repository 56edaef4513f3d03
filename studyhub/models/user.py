from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean, JSON
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from studyhub.core.database import Base


class UserRole(str, enum.Enum):
    student = "student"
    instructor = "instructor"
    institution = "institution"
    admin = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    gender = Column(String(20), nullable=True)  # male, female, other, prefer_not_to_say
    profile_image_url = Column(String(500), nullable=True)
    # Null until onboarding picks a role
    role = Column(SAEnum(UserRole, name="user_role"), nullable=True, index=True)
    institution_id = Column(Integer, ForeignKey("institutions.id", ondelete="SET NULL"), nullable=True, index=True)
    programme_id = Column(Integer, ForeignKey("programmes.id", ondelete="SET NULL"), nullable=True)
    bio = Column(Text, nullable=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    onboarding_completed = Column(Boolean, nullable=False, default=False)

    # Student profile
    current_level = Column(Integer, nullable=True)
    year_of_admission = Column(Integer, nullable=True)
    expected_graduation_year = Column(Integer, nullable=True)
    mode_of_study = Column(String(50), nullable=True)
    study_goals = Column(JSON, nullable=True)
    learning_style = Column(JSON, nullable=True)
    study_schedule = Column(JSON, nullable=True)

    # Instructor profile
    specialization = Column(JSON, nullable=True)
    years_of_experience = Column(Integer, nullable=True)
    teaching_subjects = Column(JSON, nullable=True)
    qualifications = Column(JSON, nullable=True)
    teaching_methods = Column(JSON, nullable=True)

    # Institution profile
    institution_type = Column(String(100), nullable=True)
    number_of_students = Column(Integer, nullable=True)
    departments = Column(JSON, nullable=True)
    institution_address = Column(Text, nullable=True)
    institution_phone = Column(String(50), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    institution = relationship("Institution", back_populates="users", foreign_keys=[institution_id])
    programme = relationship("Programme", back_populates="users", foreign_keys=[programme_id])
    bookmarks = relationship("Bookmark", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin
