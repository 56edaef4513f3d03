from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from studyhub.core.database import Base


class Institution(Base):
    __tablename__ = "institutions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    logo_url = Column(String(500), nullable=True)
    website = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    users = relationship("User", back_populates="institution", foreign_keys="User.institution_id")
    programmes = relationship("Programme", back_populates="institution", cascade="all, delete-orphan")
    courses = relationship("Course", back_populates="institution")


class Programme(Base):
    """A degree programme offered by an institution."""
    __tablename__ = "programmes"

    id = Column(Integer, primary_key=True, index=True)
    institution_id = Column(Integer, ForeignKey("institutions.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=True)
    degree = Column(String(100), nullable=True)  # Bachelor, Master, Doctorate, Diploma, etc.
    duration = Column(Integer, nullable=True)  # In years
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    institution = relationship("Institution", back_populates="programmes")
    users = relationship("User", back_populates="programme", foreign_keys="User.programme_id")
