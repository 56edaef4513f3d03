"""Learning material model. Files live in external storage, metadata is stored here."""

import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, BigInteger
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from studyhub.core.database import Base


class MaterialType(str, enum.Enum):
    lecture_notes = "lecture_notes"
    textbook = "textbook"
    study_guide = "study_guide"
    past_questions = "past_questions"


class ModerationStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Material(Base):
    """
    An uploaded learning resource.
    Only approved materials are visible to non-admin users.
    """
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # File metadata
    file_url = Column(String(1000), nullable=True)
    file_type = Column(String(50), nullable=True)  # pdf, doc, video, etc.
    file_size = Column(BigInteger, nullable=True)  # Size in bytes
    original_filename = Column(String(255), nullable=True)

    # Catalogue placement
    material_type = Column(SAEnum(MaterialType, name="material_type"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="SET NULL"), nullable=True, index=True)
    institution_id = Column(Integer, ForeignKey("institutions.id", ondelete="SET NULL"), nullable=True)
    programme_id = Column(Integer, ForeignKey("programmes.id", ondelete="SET NULL"), nullable=True)
    level = Column(Integer, nullable=True, index=True)  # 100, 200, 300, ...
    semester = Column(Integer, nullable=True)  # 1 or 2
    topic = Column(String(255), nullable=True)
    tags = Column(JSON, nullable=True)

    # Moderation
    moderation_status = Column(
        SAEnum(ModerationStatus, name="moderation_status"),
        nullable=False,
        default=ModerationStatus.pending,
        index=True,
    )
    moderated_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    moderated_at = Column(DateTime(timezone=True), nullable=True)
    moderation_notes = Column(Text, nullable=True)

    # Usage counters
    view_count = Column(Integer, nullable=False, default=0)
    download_count = Column(Integer, nullable=False, default=0)

    # Upload tracking
    uploaded_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    course = relationship("Course", back_populates="materials")
    uploader = relationship("User", foreign_keys=[uploaded_by_id])
    moderator = relationship("User", foreign_keys=[moderated_by_id])
    bookmarks = relationship("Bookmark", back_populates="material", cascade="all, delete-orphan")
    reviews = relationship("MaterialReview", back_populates="material", cascade="all, delete-orphan")
    ratings = relationship("MaterialRating", back_populates="material", cascade="all, delete-orphan")
    reports = relationship("MaterialReport", back_populates="material", cascade="all, delete-orphan")
