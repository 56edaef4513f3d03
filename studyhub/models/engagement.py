"""
Learner engagement with materials: bookmarks, reviews, ratings and reports.
"""

import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from studyhub.core.database import Base


class ReportReason(str, enum.Enum):
    inappropriate = "inappropriate"
    spam = "spam"
    copyright = "copyright"
    inaccurate = "inaccurate"
    other = "other"


class ReportStatus(str, enum.Enum):
    pending = "pending"
    reviewed = "reviewed"
    resolved = "resolved"
    dismissed = "dismissed"


class Bookmark(Base):
    __tablename__ = "bookmarks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    material_id = Column(Integer, ForeignKey("materials.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="bookmarks")
    material = relationship("Material", back_populates="bookmarks")

    __table_args__ = (
        UniqueConstraint('user_id', 'material_id', name='unique_bookmark'),
    )


class MaterialReview(Base):
    __tablename__ = "material_reviews"

    id = Column(Integer, primary_key=True, index=True)
    material_id = Column(Integer, ForeignKey("materials.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    review_text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    material = relationship("Material", back_populates="reviews")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint('user_id', 'material_id', name='unique_review'),
    )


class MaterialRating(Base):
    __tablename__ = "material_ratings"

    id = Column(Integer, primary_key=True, index=True)
    material_id = Column(Integer, ForeignKey("materials.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    rating = Column(Integer, nullable=False)  # 1-5 stars
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    material = relationship("Material", back_populates="ratings")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint('user_id', 'material_id', name='unique_rating'),
    )


class MaterialReport(Base):
    """A user's complaint about a material, triaged by admins."""
    __tablename__ = "material_reports"

    id = Column(Integer, primary_key=True, index=True)
    material_id = Column(Integer, ForeignKey("materials.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    reason = Column(SAEnum(ReportReason, name="report_reason"), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(SAEnum(ReportStatus, name="report_status"), nullable=False, default=ReportStatus.pending, index=True)
    reviewed_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    admin_notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    material = relationship("Material", back_populates="reports")
    user = relationship("User", foreign_keys=[user_id])
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])
