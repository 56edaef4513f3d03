from pydantic import Field
from typing import Optional, List
from datetime import datetime
from enum import Enum
from studyhub.schemas.base import BaseSchema, RequestSchema


class ReportReason(str, Enum):
    inappropriate = "inappropriate"
    spam = "spam"
    copyright = "copyright"
    inaccurate = "inaccurate"
    other = "other"


class ReportStatus(str, Enum):
    pending = "pending"
    reviewed = "reviewed"
    resolved = "resolved"
    dismissed = "dismissed"


# Request schemas
class BookmarkCreate(RequestSchema):
    material_id: int


class ReviewCreate(RequestSchema):
    review_text: str = Field(..., min_length=1)


class RatingCreate(RequestSchema):
    rating: int = Field(..., ge=1, le=5)


class ReportCreate(RequestSchema):
    reason: ReportReason
    description: Optional[str] = None


class ReportStatusUpdate(RequestSchema):
    status: ReportStatus
    admin_notes: Optional[str] = None


# Response schemas
class BookmarkResponse(BaseSchema):
    id: int
    user_id: int
    material_id: int
    created_at: datetime


class BookmarkCheckResponse(BaseSchema):
    bookmarked: bool
    bookmark: Optional[BookmarkResponse] = None


class ReviewResponse(BaseSchema):
    id: int
    material_id: int
    user_id: int
    review_text: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class RatingResponse(BaseSchema):
    id: int
    material_id: int
    user_id: int
    rating: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class RatingSummaryResponse(BaseSchema):
    ratings: List[RatingResponse]
    average: float
    user_rating: Optional[RatingResponse] = None
    count: int


class ReportResponse(BaseSchema):
    id: int
    material_id: int
    user_id: int
    reason: ReportReason
    description: Optional[str] = None
    status: ReportStatus
    reviewed_by_id: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    admin_notes: Optional[str] = None
    created_at: datetime


class ReportSubmittedResponse(BaseSchema):
    message: str
    report: ReportResponse


class MessageResponse(BaseSchema):
    message: str
