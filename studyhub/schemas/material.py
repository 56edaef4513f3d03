from pydantic import Field
from typing import Optional, List, Literal
from datetime import datetime
from enum import Enum
from studyhub.schemas.base import BaseSchema, RequestSchema
from studyhub.schemas.course import CourseSummary
from studyhub.schemas.user import UploaderSummary


class MaterialType(str, Enum):
    lecture_notes = "lecture_notes"
    textbook = "textbook"
    study_guide = "study_guide"
    past_questions = "past_questions"


class ModerationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class SortBy(str, Enum):
    newest = "newest"
    oldest = "oldest"
    highest_rated = "highest_rated"
    most_reviewed = "most_reviewed"
    alphabetical = "alphabetical"


# Request schemas
class MaterialCreate(RequestSchema):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    file_url: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = Field(None, ge=0)
    original_filename: Optional[str] = None
    material_type: MaterialType
    course_id: Optional[int] = None
    level: Optional[int] = None
    semester: Optional[Literal[1, 2]] = None
    topic: Optional[str] = Field(None, max_length=255)
    tags: Optional[List[str]] = None


class MaterialUpdate(RequestSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    file_url: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = Field(None, ge=0)
    original_filename: Optional[str] = None
    material_type: Optional[MaterialType] = None
    course_id: Optional[int] = None
    level: Optional[int] = None
    semester: Optional[Literal[1, 2]] = None
    topic: Optional[str] = Field(None, max_length=255)
    tags: Optional[List[str]] = None


class ModerationRequest(RequestSchema):
    # Plain string so that unknown values produce the moderation error message, not a schema error
    status: Optional[str] = None
    reason: Optional[str] = None


# Response schemas
class MaterialStats(BaseSchema):
    average_rating: float = 0.0
    rating_count: int = 0
    review_count: int = 0


class MaterialResponse(BaseSchema):
    id: int
    title: str
    description: Optional[str] = None
    file_url: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    original_filename: Optional[str] = None
    material_type: MaterialType
    course_id: Optional[int] = None
    uploaded_by_id: Optional[int] = None
    institution_id: Optional[int] = None
    programme_id: Optional[int] = None
    level: Optional[int] = None
    semester: Optional[int] = None
    topic: Optional[str] = None
    tags: Optional[List[str]] = None
    moderation_status: ModerationStatus
    moderated_by_id: Optional[int] = None
    moderated_at: Optional[datetime] = None
    moderation_notes: Optional[str] = None
    view_count: int = 0
    download_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None


class MaterialWithStats(MaterialResponse):
    stats: MaterialStats


class MaterialDetailResponse(MaterialResponse):
    uploaded_by: Optional[UploaderSummary] = None
    course: Optional[CourseSummary] = None


class Pagination(BaseSchema):
    page: int
    limit: int
    total: int
    total_pages: int


class MaterialListResponse(BaseSchema):
    materials: List[MaterialWithStats]
    pagination: Pagination
    topics: List[str]


class MaterialModerationResponse(BaseSchema):
    message: str
    material: MaterialResponse
