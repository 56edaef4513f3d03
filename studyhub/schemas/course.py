from pydantic import Field
from typing import Optional, List
from datetime import datetime
from studyhub.schemas.base import BaseSchema, RequestSchema


# Request schemas (no from_attributes needed)
class CourseCreate(RequestSchema):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    code: Optional[str] = None
    institution_id: Optional[int] = None
    instructor_id: Optional[int] = None


class CourseBulkCreate(RequestSchema):
    courses: List[CourseCreate] = Field(..., min_length=1)


# Response schemas (need from_attributes for ORM)
class CourseResponse(BaseSchema):
    id: int
    title: str
    description: Optional[str] = None
    code: Optional[str] = None
    institution_id: Optional[int] = None
    instructor_id: Optional[int] = None
    created_at: datetime


class CourseSummary(BaseSchema):
    title: str
