from pydantic import Field
from typing import Optional, List, Any, Dict, Literal
from datetime import datetime
from studyhub.schemas.base import BaseSchema, RequestSchema


# Request schemas
class InstitutionCreate(RequestSchema):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None


class InstitutionBulkCreate(RequestSchema):
    institutions: List[InstitutionCreate] = Field(..., min_length=1)


class ProgrammeCreate(RequestSchema):
    institution_id: int
    name: str = Field(..., min_length=1, max_length=255)
    code: Optional[str] = None
    degree: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None


class InstitutionProgrammeCreate(RequestSchema):
    """Programme created by an institution account; institution comes from the caller."""
    name: str = Field(..., min_length=1, max_length=255)
    code: Optional[str] = None
    degree: Optional[str] = None
    duration: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None


class ProgrammeBulkCreate(RequestSchema):
    institution_id: int
    # Raw rows; CSV uploads keep their spreadsheet headers until normalised
    programmes: List[Dict[str, Any]]
    format: Literal["json", "csv"] = "json"


# Response schemas
class InstitutionResponse(BaseSchema):
    id: int
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None
    created_at: datetime


class ProgrammeResponse(BaseSchema):
    id: int
    institution_id: int
    name: str
    code: Optional[str] = None
    degree: Optional[str] = None
    duration: Optional[int] = None
    description: Optional[str] = None
    created_at: datetime


class BulkImportResponse(BaseSchema):
    success: bool = True
    added: int
    skipped: int
    message: str


class ProgrammeBulkResponse(BaseSchema):
    success: bool = True
    count: int
    programmes: List[ProgrammeResponse]
