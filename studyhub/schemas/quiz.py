from pydantic import Field
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum
from studyhub.schemas.base import BaseSchema, RequestSchema
from studyhub.schemas.material import ModerationStatus


class QuestionType(str, Enum):
    mcq = "mcq"
    true_false = "true_false"


# Request schemas
class QuizQuestionCreate(RequestSchema):
    question: str = Field(..., min_length=1)
    question_type: QuestionType
    options: List[str]
    correct_answer: str = Field(..., min_length=1)
    explanation: Optional[str] = None


class QuizCreate(RequestSchema):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    course_id: Optional[int] = None
    time_limit: Optional[int] = Field(None, ge=1)
    passing_score: Optional[int] = Field(None, ge=0, le=100)
    questions: List[QuizQuestionCreate] = Field(default_factory=list)


class QuizSubmission(RequestSchema):
    # Question id (as sent by the browser, a string key) -> chosen answer
    answers: Dict[str, str] = Field(default_factory=dict)


# Response schemas
class QuizResponse(BaseSchema):
    id: int
    title: str
    description: Optional[str] = None
    course_id: Optional[int] = None
    created_by_id: Optional[int] = None
    time_limit: Optional[int] = None
    passing_score: int
    moderation_status: ModerationStatus
    moderated_by_id: Optional[int] = None
    moderated_at: Optional[datetime] = None
    moderation_notes: Optional[str] = None
    created_at: datetime


class QuizWithCount(QuizResponse):
    questions_count: int


class QuizQuestionResponse(BaseSchema):
    id: int
    quiz_id: int
    question: str
    question_type: QuestionType
    options: List[str]
    correct_answer: str
    explanation: Optional[str] = None
    order: int


class QuizAttemptResponse(BaseSchema):
    id: int
    quiz_id: Optional[int] = None
    student_id: int
    answers: Dict[str, str]
    score: int
    total_questions: int
    passed: bool
    completed_at: datetime


class QuizSubmitResponse(QuizAttemptResponse):
    score_percentage: float


class QuizModerationResponse(BaseSchema):
    message: str
    quiz: QuizResponse
