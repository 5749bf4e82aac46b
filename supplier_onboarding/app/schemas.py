from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field

AnswerValue = Union[str, int, float, list[str]]


class AnswerType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    CHOICE = "choice"
    ARRAY = "array"
    YEAR = "year"


class AnswerStatus(str, Enum):
    RECEIVED = "received"
    PROCESSED = "processed"
    ERROR = "error"


class OnboardingStatus(str, Enum):
    STARTED = "started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PAUSED = "paused"


NOT_STARTED = "not_started"


class ResponseSource(str, Enum):
    RESEARCH = "research"
    VERTEX_AI = "vertex_ai"


class InteractionType(str, Enum):
    CALL = "CALL"
    EMAIL = "EMAIL"
    CLOSE = "CLOSE"
    MEETING = "MEETING"
    NOTE = "NOTE"


class Question(BaseModel):
    id: str
    number: int
    title: str
    description: str
    answer_type: AnswerType = Field(..., alias="answerType")
    choices: Optional[list[str]] = None
    has_ai_response: bool = Field(False, alias="hasAIResponse")

    class Config:
        populate_by_name = True
        frozen = True


class QuestionSummary(BaseModel):
    id: str
    number: int
    title: str


class ContradictionFlag(BaseModel):
    type: Literal["contradiction", "suspicious", "incomplete"]
    severity: Literal["LOW", "MEDIUM", "HIGH"]
    message: str
    previous_answer: Optional[AnswerValue] = Field(default=None, alias="previousAnswer")
    current_answer: Optional[AnswerValue] = Field(default=None, alias="currentAnswer")

    class Config:
        populate_by_name = True


class ConfidenceScore(BaseModel):
    score: float
    reason: str
    data_source: str = Field(..., alias="dataSource")
    confidence: Optional[Literal["HIGH", "MEDIUM", "LOW"]] = None
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")

    class Config:
        populate_by_name = True


class OnboardingAnswer(BaseModel):
    """One supplier's stored answer to one catalog question.

    ``flags``, ``confidence_score`` and ``external_data_sources`` are carried
    for stored documents that have them; nothing in this service fills them.
    """

    question_id: str = Field(..., alias="questionId")
    answer: Optional[AnswerValue] = None
    answer_type: AnswerType = Field(..., alias="answerType")
    submitted_at: datetime = Field(..., alias="submittedAt")
    ai_response: Optional[str] = Field(default=None, alias="aiResponse")
    response_generated_at: Optional[datetime] = Field(default=None, alias="responseGeneratedAt")
    status: AnswerStatus = AnswerStatus.RECEIVED
    flags: list[ContradictionFlag] = Field(default_factory=list)
    confidence_score: Optional[ConfidenceScore] = Field(default=None, alias="confidenceScore")
    external_data_sources: Optional[list[str]] = Field(default=None, alias="externalDataSources")

    class Config:
        populate_by_name = True
        extra = "allow"


class Subscription(BaseModel):
    tier: str
    monthly_price: float = Field(..., alias="monthlyPrice")
    status: Literal["active", "paused", "canceled"]
    start_date: str = Field(..., alias="startDate")

    class Config:
        populate_by_name = True


class SupplierMetadata(BaseModel):
    signup_source: Optional[str] = Field(default=None, alias="signupSource")
    last_active_at: Optional[datetime] = Field(default=None, alias="lastActiveAt")

    class Config:
        populate_by_name = True


class SupplierRecord(BaseModel):
    supplier_id: Optional[str] = Field(default=None, alias="supplierId")
    email: Optional[str] = None
    domain: Optional[str] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")
    email_verified: bool = Field(False, alias="emailVerified")
    domain_verified: bool = Field(False, alias="domainVerified")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    onboarding_status: Optional[OnboardingStatus] = Field(default=None, alias="onboardingStatus")
    subscription: Optional[Subscription] = None
    metadata: Optional[SupplierMetadata] = None

    class Config:
        populate_by_name = True
        extra = "allow"


class SupplierUpdateRequest(BaseModel):
    email: Optional[str] = None
    domain: Optional[str] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")
    email_verified: Optional[bool] = Field(default=None, alias="emailVerified")
    domain_verified: Optional[bool] = Field(default=None, alias="domainVerified")
    onboarding_status: Optional[OnboardingStatus] = Field(default=None, alias="onboardingStatus")
    subscription: Optional[Subscription] = None
    metadata: Optional[SupplierMetadata] = None

    class Config:
        populate_by_name = True


class Progress(BaseModel):
    answeredQuestions: int
    totalQuestions: int
    percentComplete: int
    status: str


class AIResponsePayload(BaseModel):
    response: str
    generatedAt: datetime
    source: ResponseSource


class SubmitAnswerRequest(BaseModel):
    # Presence is checked by the service so that a missing field maps to 400.
    supplierId: Optional[str] = None
    questionId: Optional[str] = None
    answer: Optional[Any] = None
    answerType: Optional[str] = None


class SubmitAnswerResponse(BaseModel):
    success: bool = True
    questionId: str
    aiResponse: Optional[AIResponsePayload] = None
    progress: Progress
    nextQuestion: Optional[QuestionSummary] = None
    onboardingComplete: bool


class QuestionsResponse(BaseModel):
    success: bool = True
    totalQuestions: int
    questions: list[Question]


class SupplierSummary(BaseModel):
    email: Optional[str] = None
    displayName: Optional[str] = None


class ProgressResponse(BaseModel):
    success: bool = True
    supplierId: str
    progress: Progress
    supplier: Optional[SupplierSummary] = None


class AllAnswersResponse(BaseModel):
    success: bool = True
    supplierId: str
    answers: dict[str, dict[str, Any]]
    progress: Progress
    totalAnswered: int


class InteractionRequest(BaseModel):
    actionType: InteractionType
    leadId: Optional[str] = None
    companyName: Optional[str] = None
    contactPerson: Optional[str] = None
    callDuration: Optional[float] = None
    callOutcome: Optional[str] = None
    emailSubject: Optional[str] = None
    dealValue: Optional[float] = None
    notes: Optional[str] = None


class Recommendation(BaseModel):
    whyMatter: str
    howToApproach: str
    potentialRisks: str
    successProbability: float
    callScript: Optional[str] = None
    emailTemplate: Optional[str] = None
