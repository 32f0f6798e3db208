"""Request and response models for the Q&A check-in API."""

from typing import List, Optional

from pydantic import BaseModel, field_validator


class QuestionAnswer(BaseModel):
    uuid: Optional[str] = None
    question: str
    answer: str


class StoreAnswersRequest(BaseModel):
    tel_number: str
    qa_list: List[QuestionAnswer]

    @field_validator('tel_number')
    @classmethod
    def tel_number_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('tel_number cannot be empty')
        return v.strip()

    @field_validator('qa_list')
    @classmethod
    def qa_list_must_not_be_empty(cls, v):
        if not v:
            raise ValueError('qa_list cannot be empty')
        return v


class StatusResponse(BaseModel):
    status: str


class CheckoutResponse(BaseModel):
    status: str
    checkout: str


class QuestionAnswerResponse(BaseModel):
    uuid: str
    question: str
    answer: str


class AnswerResponse(BaseModel):
    tel_number: str
    questions: List[QuestionAnswerResponse]
    check_in: str
    checkout: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    db_health: bool
    record_count: int
