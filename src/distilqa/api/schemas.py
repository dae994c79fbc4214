"""
Pydantic schemas for the distilqa API.

Defines request and response models for the REST API.
"""

from pydantic import BaseModel, Field


class QaItem(BaseModel):
    question: str
    context: str


class AnswerRequest(BaseModel):
    inputs: list[QaItem] = Field(min_length=1)
    top_k: int = 1
    max_answer_length: int = 32


class AnswerItem(BaseModel):
    answer: str
    score: float
    start: int
    end: int


class AnswerResponse(BaseModel):
    answers: list[list[AnswerItem]]
