"""Analysis result and exchange models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AnalysisResult(BaseModel):
    """Evidence-backed answer returned to the caller."""

    answer: str = Field(..., description="Answer to the question")
    evidence: list[str] = Field(
        default_factory=list, description="Verbatim quotes supporting the answer"
    )
    confidence_score: int = Field(..., ge=0, le=100, description="Confidence 0-100")
    reasoning: str = Field(..., description="Explanation of how the answer was reached")


class OutcomeKind(str, Enum):
    """How a synthesis attempt ended."""

    structured = "structured"
    fallback = "fallback"
    failed = "failed"


@dataclass(frozen=True)
class SynthesisOutcome:
    """Tagged result of one synthesis attempt.

    ``result`` is set for structured and fallback outcomes, ``error`` for failed ones.
    """

    kind: OutcomeKind
    result: AnalysisResult | None = None
    error: str | None = None
    raw_response: str | None = None

    @classmethod
    def structured(cls, result: AnalysisResult, raw_response: str) -> "SynthesisOutcome":
        return cls(kind=OutcomeKind.structured, result=result, raw_response=raw_response)

    @classmethod
    def fallback(cls, result: AnalysisResult, raw_response: str) -> "SynthesisOutcome":
        return cls(kind=OutcomeKind.fallback, result=result, raw_response=raw_response)

    @classmethod
    def failed(cls, error: str) -> "SynthesisOutcome":
        return cls(kind=OutcomeKind.failed, error=error)

    @property
    def succeeded(self) -> bool:
        return self.kind is not OutcomeKind.failed


class Exchange(BaseModel):
    """Persisted question/answer interaction against one document.

    ``answer`` is None for a recorded failure.
    """

    model_config = ConfigDict(frozen=True)

    exchange_id: UUID
    user_id: UUID
    document_id: UUID
    question: str
    answer: str | None = None
    evidence: list[str] = Field(default_factory=list)
    confidence_score: int | None = Field(None, ge=0, le=100)
    reasoning: str | None = None
    created_at: datetime


class AnalysisReport(BaseModel):
    """What ``analyze`` hands back: the answer plus bookkeeping."""

    result: AnalysisResult
    source: Literal["structured", "fallback"]
    exchange_id: UUID | None = None
    warnings: list[str] = Field(default_factory=list)


def confidence_level(score: int | None) -> Literal["high", "medium", "low"] | None:
    """Bucket a confidence score: high >= 80, medium >= 60, else low."""
    if score is None:
        return None
    if score >= 80:
        return "high"
    if score >= 60:
        return "medium"
    return "low"
