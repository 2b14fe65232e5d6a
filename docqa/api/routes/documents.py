"""Document endpoints - POST /documents, POST /documents/{id}/analyze, GET /documents/{id}/exchanges."""

import logging
import uuid
from datetime import datetime
from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from docqa.analysis.service import AnalysisService
from docqa.api.auth import get_current_context
from docqa.api.deps import get_analysis_service
from docqa.db.context import RequestContext
from docqa.errors import DocumentNotFound, EmptyContent, SynthesisError
from docqa.models.exchange import Exchange, confidence_level

router = APIRouter(prefix="/documents", tags=["documents"])
logger = logging.getLogger(__name__)


class IngestRequest(BaseModel):
    """Request body for POST /documents."""

    file_name: str = Field(..., min_length=1, max_length=255, description="Original file name")
    text: str | None = Field(None, description="Text already extracted from the file")
    file_type: str | None = Field(None, max_length=100, description="MIME type")
    metadata: dict[str, Any] = Field(default_factory=dict)


class IngestResponse(BaseModel):
    """Response for POST /documents."""

    document_id: str
    title: str
    file_name: str
    chunk_count: int
    created_at: datetime


class AnalyzeRequest(BaseModel):
    """Request body for POST /documents/{id}/analyze."""

    question: str = Field(..., min_length=1, max_length=2000)


class AnalyzeResponse(BaseModel):
    """Response for POST /documents/{id}/analyze."""

    answer: str
    evidence: list[str]
    confidence_score: int
    confidence_level: Literal["high", "medium", "low"] | None
    reasoning: str
    source: Literal["structured", "fallback"]
    exchange_id: str | None
    warnings: list[str]


class ExchangeListResponse(BaseModel):
    """Response for GET /documents/{id}/exchanges."""

    exchanges: list[Exchange]


@router.post("", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
async def ingest(
    request: IngestRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
) -> IngestResponse:
    """Ingest extracted document text with automatic chunking.

    Raises:
        HTTPException: 422 if no usable text was supplied
    """
    try:
        document = await service.ingest(
            ctx,
            file_name=request.file_name,
            extracted_text=request.text,
            metadata=request.metadata,
            file_type=request.file_type,
        )
    except EmptyContent as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return IngestResponse(
        document_id=str(document.document_id),
        title=document.title,
        file_name=document.file_name,
        chunk_count=len(document.chunks),
        created_at=document.created_at,
    )


@router.post("/{document_id}/analyze", response_model=AnalyzeResponse)
async def analyze(
    document_id: uuid.UUID,
    request: AnalyzeRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
) -> AnalyzeResponse:
    """Answer a question about a document.

    Raises:
        HTTPException: 404 if the document is unknown, 503 if the reasoning service failed
    """
    try:
        report = await service.analyze(ctx, document_id, request.question)
    except DocumentNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except SynthesisError as e:
        logger.error(f"[POST /documents/{document_id}/analyze] synthesis failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analysis failed, please retry",
            headers={"Retry-After": "5"},
        ) from e

    result = report.result
    return AnalyzeResponse(
        answer=result.answer,
        evidence=result.evidence,
        confidence_score=result.confidence_score,
        confidence_level=confidence_level(result.confidence_score),
        reasoning=result.reasoning,
        source=report.source,
        exchange_id=str(report.exchange_id) if report.exchange_id else None,
        warnings=report.warnings,
    )


@router.get("/{document_id}/exchanges", response_model=ExchangeListResponse)
async def list_exchanges(
    document_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> ExchangeListResponse:
    """List recorded exchanges for a document, newest first."""
    try:
        exchanges = await service.history(ctx, document_id, limit=limit)
    except DocumentNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    return ExchangeListResponse(exchanges=exchanges)
