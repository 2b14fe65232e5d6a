"""FastAPI dependencies wiring the analysis service."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from docqa.analysis.service import AnalysisService
from docqa.config import PipelineConfig, Settings, get_settings
from docqa.db.engine import get_session
from docqa.db.sql_repositories import SqlDocumentRepository, SqlExchangeRepository
from docqa.llm.client import ReasoningClient, get_reasoning_client


@lru_cache
def get_client() -> ReasoningClient:
    """Process-wide reasoning client built once from settings."""
    return get_reasoning_client(get_settings())


def get_analysis_service(
    settings: Annotated[Settings, Depends(get_settings)],
    session: Annotated[AsyncSession, Depends(get_session)],
    client: Annotated[ReasoningClient, Depends(get_client)],
) -> AnalysisService:
    """Per-request service over the request's database session."""
    return AnalysisService(
        documents=SqlDocumentRepository(session),
        exchanges=SqlExchangeRepository(session),
        client=client,
        config=PipelineConfig.from_settings(settings),
    )
