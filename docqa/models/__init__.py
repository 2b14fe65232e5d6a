"""Models package - re-exports for convenience."""

from docqa.models.docs import Chunk, ChunkMatch, Document
from docqa.models.exchange import (
    AnalysisReport,
    AnalysisResult,
    Exchange,
    OutcomeKind,
    SynthesisOutcome,
    confidence_level,
)

__all__ = [
    "AnalysisReport",
    "AnalysisResult",
    "Chunk",
    "ChunkMatch",
    "Document",
    "Exchange",
    "OutcomeKind",
    "SynthesisOutcome",
    "confidence_level",
]
