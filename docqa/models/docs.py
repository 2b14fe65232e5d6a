"""Document domain models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class Chunk(BaseModel):
    """Contiguous slice of a document's text with its 0-based position."""

    index: int = Field(..., ge=0)
    text: str


class Document(BaseModel):
    """Ingested document with its chunks stored inline."""

    document_id: UUID
    user_id: UUID
    title: str
    file_name: str
    file_type: str = "text/plain"
    content: str
    chunks: list[Chunk] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    @model_validator(mode="after")
    def chunks_cover_content(self) -> "Document":
        """Chunks must be ordered 0..n-1 and reconstruct content exactly."""
        indices = [chunk.index for chunk in self.chunks]
        if indices != list(range(len(self.chunks))):
            raise ValueError("chunk indices must be 0..n-1 in order")
        if "".join(chunk.text for chunk in self.chunks) != self.content:
            raise ValueError("chunks do not reconstruct document content")
        return self


class ChunkMatch(BaseModel):
    """Chunk with relevance score."""

    chunk: Chunk
    score: float
