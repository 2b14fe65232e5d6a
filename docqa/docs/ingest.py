"""Document ingestion - clean, chunk and persist extracted text."""

import logging
import mimetypes
import re
import unicodedata
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from docqa.config import PipelineConfig
from docqa.db.context import RequestContext
from docqa.db.repositories import DocumentRepository
from docqa.docs.chunker import chunk_text
from docqa.errors import EmptyContent
from docqa.models.docs import Document

logger = logging.getLogger(__name__)

_KEPT_CONTROL_CHARS = frozenset("\n\r\t")
_EXTENSION_RE = re.compile(r"\.[^/.]+$")


def strip_control_chars(text: str) -> str:
    """Remove control characters, keeping line breaks and tabs."""
    return "".join(
        char
        for char in text
        if char in _KEPT_CONTROL_CHARS or unicodedata.category(char) != "Cc"
    )


def title_from_file_name(file_name: str) -> str:
    """Drop the final extension: 'policy.v2.pdf' -> 'policy.v2'."""
    return _EXTENSION_RE.sub("", file_name) or file_name


def guess_file_type(file_name: str) -> str:
    """Guess a MIME type from the file name, defaulting to text/plain."""
    guessed, _ = mimetypes.guess_type(file_name)
    return guessed or "text/plain"


async def ingest_document(
    *,
    ctx: RequestContext,
    file_name: str,
    text: str | None,
    metadata: dict[str, Any] | None,
    repository: DocumentRepository,
    config: PipelineConfig,
    file_type: str | None = None,
) -> Document:
    """Ingest a document: clean, chunk and persist it.

    Args:
        ctx: Request context of the owning user
        file_name: Original file name (title is derived from it)
        text: Text already extracted from the file
        metadata: Caller metadata; size and processed_at are filled in if absent
        repository: Document storage
        config: Pipeline configuration (chunk size, minimum content length)
        file_type: MIME type; guessed from file_name when omitted

    Returns:
        The persisted Document

    Raises:
        EmptyContent: If no meaningful text remains after control-char stripping
    """
    cleaned = strip_control_chars(text or "")

    if len(cleaned.strip()) < config.min_content_chars:
        logger.warning(
            f"[ingest] rejected file_name={file_name!r}: "
            f"{len(cleaned.strip())} usable chars < {config.min_content_chars}"
        )
        raise EmptyContent(file_name, config.min_content_chars)

    chunks = chunk_text(cleaned, chunk_size=config.chunk_size)
    created_at = datetime.now(UTC)

    doc_metadata: dict[str, Any] = dict(metadata or {})
    doc_metadata.setdefault("size", len(cleaned.encode("utf-8")))
    doc_metadata["processed_at"] = created_at.isoformat()
    doc_metadata["chunk_count"] = len(chunks)

    document = Document(
        document_id=uuid4(),
        user_id=ctx.user_id,
        title=title_from_file_name(file_name),
        file_name=file_name,
        file_type=file_type or guess_file_type(file_name),
        content=cleaned,
        chunks=chunks,
        metadata=doc_metadata,
        created_at=created_at,
    )

    await repository.insert_document(document, ctx)

    logger.info(
        f"[ingest] document_id={document.document_id} file_name={file_name!r} "
        f"chunks={len(chunks)}"
    )

    return document
