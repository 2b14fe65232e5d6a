"""Structured logging for synthesis attempts."""

import logging
from typing import Any
from uuid import UUID

from docqa.models.exchange import OutcomeKind

logger = logging.getLogger(__name__)


class StructuredSynthesisLogger:
    """Structured logger for reasoning service calls."""

    def log_attempt(
        self,
        document_id: UUID | None,
        outcome: OutcomeKind,
        latency_ms: float,
        context_chars: int,
        response_chars: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log one synthesis attempt with structured data."""
        log_data: dict[str, Any] = {
            "document_id": str(document_id) if document_id else None,
            "outcome": outcome.value,
            "latency_ms": round(latency_ms, 2),
            "context_chars": context_chars,
        }

        if response_chars is not None:
            log_data["response_chars"] = response_chars

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Synthesis attempt: {outcome.value}"

        if outcome is OutcomeKind.structured:
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
