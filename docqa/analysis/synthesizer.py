"""Answer synthesizer - call the reasoning service and validate its output.

Every attempt ends in exactly one tagged outcome:

- structured: the body is a JSON object with a usable ``answer`` (light repair
  is applied to the other fields)
- fallback: the body is non-empty free text; a schema-conforming result is
  built locally from the raw text and the top-ranked chunks
- failed: the service is unreachable, errors, times out or returns nothing
"""

import asyncio
import json
import logging
import math
import time
from typing import Any
from uuid import UUID

from docqa.config import PipelineConfig
from docqa.errors import SynthesisError
from docqa.llm.client import ReasoningClient
from docqa.llm.prompts import SYSTEM_INSTRUCTION
from docqa.models.docs import ChunkMatch
from docqa.models.exchange import AnalysisResult, SynthesisOutcome
from docqa.utils.logging import StructuredSynthesisLogger
from docqa.utils.metrics import PrometheusSynthesisMetrics

logger = logging.getLogger(__name__)

FALLBACK_REASONING = (
    "Analysis based on document context; the reasoning service did not return "
    "structured reasoning."
)
FALLBACK_EVIDENCE_LIMIT = 3


def strip_code_fence(raw: str) -> str:
    """Unwrap a Markdown code fence around the whole body, if present."""
    stripped = raw.strip()
    if len(stripped) < 6 or not (stripped.startswith("```") and stripped.endswith("```")):
        return stripped

    body = stripped[3:-3]
    # Opening line may carry a language tag (```json)
    first_line, newline, rest = body.partition("\n")
    if newline and (not first_line.strip() or first_line.strip().isalpha()):
        body = rest
    return body.strip()


def _repair_evidence(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str) and item.strip()]
    return []


def _repair_confidence(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%").strip())
        except ValueError:
            return None
    if isinstance(value, int | float) and math.isfinite(value):
        return max(0, min(100, round(value)))
    return None


def parse_structured_response(raw: str, *, default_confidence: int) -> AnalysisResult | None:
    """Parse and repair a structured response.

    Returns:
        AnalysisResult, or None when the body is not a JSON object with a
        non-empty string ``answer``
    """
    try:
        data = json.loads(strip_code_fence(raw))
    except json.JSONDecodeError:
        return None

    if not isinstance(data, dict):
        return None

    answer = data.get("answer")
    if not isinstance(answer, str) or not answer.strip():
        return None

    repairs: list[str] = []

    evidence = _repair_evidence(data.get("evidence"))
    if evidence != data.get("evidence"):
        repairs.append("evidence")

    confidence = _repair_confidence(data.get("confidence_score"))
    if confidence is None:
        confidence = default_confidence
        repairs.append("confidence_score")
    elif confidence != data.get("confidence_score"):
        repairs.append("confidence_score")

    reasoning = data.get("reasoning")
    if not isinstance(reasoning, str) or not reasoning.strip():
        reasoning = FALLBACK_REASONING
        repairs.append("reasoning")

    if repairs:
        logger.warning(f"Repaired structured response fields: {', '.join(repairs)}")

    return AnalysisResult(
        answer=answer,
        evidence=evidence,
        confidence_score=confidence,
        reasoning=reasoning,
    )


def build_fallback_result(
    raw: str,
    matches: list[ChunkMatch],
    *,
    preview_chars: int,
    confidence: int,
) -> AnalysisResult:
    """Build a schema-conforming result from free text and the top-ranked chunks."""
    evidence: list[str] = []
    for match in matches[:FALLBACK_EVIDENCE_LIMIT]:
        text = match.chunk.text
        evidence.append(text[:preview_chars] + "..." if len(text) > preview_chars else text)

    return AnalysisResult(
        answer=raw.strip(),
        evidence=evidence,
        confidence_score=confidence,
        reasoning=FALLBACK_REASONING,
    )


class AnswerSynthesizer:
    """Runs one bounded reasoning call and classifies its output."""

    def __init__(
        self,
        client: ReasoningClient,
        config: PipelineConfig,
        *,
        metrics: PrometheusSynthesisMetrics | None = None,
        structured_logger: StructuredSynthesisLogger | None = None,
    ) -> None:
        self._client = client
        self._config = config
        self._metrics = metrics or PrometheusSynthesisMetrics()
        self._structured_logger = structured_logger or StructuredSynthesisLogger()

    async def synthesize(
        self,
        *,
        question: str,
        context: str,
        matches: list[ChunkMatch],
        document_id: UUID | None = None,
    ) -> SynthesisOutcome:
        """Ask the reasoning service and validate the answer.

        An empty context is still sent; the service is expected to say it
        lacks grounding.

        Args:
            question: User question
            context: Assembled context (may be empty)
            matches: Ranked chunks behind the context, used for fallback evidence
            document_id: For logging only

        Returns:
            SynthesisOutcome tagged structured, fallback or failed
        """
        started = time.perf_counter()
        raw: str | None = None

        try:
            raw = await asyncio.wait_for(
                self._client.complete(
                    instruction=SYSTEM_INSTRUCTION,
                    context=context,
                    question=question,
                ),
                timeout=self._config.llm_timeout_seconds,
            )
        except TimeoutError:
            outcome = SynthesisOutcome.failed(
                f"Reasoning service timed out after {self._config.llm_timeout_seconds}s"
            )
        except SynthesisError as e:
            outcome = SynthesisOutcome.failed(str(e))
        else:
            outcome = self._classify(raw, matches)

        latency_ms = (time.perf_counter() - started) * 1000
        self._metrics.record_attempt(outcome.kind.value, latency_ms)
        self._structured_logger.log_attempt(
            document_id,
            outcome.kind,
            latency_ms,
            context_chars=len(context),
            response_chars=len(raw) if raw is not None else None,
            error_reason=outcome.error,
        )

        return outcome

    def _classify(self, raw: str, matches: list[ChunkMatch]) -> SynthesisOutcome:
        if not raw.strip():
            return SynthesisOutcome.failed("Reasoning service returned an empty response")

        result = parse_structured_response(
            raw, default_confidence=self._config.fallback_confidence
        )
        if result is not None:
            return SynthesisOutcome.structured(result, raw)

        logger.warning("Reasoning service returned unstructured text, using fallback result")
        fallback = build_fallback_result(
            raw,
            matches,
            preview_chars=self._config.evidence_preview_chars,
            confidence=self._config.fallback_confidence,
        )
        return SynthesisOutcome.fallback(fallback, raw)

