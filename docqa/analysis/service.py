"""Analysis service - ingest documents and answer questions about them."""

import logging
from typing import Any
from uuid import UUID

from docqa.analysis.recorder import ExchangeRecorder
from docqa.analysis.synthesizer import AnswerSynthesizer
from docqa.config import PipelineConfig
from docqa.db.context import RequestContext
from docqa.db.repositories import DocumentRepository, ExchangeRepository
from docqa.docs.context import assemble_context
from docqa.docs.ingest import ingest_document
from docqa.docs.ranker import RelevanceScorer, get_scorer, rank_chunks
from docqa.errors import DocumentNotFound, PersistenceError, SynthesisError
from docqa.llm.client import ReasoningClient
from docqa.models.docs import Document
from docqa.models.exchange import AnalysisReport, Exchange

logger = logging.getLogger(__name__)


class AnalysisService:
    """Runs ingestion and the Ranker -> Assembler -> Synthesizer -> Recorder query flow.

    Holds no per-query state; one instance may serve concurrent queries.
    """

    def __init__(
        self,
        *,
        documents: DocumentRepository,
        exchanges: ExchangeRepository,
        client: ReasoningClient,
        config: PipelineConfig,
        scorer: RelevanceScorer | None = None,
    ) -> None:
        self._documents = documents
        self._exchanges = exchanges
        self._config = config
        self._scorer = scorer or get_scorer(config.ranker_scorer)
        self._synthesizer = AnswerSynthesizer(client, config)
        self._recorder = ExchangeRecorder(exchanges)

    async def ingest(
        self,
        ctx: RequestContext,
        *,
        file_name: str,
        extracted_text: str | None,
        metadata: dict[str, Any] | None = None,
        file_type: str | None = None,
    ) -> Document:
        """Chunk and store a document.

        Raises:
            EmptyContent: If the extracted text is missing or too short
        """
        return await ingest_document(
            ctx=ctx,
            file_name=file_name,
            text=extracted_text,
            metadata=metadata,
            file_type=file_type,
            repository=self._documents,
            config=self._config,
        )

    async def analyze(
        self, ctx: RequestContext, document_id: UUID, question: str
    ) -> AnalysisReport:
        """Answer a question about one document.

        Persistence is a side effect: if recording the exchange fails the
        answer is still returned, with a warning attached.

        Raises:
            DocumentNotFound: If the document does not exist or is not the caller's
            SynthesisError: If the reasoning service failed or timed out
        """
        logger.info(f"[analyze] document_id={document_id} question_chars={len(question)}")

        document = await self._documents.get_document(document_id, ctx)
        if document is None:
            raise DocumentNotFound(document_id)

        matches = rank_chunks(
            document.chunks, question, scorer=self._scorer, top_k=self._config.top_k
        )
        context = assemble_context(matches)

        if not matches:
            logger.info(f"[analyze] document_id={document_id} no matching chunks, empty context")

        outcome = await self._synthesizer.synthesize(
            question=question,
            context=context,
            matches=matches,
            document_id=document_id,
        )

        if outcome.result is None:
            if self._config.record_failed_exchanges:
                try:
                    await self._recorder.record(ctx, document_id, question, outcome)
                except PersistenceError as e:
                    logger.warning(f"[analyze] failure stub not recorded: {e}")
            raise SynthesisError(outcome.error or "Reasoning service failed")

        warnings: list[str] = []
        exchange_id: UUID | None = None
        try:
            exchange = await self._recorder.record(ctx, document_id, question, outcome)
            exchange_id = exchange.exchange_id
        except PersistenceError as e:
            logger.warning(f"[analyze] document_id={document_id} answer not persisted: {e}")
            warnings.append("The answer could not be saved to history.")

        logger.info(
            f"[analyze] document_id={document_id} succeeded, source={outcome.kind.value}, "
            f"{len(matches)} matches, confidence={outcome.result.confidence_score}"
        )

        return AnalysisReport(
            result=outcome.result,
            source=outcome.kind.value,
            exchange_id=exchange_id,
            warnings=warnings,
        )

    async def history(
        self, ctx: RequestContext, document_id: UUID, limit: int = 50
    ) -> list[Exchange]:
        """Exchanges recorded for a document, newest first.

        Raises:
            DocumentNotFound: If the document does not exist or is not the caller's
        """
        if await self._documents.get_document(document_id, ctx) is None:
            raise DocumentNotFound(document_id)
        return await self._exchanges.list_exchanges(document_id, ctx, limit=limit)
