"""Exchange recorder - persist one immutable question/answer record."""

import logging
from datetime import UTC, datetime
from uuid import UUID, uuid4

from docqa.db.context import RequestContext
from docqa.db.repositories import ExchangeRepository
from docqa.errors import PersistenceError
from docqa.models.exchange import Exchange, SynthesisOutcome
from docqa.utils.metrics import PrometheusSynthesisMetrics

logger = logging.getLogger(__name__)


class ExchangeRecorder:
    """Writes exchanges through the storage collaborator."""

    def __init__(
        self,
        repository: ExchangeRepository,
        *,
        metrics: PrometheusSynthesisMetrics | None = None,
    ) -> None:
        self._repository = repository
        self._metrics = metrics or PrometheusSynthesisMetrics()

    async def record(
        self,
        ctx: RequestContext,
        document_id: UUID,
        question: str,
        outcome: SynthesisOutcome,
    ) -> Exchange:
        """Persist the exchange for one synthesis outcome.

        A failed outcome is stored as a stub with no answer, evidence,
        confidence or reasoning.

        Raises:
            PersistenceError: If the storage collaborator fails
        """
        result = outcome.result

        exchange = Exchange(
            exchange_id=uuid4(),
            user_id=ctx.user_id,
            document_id=document_id,
            question=question,
            answer=result.answer if result else None,
            evidence=list(result.evidence) if result else [],
            confidence_score=result.confidence_score if result else None,
            reasoning=result.reasoning if result else None,
            created_at=datetime.now(UTC),
        )

        try:
            await self._repository.insert_exchange(exchange, ctx)
        except Exception as e:
            self._metrics.inc_persist_error()
            logger.error(f"[record] failed to persist exchange for document_id={document_id}: {e}")
            raise PersistenceError(f"Failed to persist exchange: {e}") from e

        logger.info(
            f"[record] exchange_id={exchange.exchange_id} document_id={document_id} "
            f"outcome={outcome.kind.value}"
        )

        return exchange
