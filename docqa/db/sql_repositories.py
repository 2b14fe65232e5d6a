"""SQL implementations of repository interfaces."""

import uuid

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from docqa.db.context import RequestContext
from docqa.db.models import DocumentRow, ExchangeRow
from docqa.db.queries import select_documents, select_exchanges
from docqa.models.docs import Chunk, Document
from docqa.models.exchange import Exchange


class SqlDocumentRepository:
    """SQL implementation of DocumentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert_document(self, document: Document, ctx: RequestContext) -> None:
        """Persist a newly ingested document."""
        if document.user_id != ctx.user_id:
            raise PermissionError("Cannot insert a document owned by another user")

        row = DocumentRow(
            document_id=document.document_id,
            user_id=document.user_id,
            title=document.title,
            file_name=document.file_name,
            file_type=document.file_type,
            content=document.content,
            chunks=[chunk.model_dump(mode="json") for chunk in document.chunks],
            metadata_=document.metadata,
            created_at=document.created_at,
        )

        self._session.add(row)
        await self._session.commit()

    async def get_document(
        self, document_id: uuid.UUID, ctx: RequestContext
    ) -> Document | None:
        """Get document by ID."""
        result = await self._session.execute(
            select_documents(ctx).where(DocumentRow.document_id == document_id)
        )
        row = result.scalar_one_or_none()

        if row is None:
            return None

        return Document(
            document_id=row.document_id,
            user_id=row.user_id,
            title=row.title,
            file_name=row.file_name,
            file_type=row.file_type,
            content=row.content,
            chunks=[Chunk.model_validate(c) for c in sorted(row.chunks, key=lambda c: c["index"])],
            metadata=row.metadata_,
            created_at=row.created_at,
        )

    async def delete_document(self, document_id: uuid.UUID, ctx: RequestContext) -> bool:
        """Delete a document and its exchanges."""
        result = await self._session.execute(
            select_documents(ctx).where(DocumentRow.document_id == document_id)
        )
        row = result.scalar_one_or_none()

        if row is None:
            return False

        # Explicit cascade; SQLite does not enforce foreign keys by default
        await self._session.execute(
            delete(ExchangeRow).where(
                ExchangeRow.document_id == document_id, ExchangeRow.user_id == ctx.user_id
            )
        )
        await self._session.delete(row)
        await self._session.commit()

        return True


class SqlExchangeRepository:
    """SQL implementation of ExchangeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert_exchange(self, exchange: Exchange, ctx: RequestContext) -> None:
        """Persist one immutable exchange."""
        if exchange.user_id != ctx.user_id:
            raise PermissionError("Cannot insert an exchange owned by another user")

        row = ExchangeRow(
            exchange_id=exchange.exchange_id,
            document_id=exchange.document_id,
            user_id=exchange.user_id,
            question=exchange.question,
            answer=exchange.answer,
            evidence=list(exchange.evidence),
            confidence_score=exchange.confidence_score,
            reasoning=exchange.reasoning,
            created_at=exchange.created_at,
        )

        self._session.add(row)
        await self._session.commit()

    async def list_exchanges(
        self, document_id: uuid.UUID, ctx: RequestContext, limit: int = 50
    ) -> list[Exchange]:
        """List exchanges for a document, newest first.

        Equal timestamps are ordered by exchange_id descending.
        """
        result = await self._session.execute(
            select_exchanges(ctx)
            .where(ExchangeRow.document_id == document_id)
            .order_by(ExchangeRow.created_at.desc(), ExchangeRow.exchange_id.desc())
            .limit(limit)
        )

        return [
            Exchange(
                exchange_id=row.exchange_id,
                user_id=row.user_id,
                document_id=row.document_id,
                question=row.question,
                answer=row.answer,
                evidence=row.evidence or [],
                confidence_score=row.confidence_score,
                reasoning=row.reasoning,
                created_at=row.created_at,
            )
            for row in result.scalars().all()
        ]
