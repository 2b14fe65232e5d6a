"""In-memory implementations of repository interfaces."""

import uuid

from docqa.db.context import RequestContext
from docqa.models.docs import Document
from docqa.models.exchange import Exchange


class InMemoryStore:
    """Shared backing store so document deletes cascade to exchanges."""

    def __init__(self) -> None:
        self.documents: dict[uuid.UUID, Document] = {}
        self.exchanges: dict[uuid.UUID, Exchange] = {}


class InMemoryDocumentRepository:
    """In-memory implementation of DocumentRepository."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def insert_document(self, document: Document, ctx: RequestContext) -> None:
        """Persist a newly ingested document."""
        # Enforce ownership
        if document.user_id != ctx.user_id:
            raise PermissionError("Cannot insert a document owned by another user")

        self._store.documents[document.document_id] = document

    async def get_document(
        self, document_id: uuid.UUID, ctx: RequestContext
    ) -> Document | None:
        """Get document by ID."""
        document = self._store.documents.get(document_id)

        if document is None:
            return None

        # Enforce ownership
        if document.user_id != ctx.user_id:
            return None

        return document

    async def delete_document(self, document_id: uuid.UUID, ctx: RequestContext) -> bool:
        """Delete a document and its exchanges."""
        document = await self.get_document(document_id, ctx)

        if document is None:
            return False

        del self._store.documents[document_id]

        # Cascade
        for exchange_id in [
            e.exchange_id for e in self._store.exchanges.values() if e.document_id == document_id
        ]:
            del self._store.exchanges[exchange_id]

        return True


class InMemoryExchangeRepository:
    """In-memory implementation of ExchangeRepository."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def insert_exchange(self, exchange: Exchange, ctx: RequestContext) -> None:
        """Persist one immutable exchange."""
        if exchange.user_id != ctx.user_id:
            raise PermissionError("Cannot insert an exchange owned by another user")

        self._store.exchanges[exchange.exchange_id] = exchange

    async def list_exchanges(
        self, document_id: uuid.UUID, ctx: RequestContext, limit: int = 50
    ) -> list[Exchange]:
        """List exchanges for a document, newest first."""
        results = [
            exchange
            for exchange in reversed(self._store.exchanges.values())
            if exchange.document_id == document_id and exchange.user_id == ctx.user_id
        ]

        # Sort by created_at descending, ties newest-inserted first
        results.sort(key=lambda x: x.created_at, reverse=True)

        return results[:limit]
