"""Repository protocol interfaces for data access."""

from typing import Protocol
from uuid import UUID

from docqa.db.context import RequestContext
from docqa.models.docs import Document
from docqa.models.exchange import Exchange


class DocumentRepository(Protocol):
    """Repository for document operations."""

    async def insert_document(self, document: Document, ctx: RequestContext) -> None:
        """Persist a newly ingested document.

        Args:
            document: Document with chunks inline
            ctx: Request context (must own the document)
        """
        ...

    async def get_document(self, document_id: UUID, ctx: RequestContext) -> Document | None:
        """Get document by ID.

        Args:
            document_id: Document ID
            ctx: Request context (enforces ownership)

        Returns:
            Document or None if not found or not owned by the caller
        """
        ...

    async def delete_document(self, document_id: UUID, ctx: RequestContext) -> bool:
        """Delete a document and, by cascade, its exchanges.

        Args:
            document_id: Document ID
            ctx: Request context (enforces ownership)

        Returns:
            True if a document was deleted
        """
        ...


class ExchangeRepository(Protocol):
    """Repository for question/answer exchanges."""

    async def insert_exchange(self, exchange: Exchange, ctx: RequestContext) -> None:
        """Persist one immutable exchange.

        Args:
            exchange: Exchange record
            ctx: Request context (must own the exchange)
        """
        ...

    async def list_exchanges(
        self, document_id: UUID, ctx: RequestContext, limit: int = 50
    ) -> list[Exchange]:
        """List exchanges for a document, newest first.

        Args:
            document_id: Document ID
            ctx: Request context (enforces ownership)
            limit: Maximum number of results

        Returns:
            List of exchanges
        """
        ...
