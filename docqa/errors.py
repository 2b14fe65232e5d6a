"""Error taxonomy for ingestion and analysis."""

from uuid import UUID


class DocQAError(Exception):
    """Base class for all pipeline errors."""


class EmptyContent(DocQAError):
    """Ingestion received no usable text (user-correctable)."""

    def __init__(self, file_name: str, min_chars: int) -> None:
        self.file_name = file_name
        self.min_chars = min_chars
        super().__init__(
            f"No usable text could be extracted from '{file_name}' "
            f"(need at least {min_chars} characters)"
        )


class DocumentNotFound(DocQAError):
    """Query referenced a nonexistent or inaccessible document."""

    def __init__(self, document_id: UUID) -> None:
        self.document_id = document_id
        super().__init__(f"Document not found: {document_id}")


class SynthesisError(DocQAError):
    """Reasoning service failed, timed out, or returned nothing usable.

    Retryable: the caller may re-issue the same query.
    """


class PersistenceError(DocQAError):
    """Storage collaborator failed to record an exchange."""
