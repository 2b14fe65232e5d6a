"""Ownership-safe query helpers."""

from sqlalchemy import Select, select

from docqa.db.context import RequestContext
from docqa.db.models import DocumentRow, ExchangeRow


def select_documents(ctx: RequestContext) -> Select[tuple[DocumentRow]]:
    """Select from document table with user scoping enforced.

    Args:
        ctx: Request context with user_id

    Returns:
        Select filtered by user_id
    """
    return select(DocumentRow).where(DocumentRow.user_id == ctx.user_id)


def select_exchanges(ctx: RequestContext) -> Select[tuple[ExchangeRow]]:
    """Select from exchange table with user scoping enforced.

    Args:
        ctx: Request context with user_id

    Returns:
        Select filtered by user_id
    """
    return select(ExchangeRow).where(ExchangeRow.user_id == ctx.user_id)
