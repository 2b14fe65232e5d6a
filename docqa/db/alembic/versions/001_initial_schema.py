"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates:
- document (extracted text, inline chunks, metadata)
- exchange (question/answer records, cascades with document)
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

JsonType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Create document and exchange tables."""
    # document table
    op.create_table(
        "document",
        sa.Column("document_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("file_name", sa.Text(), nullable=False),
        sa.Column("file_type", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("chunks", JsonType, nullable=False),
        sa.Column("metadata", JsonType, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_document_user", "document", ["user_id", "created_at"])

    # exchange table
    op.create_table(
        "exchange",
        sa.Column("exchange_id", sa.Uuid(), primary_key=True),
        sa.Column("document_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=True),
        sa.Column("evidence", JsonType, nullable=False),
        sa.Column("confidence_score", sa.Integer(), nullable=True),
        sa.Column("reasoning", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["document_id"], ["document.document_id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "confidence_score IS NULL OR (confidence_score >= 0 AND confidence_score <= 100)",
            name="ck_exchange_confidence_range",
        ),
    )
    op.create_index("idx_exchange_document", "exchange", ["document_id", "created_at"])
    op.create_index("idx_exchange_user", "exchange", ["user_id"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("idx_exchange_user", table_name="exchange")
    op.drop_index("idx_exchange_document", table_name="exchange")
    op.drop_table("exchange")

    op.drop_index("idx_document_user", table_name="document")
    op.drop_table("document")
