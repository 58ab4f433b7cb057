"""Initial schema: documents, persons, document_authors

Revision ID: 001
Revises:
Create Date: 2025-03-03 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create only the tables that do not exist yet
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = set(inspector.get_table_names())

    if "documents" not in existing_tables:
        _create_documents()
    if "persons" not in existing_tables:
        _create_persons()
    if "document_authors" not in existing_tables:
        _create_document_authors()


def _create_documents() -> None:
    op.create_table(
        "documents",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("abstract", sa.Text),
        sa.Column("ai_summary", sa.Text),
        sa.Column("year", sa.Integer),
        sa.Column("month", sa.Integer),
        sa.Column("day", sa.Integer),
        sa.Column("pages", sa.String(64)),
        sa.Column("volume", sa.String(64)),
        sa.Column("issue", sa.String(64)),
        sa.Column("source", sa.Text),
        sa.Column("publisher", sa.Text),
        sa.Column("language", sa.String(2)),
        sa.Column("identifiers", sa.Text),
        sa.Column("urls", sa.Text),
        sa.Column("keywords", sa.Text),
        sa.Column("ai_keywords", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_documents_updated_at", "documents", ["updated_at"])


def _create_persons() -> None:
    op.create_table(
        "persons",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("last_name", sa.Text, nullable=False),
        sa.Column("first_name", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_persons_last_name", "persons", ["last_name"])


def _create_document_authors() -> None:
    op.create_table(
        "document_authors",
        sa.Column("document_id", sa.Uuid, sa.ForeignKey("documents.id", ondelete="CASCADE"), nullable=False),
        sa.Column("person_id", sa.Uuid, sa.ForeignKey("persons.id", ondelete="CASCADE"), nullable=False),
        sa.Column("order", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("document_id", "person_id", name="document_id_person_id"),
        sa.CheckConstraint('"order" >= 1', name="ck_document_authors_order_positive"),
    )
    op.create_index("idx_document_authors_person_id", "document_authors", ["person_id"])


def downgrade() -> None:
    op.drop_table("document_authors")
    op.drop_table("persons")
    op.drop_table("documents")
