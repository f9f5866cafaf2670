"""book_descriptions: global description cache with case-insensitive unique (title, author).

Revision ID: 000_book_descriptions
Revises:
Create Date: 2025-03-01 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "000_book_descriptions"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "book_descriptions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("book_title", sa.Text(), nullable=False),
        sa.Column("author_name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index(
        "ix_book_descriptions_created_at",
        "book_descriptions",
        ["created_at"],
        unique=False,
        if_not_exists=True,
    )
    op.create_index(
        "ux_book_descriptions_title_author",
        "book_descriptions",
        [sa.text("lower(book_title)"), sa.text("lower(author_name)")],
        unique=True,
        if_not_exists=True,
    )


def downgrade() -> None:
    op.drop_index("ux_book_descriptions_title_author", table_name="book_descriptions")
    op.drop_index("ix_book_descriptions_created_at", table_name="book_descriptions")
    op.drop_table("book_descriptions")
