"""Create snippets, users and sessions tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the three tables the web application reads and writes.
How:   Timestamps are TIMESTAMP WITH TIME ZONE and are always written by the
       application in UTC.

Rollback: downgrade() drops all three tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "snippets",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "title",
            sa.String(100),
            nullable=False,
            comment="Snippet title, at most 100 characters",
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column(
            "expires",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            comment="Hidden from every query once this is in the past",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_snippets_created", "snippets", ["created"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "hashed_password",
            sa.String(60),
            nullable=False,
            comment="bcrypt hash",
        ),
        sa.Column("created", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="users_uc_email"),
    )

    op.create_table(
        "sessions",
        sa.Column("token", sa.String(43), nullable=False),
        sa.Column(
            "data",
            sa.Text(),
            nullable=False,
            comment="JSON-encoded session values",
        ),
        sa.Column("expiry", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("token"),
    )
    op.create_index("idx_sessions_expiry", "sessions", ["expiry"])


def downgrade() -> None:
    """WARNING: destructive. Every snippet, user and session is lost."""
    op.drop_index("idx_sessions_expiry", table_name="sessions")
    op.drop_table("sessions")
    op.drop_table("users")
    op.drop_index("idx_snippets_created", table_name="snippets")
    op.drop_table("snippets")
