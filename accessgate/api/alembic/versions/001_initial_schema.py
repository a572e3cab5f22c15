"""Initial database schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates the initial AccessGate database schema with:
- accounts: Identity, role and current access status
- access_logs: Append-only grant/revoke ledger
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
    # Accounts table
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="USER"),
        sa.Column("access_status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("role IN ('ADMIN', 'USER')", name="ck_accounts_role"),
        sa.CheckConstraint("access_status IN ('active', 'revoked')", name="ck_accounts_access_status"),
    )
    op.create_index("ix_accounts_email", "accounts", ["email"], unique=True)
    op.create_index("ix_accounts_access_status", "accounts", ["access_status"])

    # Access logs table
    op.create_table(
        "access_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("subject_id", sa.Uuid(), nullable=False),
        sa.Column("subject_email", sa.String(255), nullable=False),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("actor_email", sa.String(255), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False, server_default=""),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["subject_id"], ["accounts.id"]),
        sa.ForeignKeyConstraint(["actor_id"], ["accounts.id"]),
        sa.CheckConstraint("action IN ('granted', 'revoked')", name="ck_access_logs_action"),
    )
    op.create_index("ix_access_logs_subject_id", "access_logs", ["subject_id"])
    op.create_index("ix_access_logs_timestamp", "access_logs", ["timestamp"])


def downgrade() -> None:
    op.drop_index("ix_access_logs_timestamp", table_name="access_logs")
    op.drop_index("ix_access_logs_subject_id", table_name="access_logs")
    op.drop_table("access_logs")

    op.drop_index("ix_accounts_access_status", table_name="accounts")
    op.drop_index("ix_accounts_email", table_name="accounts")
    op.drop_table("accounts")
