"""Helpdesk accounts: business, users, sessions, mailbox tokens, scoped records

Revision ID: 0001_helpdesk_accounts
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_helpdesk_accounts"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _scope_columns() -> list[sa.Column]:
    return [
        sa.Column("user_email", sa.String(), nullable=True),
        sa.Column("business_id", sa.String(), nullable=True),
    ]


def _scope_indexes(table: str) -> None:
    op.create_index(op.f(f"ix_{table}_user_email"), table, ["user_email"], unique=False)
    op.create_index(op.f(f"ix_{table}_business_id"), table, ["business_id"], unique=False)


def upgrade() -> None:
    """Create schema."""
    op.create_table(
        "business",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("business_email", sa.String(), nullable=False),
        sa.Column("business_name", sa.String(), nullable=False),
        sa.Column("owner_name", sa.String(), nullable=False),
        sa.Column("subscription_tier", sa.String(), nullable=False),
        sa.Column(
            "is_email_verified", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "subscription_tier IN ('free', 'pro', 'enterprise')",
            name="business_subscription_tier_check",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("business_email"),
    )

    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("name", sa.String(), server_default="", nullable=False),
        sa.Column("password_hash", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("business_id", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column(
            "is_email_verified", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('admin', 'manager', 'agent')", name="app_user_role_check"
        ),
        sa.ForeignKeyConstraint(["business_id"], ["business.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_app_user_business_id"), "app_user", ["business_id"], unique=False)
    op.create_index(
        "ix_app_user_email_lower", "app_user", [sa.text("lower(email)")], unique=False
    )

    op.create_table(
        "user_session",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("token", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("user_email", sa.String(), nullable=False),
        sa.Column("business_id", sa.String(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token"),
    )
    op.create_index(op.f("ix_user_session_user_id"), "user_session", ["user_id"], unique=False)

    op.create_table(
        "mailbox_token",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_email", sa.String(), nullable=False),
        sa.Column("business_id", sa.String(), nullable=True),
        sa.Column("provider", sa.String(), nullable=False),
        sa.Column("account_email", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_mailbox_token_user_email"), "mailbox_token", ["user_email"], unique=False
    )
    op.create_index(
        op.f("ix_mailbox_token_business_id"), "mailbox_token", ["business_id"], unique=False
    )

    op.create_table(
        "ticket",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("thread_id", sa.String(), nullable=False),
        sa.Column("subject", sa.String(), server_default="", nullable=False),
        sa.Column("customer_email", sa.String(), nullable=False),
        sa.Column("customer_name", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("priority", sa.String(), nullable=True),
        sa.Column("assignee_user_id", sa.String(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("last_customer_reply_at", sa.DateTime(timezone=True), nullable=True),
        *_scope_columns(),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('open', 'pending', 'on_hold', 'closed')", name="ticket_status_check"
        ),
        sa.CheckConstraint(
            "priority IS NULL OR priority IN ('low', 'medium', 'high', 'urgent')",
            name="ticket_priority_check",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_ticket_thread_id"), "ticket", ["thread_id"], unique=False)
    op.create_index(
        op.f("ix_ticket_assignee_user_id"), "ticket", ["assignee_user_id"], unique=False
    )
    _scope_indexes("ticket")

    op.create_table(
        "knowledge_item",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column(
            "can_paraphrase", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        *_scope_columns(),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('published', 'pending')", name="knowledge_item_status_check"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_knowledge_item_status"), "knowledge_item", ["status"], unique=False)
    _scope_indexes("knowledge_item")

    op.create_table(
        "department",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("created_by", sa.String(), nullable=True),
        *_scope_columns(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _scope_indexes("department")


def downgrade() -> None:
    """Drop schema."""
    for table in ("department", "knowledge_item", "ticket"):
        op.drop_index(op.f(f"ix_{table}_business_id"), table_name=table)
        op.drop_index(op.f(f"ix_{table}_user_email"), table_name=table)
    op.drop_table("department")
    op.drop_index(op.f("ix_knowledge_item_status"), table_name="knowledge_item")
    op.drop_table("knowledge_item")
    op.drop_index(op.f("ix_ticket_assignee_user_id"), table_name="ticket")
    op.drop_index(op.f("ix_ticket_thread_id"), table_name="ticket")
    op.drop_table("ticket")
    op.drop_index(op.f("ix_mailbox_token_business_id"), table_name="mailbox_token")
    op.drop_index(op.f("ix_mailbox_token_user_email"), table_name="mailbox_token")
    op.drop_table("mailbox_token")
    op.drop_index(op.f("ix_user_session_user_id"), table_name="user_session")
    op.drop_table("user_session")
    op.drop_index("ix_app_user_email_lower", table_name="app_user")
    op.drop_index(op.f("ix_app_user_business_id"), table_name="app_user")
    op.drop_table("app_user")
    op.drop_table("business")
