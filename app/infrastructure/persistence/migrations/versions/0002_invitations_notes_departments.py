"""Agent invitations, ticket notes, department membership

Revision ID: 0002_invitations_notes_departments
Revises: 0001_helpdesk_accounts
Create Date: 2026-10-18 14:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0002_invitations_notes_departments"
down_revision: Union[str, Sequence[str], None] = "0001_helpdesk_accounts"
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


def upgrade() -> None:
    """Create agent_invitation, ticket_note and user_department."""
    op.create_table(
        "agent_invitation",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("business_id", sa.String(), nullable=False),
        sa.Column("invited_by", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("name", sa.String(), server_default="", nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("token", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("department_ids", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('admin', 'manager', 'agent')", name="agent_invitation_role_check"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'revoked', 'expired')",
            name="agent_invitation_status_check",
        ),
        sa.ForeignKeyConstraint(["business_id"], ["business.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["invited_by"], ["app_user.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token"),
    )
    op.create_index(
        op.f("ix_agent_invitation_business_id"),
        "agent_invitation",
        ["business_id"],
        unique=False,
    )
    op.create_index(
        "ix_agent_invitation_business_email_lower",
        "agent_invitation",
        ["business_id", sa.text("lower(email)")],
        unique=False,
    )

    op.create_table(
        "ticket_note",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("ticket_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["ticket_id"], ["ticket.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_ticket_note_ticket_id"), "ticket_note", ["ticket_id"], unique=False)
    op.create_index(op.f("ix_ticket_note_user_id"), "ticket_note", ["user_id"], unique=False)

    op.create_table(
        "user_department",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("department_id", sa.String(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["department_id"], ["department.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "department_id", name="user_department_user_department_key"
        ),
    )
    op.create_index(
        op.f("ix_user_department_user_id"), "user_department", ["user_id"], unique=False
    )
    op.create_index(
        op.f("ix_user_department_department_id"),
        "user_department",
        ["department_id"],
        unique=False,
    )


def downgrade() -> None:
    """Drop agent_invitation, ticket_note and user_department."""
    op.drop_index(op.f("ix_user_department_department_id"), table_name="user_department")
    op.drop_index(op.f("ix_user_department_user_id"), table_name="user_department")
    op.drop_table("user_department")
    op.drop_index(op.f("ix_ticket_note_user_id"), table_name="ticket_note")
    op.drop_index(op.f("ix_ticket_note_ticket_id"), table_name="ticket_note")
    op.drop_table("ticket_note")
    op.drop_index("ix_agent_invitation_business_email_lower", table_name="agent_invitation")
    op.drop_index(op.f("ix_agent_invitation_business_id"), table_name="agent_invitation")
    op.drop_table("agent_invitation")
