"""init

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-18 00:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "auth_users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_sign_in_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_auth_users_email", "auth_users", ["email"], unique=True)

    op.create_table(
        "auth_sessions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("auth_users.id"), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_auth_sessions_user_id", "auth_sessions", ["user_id"])

    op.create_table(
        "helpdesk_profiles",
        sa.Column("id", sa.String(length=36), sa.ForeignKey("auth_users.id"), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("full_name", sa.String(length=255)),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="agent"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("role in ('admin', 'agent')", name="ck_helpdesk_profiles_role"),
    )
    op.create_index("ix_helpdesk_profiles_email", "helpdesk_profiles", ["email"])

    op.create_table(
        "helpdesk_tickets",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="open"),
        sa.Column("priority", sa.String(length=20), nullable=False, server_default="medium"),
        sa.Column(
            "assigned_to",
            sa.String(length=36),
            sa.ForeignKey("helpdesk_profiles.id"),
        ),
        sa.Column("image_urls", sa.JSON()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "status in ('open', 'assigned', 'in_progress', 'closed')",
            name="ck_helpdesk_tickets_status",
        ),
        sa.CheckConstraint(
            "priority in ('low', 'medium', 'high', 'urgent')",
            name="ck_helpdesk_tickets_priority",
        ),
    )
    op.create_index("ix_helpdesk_tickets_status", "helpdesk_tickets", ["status"])
    op.create_index("ix_helpdesk_tickets_assigned_to", "helpdesk_tickets", ["assigned_to"])
    op.create_index("ix_helpdesk_tickets_created_at", "helpdesk_tickets", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_helpdesk_tickets_created_at", table_name="helpdesk_tickets")
    op.drop_index("ix_helpdesk_tickets_assigned_to", table_name="helpdesk_tickets")
    op.drop_index("ix_helpdesk_tickets_status", table_name="helpdesk_tickets")
    op.drop_table("helpdesk_tickets")
    op.drop_index("ix_helpdesk_profiles_email", table_name="helpdesk_profiles")
    op.drop_table("helpdesk_profiles")
    op.drop_index("ix_auth_sessions_user_id", table_name="auth_sessions")
    op.drop_table("auth_sessions")
    op.drop_index("ix_auth_users_email", table_name="auth_users")
    op.drop_table("auth_users")
