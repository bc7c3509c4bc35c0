"""Initial schema for users, self-assessments and wellness events

Revision ID: 202610010001
Revises:
Create Date: 2026-10-01 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610010001"
down_revision = None
branch_labels = None
depends_on = None

user_role_enum = sa.Enum("Collaborator", "Manager", name="user_role")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("full_name", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "self_assessments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("mood", sa.Integer(), nullable=False),
        sa.Column("stress", sa.Integer(), nullable=False),
        sa.Column("workload", sa.Integer(), nullable=False),
        sa.Column("notes", sa.String(length=1000), nullable=True),
    )
    op.create_index("ix_self_assessments_created_at", "self_assessments", ["created_at"])
    op.create_index(
        "ix_self_assessments_user_created", "self_assessments", ["user_id", "created_at"]
    )

    op.create_table(
        "wellness_events",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("event_type", sa.String(length=100), nullable=False),
        sa.Column(
            "occurred_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("source", sa.String(length=100), nullable=False, server_default="unknown"),
        sa.Column("value", sa.Float(), nullable=True),
        sa.Column("metadata_json", sa.Text(), nullable=True),
    )
    op.create_index("ix_wellness_events_user_id", "wellness_events", ["user_id"])
    op.create_index("ix_wellness_events_event_type", "wellness_events", ["event_type"])
    op.create_index("ix_wellness_events_occurred_at", "wellness_events", ["occurred_at"])


def downgrade() -> None:
    op.drop_index("ix_wellness_events_occurred_at", table_name="wellness_events")
    op.drop_index("ix_wellness_events_event_type", table_name="wellness_events")
    op.drop_index("ix_wellness_events_user_id", table_name="wellness_events")
    op.drop_table("wellness_events")
    op.drop_index("ix_self_assessments_user_created", table_name="self_assessments")
    op.drop_index("ix_self_assessments_created_at", table_name="self_assessments")
    op.drop_table("self_assessments")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    user_role_enum.drop(op.get_bind(), checkfirst=True)
