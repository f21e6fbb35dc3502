"""initial_matching_schema

Revision ID: a1f3c5e7b9d2
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "a1f3c5e7b9d2"
down_revision = None
branch_labels = None
depends_on = None


funding_stage = postgresql.ENUM(
    "Pre-Seed", "Seed", "Series A", "Series B", "Series C", "Series D+",
    "Bridge/Convertible", "Growth/Late Stage",
    name="funding_stage", create_type=False,
)
funding_request_status = postgresql.ENUM(
    "open", "allotted", "closed", name="funding_request_status", create_type=False,
)
allotment_method = postgresql.ENUM("manual", "ai", name="allotment_method", create_type=False)
match_status = postgresql.ENUM(
    "active", "contacted", "interested", "declined", "funded",
    name="match_status", create_type=False,
)
party_type = postgresql.ENUM(
    "founder", "investor", "admin", "system", name="party_type", create_type=False,
)
notification_type = postgresql.ENUM(
    "funding_allotted", "investors_assigned", "funding_refreshed",
    "funding_request_created", "funding_request_closed", "funding_request_deleted",
    "match_status_changed",
    name="notification_type", create_type=False,
)
notification_priority = postgresql.ENUM(
    "low", "medium", "high", "urgent", name="notification_priority", create_type=False,
)
related_entity_type = postgresql.ENUM(
    "funding_request", "match", name="related_entity_type", create_type=False,
)

_ENUMS = (
    funding_stage,
    funding_request_status,
    allotment_method,
    match_status,
    party_type,
    notification_type,
    notification_priority,
    related_entity_type,
)


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for enum in _ENUMS:
        enum.create(bind, checkfirst=True)

    op.create_table(
        "founders",
        _uuid_pk(),
        sa.Column("company_name", sa.String(300), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("industry", sa.String(200), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_founders_email", "founders", ["email"], unique=True)

    op.create_table(
        "investors",
        _uuid_pk(),
        sa.Column("full_name", sa.String(300), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("phone", sa.String(40), nullable=True),
        sa.Column("linkedin", sa.String(500), nullable=True),
        sa.Column("company", sa.String(300), nullable=True),
        sa.Column("designation", sa.String(200), nullable=True),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column("location", sa.String(300), nullable=True),
        sa.Column("photo_url", sa.String(1000), nullable=True),
        sa.Column("investment_interests", postgresql.ARRAY(sa.String), server_default="{}", nullable=False),
        sa.Column("amount_range", sa.String(50), nullable=True),
        sa.Column("previous_investments", postgresql.JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("notable_exits", postgresql.ARRAY(sa.String), server_default="{}", nullable=False),
        sa.Column("is_verified", sa.Boolean, server_default="false", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_investors_email", "investors", ["email"], unique=True)
    op.create_index("ix_investors_is_verified", "investors", ["is_verified"])

    op.create_table(
        "funding_requests",
        _uuid_pk(),
        sa.Column("founder_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("funding_amount", sa.Numeric(19, 4), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("funding_stage", funding_stage, nullable=False),
        sa.Column("equity_offered", sa.Numeric(5, 2), nullable=True),
        sa.Column("use_of_funds", sa.Text, nullable=False),
        sa.Column("business_plan", sa.Text, nullable=True),
        sa.Column("financial_projections", sa.Text, nullable=True),
        sa.Column("additional_notes", sa.Text, nullable=True),
        sa.Column("status", funding_request_status, nullable=False),
        sa.Column("allotted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("allotted_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("allotment_method", allotment_method, nullable=True),
        sa.Column("ai_match_score", sa.Float, nullable=True),
        sa.Column("refresh_count", sa.Integer, server_default="0", nullable=False),
        sa.Column("last_refreshed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["founder_id"], ["founders.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("funding_amount > 0", name="ck_funding_requests_amount_positive"),
        sa.CheckConstraint(
            "equity_offered IS NULL OR (equity_offered >= 0 AND equity_offered <= 100)",
            name="ck_funding_requests_equity_range",
        ),
        sa.CheckConstraint("refresh_count >= 0", name="ck_funding_requests_refresh_count"),
    )
    op.create_index("ix_funding_requests_founder_id_status", "funding_requests", ["founder_id", "status"])
    op.create_index("ix_funding_requests_status_created_at", "funding_requests", ["status", "created_at"])

    op.create_table(
        "founder_investor_matches",
        _uuid_pk(),
        sa.Column("funding_request_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("founder_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("investor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("match_score", sa.Integer, server_default="0", nullable=False),
        sa.Column("match_criteria", postgresql.JSONB, server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column("assignment_method", allotment_method, nullable=False),
        sa.Column("assigned_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("status", match_status, nullable=False),
        sa.Column("contacted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("response_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column("email_sent", sa.Boolean, server_default="false", nullable=False),
        sa.Column("email_sent_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["funding_request_id"], ["funding_requests.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["founder_id"], ["founders.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["investor_id"], ["investors.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "funding_request_id",
            "founder_id",
            "investor_id",
            name="uq_founder_investor_matches_request_founder_investor",
        ),
        sa.CheckConstraint(
            "match_score >= 0 AND match_score <= 100",
            name="ck_founder_investor_matches_score_range",
        ),
    )
    op.create_index(
        "ix_founder_investor_matches_funding_request_id",
        "founder_investor_matches",
        ["funding_request_id"],
    )
    op.create_index(
        "ix_founder_investor_matches_founder_status",
        "founder_investor_matches",
        ["founder_id", "status"],
    )
    op.create_index(
        "ix_founder_investor_matches_investor_status",
        "founder_investor_matches",
        ["investor_id", "status"],
    )
    op.create_index(
        "ix_founder_investor_matches_match_score",
        "founder_investor_matches",
        ["match_score"],
    )

    op.create_table(
        "notifications",
        _uuid_pk(),
        sa.Column("recipient_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("recipient_type", party_type, nullable=False),
        sa.Column("sender_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("sender_type", party_type, nullable=False),
        sa.Column("type", notification_type, nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("related_entity_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("related_entity_type", related_entity_type, nullable=True),
        sa.Column("priority", notification_priority, nullable=False),
        sa.Column("action_url", sa.String(500), nullable=True),
        sa.Column("action_text", sa.String(100), nullable=True),
        sa.Column("is_read", sa.Boolean, server_default="false", nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_notifications_recipient",
        "notifications",
        ["recipient_type", "recipient_id", "is_read"],
    )
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_notifications_created_at", table_name="notifications")
    op.drop_index("ix_notifications_recipient", table_name="notifications")
    op.drop_table("notifications")

    op.drop_index("ix_founder_investor_matches_match_score", table_name="founder_investor_matches")
    op.drop_index("ix_founder_investor_matches_investor_status", table_name="founder_investor_matches")
    op.drop_index("ix_founder_investor_matches_founder_status", table_name="founder_investor_matches")
    op.drop_index("ix_founder_investor_matches_funding_request_id", table_name="founder_investor_matches")
    op.drop_table("founder_investor_matches")

    op.drop_index("ix_funding_requests_status_created_at", table_name="funding_requests")
    op.drop_index("ix_funding_requests_founder_id_status", table_name="funding_requests")
    op.drop_table("funding_requests")

    op.drop_index("ix_investors_is_verified", table_name="investors")
    op.drop_index("ix_investors_email", table_name="investors")
    op.drop_table("investors")

    op.drop_index("ix_founders_email", table_name="founders")
    op.drop_table("founders")

    bind = op.get_bind()
    for enum in reversed(_ENUMS):
        enum.drop(bind, checkfirst=True)
