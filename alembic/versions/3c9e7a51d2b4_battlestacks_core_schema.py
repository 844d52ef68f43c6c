"""battlestacks_core_schema

Revision ID: 3c9e7a51d2b4
Revises:
Create Date: 2026-10-19 09:30:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "3c9e7a51d2b4"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("game_id", sa.String(32), nullable=True),
        sa.Column("team_name", sa.String(64), nullable=True),
        sa.Column("phone_number", sa.String(16), nullable=True),
        sa.Column("role", sa.String(16), nullable=False, server_default=sa.text("'PLAYER'")),
        sa.Column("status", sa.String(16), nullable=False, server_default=sa.text("'active'")),
        sa.Column("wallet_balance", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_earnings", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("matches_won", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("role IN ('PLAYER','ADMIN')", name="ck_users_role"),
        sa.CheckConstraint("status IN ('active','banned')", name="ck_users_status"),
        sa.CheckConstraint("wallet_balance >= 0", name="ck_users_wallet_balance_non_negative"),
        sa.CheckConstraint("total_earnings >= 0", name="ck_users_total_earnings_non_negative"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "tournaments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(128), nullable=False),
        sa.Column("game", sa.String(16), nullable=False),
        sa.Column("team_type", sa.String(8), nullable=False),
        sa.Column("registration_deadline", sa.DateTime(timezone=True), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("entry_fee", sa.Integer(), nullable=False),
        sa.Column("prize_pool", sa.Integer(), nullable=False),
        sa.Column("slots_total", sa.Integer(), nullable=False),
        sa.Column("slots_allotted", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("rules", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column(
            "confirmed_teams",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("bracket", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("winner", postgresql.JSONB(), nullable=True),
        sa.Column("series_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("series_number", sa.Integer(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("game IN ('PUBG','Free Fire')", name="ck_tournaments_game"),
        sa.CheckConstraint("team_type IN ('Solo','Duo','Squad')", name="ck_tournaments_team_type"),
        sa.CheckConstraint(
            "status IN ('Upcoming','Ongoing','Completed')",
            name="ck_tournaments_status",
        ),
        sa.CheckConstraint("slots_total >= 1", name="ck_tournaments_slots_total_positive"),
        sa.CheckConstraint(
            "slots_allotted >= 0 AND slots_allotted <= slots_total",
            name="ck_tournaments_slots_allotted_range",
        ),
        sa.CheckConstraint(
            "entry_fee >= 0 AND prize_pool >= 0",
            name="ck_tournaments_money_non_negative",
        ),
        sa.UniqueConstraint("series_id", "series_number", name="uq_tournaments_series_number"),
    )
    op.create_index(
        "idx_tournaments_status_registration_deadline",
        "tournaments",
        ["status", "registration_deadline"],
    )

    op.create_table(
        "registrations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("tournament_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("team_name", sa.String(64), nullable=False),
        sa.Column("game_ids", postgresql.JSONB(), nullable=False),
        sa.Column("upi_id", sa.String(128), nullable=False),
        sa.Column("payment_status", sa.String(16), nullable=False),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "payment_status IN ('Pending','Confirmed')",
            name="ck_registrations_payment_status",
        ),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("tournament_id", "user_id", name="uq_registrations_tournament_user"),
        sa.UniqueConstraint("tournament_id", "team_name", name="uq_registrations_tournament_team"),
    )
    op.create_index(
        "idx_registrations_tournament_status",
        "registrations",
        ["tournament_id", "payment_status"],
    )

    op.create_table(
        "winner_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("tournament_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tournament_title", sa.String(128), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_name", sa.String(128), nullable=False),
        sa.Column("team_name", sa.String(64), nullable=False),
        sa.Column("prize_money", sa.Integer(), nullable=False),
        sa.Column("won_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("tournament_id", name="uq_winner_logs_tournament_id"),
    )
    op.create_index("idx_winner_logs_user_won_at", "winner_logs", ["user_id", "won_at"])

    op.create_table(
        "redeem_requests",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("upi_id", sa.String(128), nullable=False),
        sa.Column("phone_number", sa.String(16), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("amount > 0", name="ck_redeem_requests_amount_positive"),
        sa.CheckConstraint("status IN ('Pending','Completed')", name="ck_redeem_requests_status"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index(
        "idx_redeem_requests_status_requested_at",
        "redeem_requests",
        ["status", "requested_at"],
    )

    op.create_table(
        "outbox_events",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("event_type", sa.String(64), nullable=False),
        sa.Column("payload", postgresql.JSONB(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("idx_outbox_events_status_created_at", "outbox_events", ["status", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_outbox_events_status_created_at", table_name="outbox_events")
    op.drop_table("outbox_events")
    op.drop_index("idx_redeem_requests_status_requested_at", table_name="redeem_requests")
    op.drop_table("redeem_requests")
    op.drop_index("idx_winner_logs_user_won_at", table_name="winner_logs")
    op.drop_table("winner_logs")
    op.drop_index("idx_registrations_tournament_status", table_name="registrations")
    op.drop_table("registrations")
    op.drop_index("idx_tournaments_status_registration_deadline", table_name="tournaments")
    op.drop_table("tournaments")
    op.drop_table("users")
