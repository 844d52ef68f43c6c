from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from battlestacks.db.models.base import Base


class Registration(Base):
    __tablename__ = "registrations"
    __table_args__ = (
        CheckConstraint(
            "payment_status IN ('Pending','Confirmed')",
            name="ck_registrations_payment_status",
        ),
        UniqueConstraint("tournament_id", "user_id", name="uq_registrations_tournament_user"),
        UniqueConstraint("tournament_id", "team_name", name="uq_registrations_tournament_team"),
        Index("idx_registrations_tournament_status", "tournament_id", "payment_status"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    tournament_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
    )
    team_name: Mapped[str] = mapped_column(String(64), nullable=False)
    game_ids: Mapped[list[str]] = mapped_column(JSONB, nullable=False)
    upi_id: Mapped[str] = mapped_column(String(128), nullable=False)
    payment_status: Mapped[str] = mapped_column(String(16), nullable=False)
    registered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
