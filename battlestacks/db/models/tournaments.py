from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from battlestacks.db.models.base import Base


class Tournament(Base):
    __tablename__ = "tournaments"
    __table_args__ = (
        CheckConstraint("game IN ('PUBG','Free Fire')", name="ck_tournaments_game"),
        CheckConstraint("team_type IN ('Solo','Duo','Squad')", name="ck_tournaments_team_type"),
        CheckConstraint(
            "status IN ('Upcoming','Ongoing','Completed')",
            name="ck_tournaments_status",
        ),
        CheckConstraint("slots_total >= 1", name="ck_tournaments_slots_total_positive"),
        CheckConstraint(
            "slots_allotted >= 0 AND slots_allotted <= slots_total",
            name="ck_tournaments_slots_allotted_range",
        ),
        CheckConstraint(
            "entry_fee >= 0 AND prize_pool >= 0",
            name="ck_tournaments_money_non_negative",
        ),
        UniqueConstraint("series_id", "series_number", name="uq_tournaments_series_number"),
        Index("idx_tournaments_status_registration_deadline", "status", "registration_deadline"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    game: Mapped[str] = mapped_column(String(16), nullable=False)
    team_type: Mapped[str] = mapped_column(String(8), nullable=False)
    registration_deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    entry_fee: Mapped[int] = mapped_column(Integer, nullable=False)
    prize_pool: Mapped[int] = mapped_column(Integer, nullable=False)
    slots_total: Mapped[int] = mapped_column(Integer, nullable=False)
    slots_allotted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    rules: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    confirmed_teams: Mapped[list[dict[str, object]]] = mapped_column(
        JSONB, nullable=False, default=list
    )
    bracket: Mapped[list[dict[str, object]]] = mapped_column(JSONB, nullable=False, default=list)
    winner: Mapped[dict[str, object] | None] = mapped_column(JSONB, nullable=True)
    series_id: Mapped[UUID | None] = mapped_column(PG_UUID(as_uuid=True), nullable=True)
    series_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # Every UPDATE carries "WHERE version = :read_version"; a concurrent writer
    # turns the flush into StaleDataError.
    __mapper_args__ = {"version_id_col": version}
