from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from battlestacks.db.models.base import Base


class WinnerLog(Base):
    __tablename__ = "winner_logs"
    __table_args__ = (Index("idx_winner_logs_user_won_at", "user_id", "won_at"),)

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    tournament_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("tournaments.id"),
        unique=True,
        nullable=False,
    )
    tournament_title: Mapped[str] = mapped_column(String(128), nullable=False)
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
    )
    user_name: Mapped[str] = mapped_column(String(128), nullable=False)
    team_name: Mapped[str] = mapped_column(String(64), nullable=False)
    prize_money: Mapped[int] = mapped_column(Integer, nullable=False)
    won_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
