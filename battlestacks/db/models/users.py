from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from battlestacks.db.models.base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('PLAYER','ADMIN')", name="ck_users_role"),
        CheckConstraint("status IN ('active','banned')", name="ck_users_status"),
        CheckConstraint("wallet_balance >= 0", name="ck_users_wallet_balance_non_negative"),
        CheckConstraint("total_earnings >= 0", name="ck_users_total_earnings_non_negative"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    game_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    team_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(16), nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="PLAYER")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    wallet_balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_earnings: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    matches_won: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
