from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from battlestacks.db.models.base import Base


class RedeemRequest(Base):
    __tablename__ = "redeem_requests"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_redeem_requests_amount_positive"),
        CheckConstraint(
            "status IN ('Pending','Completed')",
            name="ck_redeem_requests_status",
        ),
        Index("idx_redeem_requests_status_requested_at", "status", "requested_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    upi_id: Mapped[str] = mapped_column(String(128), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    requested_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
