from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(slots=True)
class WalletSnapshot:
    user_id: UUID
    wallet_balance: int
    total_earnings: int
    matches_won: int


@dataclass(slots=True)
class RedeemRequestResult:
    request_id: UUID
    user_id: UUID
    amount: int
    status: str
    requested_at: datetime
    completed_at: datetime | None
    wallet_balance: int
    completed_now: bool = False
