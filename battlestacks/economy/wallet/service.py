from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.redeem_requests import RedeemRequest
from battlestacks.db.models.users import User
from battlestacks.db.repo.redeem_requests_repo import RedeemRequestsRepo
from battlestacks.db.repo.users_repo import UsersRepo
from battlestacks.economy.wallet.errors import (
    RedeemRequestNotFoundError,
    WalletUserNotFoundError,
    WalletValidationError,
)
from battlestacks.economy.wallet.rules import (
    REDEEM_STATUS_COMPLETED,
    REDEEM_STATUS_PENDING,
    apply_payout,
    validate_phone_number,
    validate_redeem_amount,
    validate_upi_id,
)
from battlestacks.economy.wallet.types import RedeemRequestResult, WalletSnapshot

logger = structlog.get_logger(__name__)


class WalletService:
    @staticmethod
    def _snapshot_from_model(user: User) -> WalletSnapshot:
        return WalletSnapshot(
            user_id=user.id,
            wallet_balance=int(user.wallet_balance),
            total_earnings=int(user.total_earnings),
            matches_won=int(user.matches_won),
        )

    @staticmethod
    def _request_result(
        redeem_request: RedeemRequest,
        *,
        wallet_balance: int,
        completed_now: bool = False,
    ) -> RedeemRequestResult:
        return RedeemRequestResult(
            request_id=redeem_request.id,
            user_id=redeem_request.user_id,
            amount=int(redeem_request.amount),
            status=redeem_request.status,
            requested_at=redeem_request.requested_at,
            completed_at=redeem_request.completed_at,
            wallet_balance=wallet_balance,
            completed_now=completed_now,
        )

    @staticmethod
    async def _get_user_for_update(session: AsyncSession, user_id: UUID) -> User:
        user = await UsersRepo.get_by_id_for_update(session, user_id)
        if user is None:
            raise WalletUserNotFoundError
        return user

    @staticmethod
    async def get_wallet(session: AsyncSession, *, user_id: UUID) -> WalletSnapshot:
        user = await UsersRepo.get_by_id(session, user_id)
        if user is None:
            raise WalletUserNotFoundError
        return WalletService._snapshot_from_model(user)

    @staticmethod
    async def credit_prize(
        session: AsyncSession,
        *,
        user_id: UUID,
        prize_money: int,
    ) -> WalletSnapshot:
        if prize_money < 0:
            raise WalletValidationError("prize money cannot be negative")
        user = await WalletService._get_user_for_update(session, user_id)
        user.wallet_balance = int(user.wallet_balance) + prize_money
        user.total_earnings = int(user.total_earnings) + prize_money
        user.matches_won = int(user.matches_won) + 1
        await session.flush()
        logger.info("wallet_prize_credited", user_id=str(user_id), prize_money=prize_money)
        return WalletService._snapshot_from_model(user)

    @staticmethod
    async def request_redeem(
        session: AsyncSession,
        *,
        user_id: UUID,
        amount: int,
        phone_number: str,
        upi_id: str,
        now_utc: datetime,
    ) -> RedeemRequestResult:
        user = await UsersRepo.get_by_id(session, user_id)
        if user is None:
            raise WalletUserNotFoundError
        validate_redeem_amount(amount=amount, wallet_balance=int(user.wallet_balance))

        redeem_request = await RedeemRequestsRepo.create(
            session,
            redeem_request=RedeemRequest(
                id=uuid4(),
                user_id=user.id,
                amount=amount,
                upi_id=validate_upi_id(upi_id),
                phone_number=validate_phone_number(phone_number),
                status=REDEEM_STATUS_PENDING,
                requested_at=now_utc,
                completed_at=None,
            ),
        )
        logger.info(
            "wallet_redeem_requested",
            user_id=str(user.id),
            request_id=str(redeem_request.id),
            amount=amount,
        )
        return WalletService._request_result(
            redeem_request,
            wallet_balance=int(user.wallet_balance),
        )

    @staticmethod
    async def complete_redeem(
        session: AsyncSession,
        *,
        request_id: UUID,
        now_utc: datetime,
    ) -> RedeemRequestResult:
        redeem_request = await RedeemRequestsRepo.get_by_id_for_update(session, request_id)
        if redeem_request is None:
            raise RedeemRequestNotFoundError
        user = await WalletService._get_user_for_update(session, redeem_request.user_id)

        if redeem_request.status == REDEEM_STATUS_COMPLETED:
            return WalletService._request_result(
                redeem_request,
                wallet_balance=int(user.wallet_balance),
            )

        user.wallet_balance = apply_payout(
            wallet_balance=int(user.wallet_balance),
            amount=int(redeem_request.amount),
        )
        redeem_request.status = REDEEM_STATUS_COMPLETED
        redeem_request.completed_at = now_utc
        await session.flush()

        logger.info(
            "wallet_redeem_completed",
            user_id=str(user.id),
            request_id=str(redeem_request.id),
            amount=int(redeem_request.amount),
        )
        return WalletService._request_result(
            redeem_request,
            wallet_balance=int(user.wallet_balance),
            completed_now=True,
        )

    @staticmethod
    async def list_pending_requests(
        session: AsyncSession,
        *,
        limit: int = 100,
    ) -> list[RedeemRequest]:
        return await RedeemRequestsRepo.list_by_status(
            session,
            status=REDEEM_STATUS_PENDING,
            limit=limit,
        )
