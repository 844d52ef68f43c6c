from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from battlestacks.db.session import SessionLocal
from battlestacks.economy.wallet.errors import (
    RedeemRequestNotFoundError,
    WalletInsufficientBalanceError,
    WalletUserNotFoundError,
    WalletValidationError,
)
from battlestacks.economy.wallet.service import WalletService
from battlestacks.economy.wallet.types import RedeemRequestResult

from .helpers import assert_admin_access, require_user_id

router = APIRouter(tags=["wallet"])
logger = structlog.get_logger(__name__)


class WalletResponse(BaseModel):
    user_id: UUID
    wallet_balance: int = Field(ge=0)
    total_earnings: int = Field(ge=0)
    matches_won: int = Field(ge=0)


class RedeemCreateRequest(BaseModel):
    amount: int
    phone_number: str = Field(max_length=32)
    upi_id: str = Field(max_length=128)


class RedeemResponse(BaseModel):
    id: UUID
    user_id: UUID
    amount: int = Field(gt=0)
    status: str
    requested_at: datetime
    completed_at: datetime | None = None
    wallet_balance: int = Field(ge=0)
    completed_now: bool = False


class RedeemQueueItem(BaseModel):
    id: UUID
    user_id: UUID
    amount: int
    upi_id: str
    phone_number: str
    requested_at: datetime


class RedeemQueueResponse(BaseModel):
    items: list[RedeemQueueItem]


def _as_response(result: RedeemRequestResult) -> RedeemResponse:
    return RedeemResponse(
        id=result.request_id,
        user_id=result.user_id,
        amount=result.amount,
        status=result.status,
        requested_at=result.requested_at,
        completed_at=result.completed_at,
        wallet_balance=result.wallet_balance,
        completed_now=result.completed_now,
    )


@router.get("/wallet", response_model=WalletResponse)
async def get_wallet(request: Request) -> WalletResponse:
    user_id = require_user_id(request)
    try:
        async with SessionLocal.begin() as session:
            snapshot = await WalletService.get_wallet(session, user_id=user_id)
    except WalletUserNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_USER_NOT_FOUND"}) from exc
    return WalletResponse(
        user_id=snapshot.user_id,
        wallet_balance=snapshot.wallet_balance,
        total_earnings=snapshot.total_earnings,
        matches_won=snapshot.matches_won,
    )


@router.post("/wallet/redeem-requests", response_model=RedeemResponse, status_code=201)
async def create_redeem_request(payload: RedeemCreateRequest, request: Request) -> RedeemResponse:
    user_id = require_user_id(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await WalletService.request_redeem(
                session,
                user_id=user_id,
                amount=payload.amount,
                phone_number=payload.phone_number,
                upi_id=payload.upi_id,
                now_utc=now_utc,
            )
    except WalletUserNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_USER_NOT_FOUND"}) from exc
    except WalletValidationError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_REDEEM_INVALID"}) from exc
    except WalletInsufficientBalanceError as exc:
        raise HTTPException(status_code=409, detail={"code": "E_INSUFFICIENT_BALANCE"}) from exc

    return _as_response(result)


@router.get("/admin/redeem-requests", response_model=RedeemQueueResponse)
async def list_redeem_requests(
    request: Request,
    limit: int = Query(default=100, ge=1, le=500),
) -> RedeemQueueResponse:
    await assert_admin_access(request)

    async with SessionLocal.begin() as session:
        rows = await WalletService.list_pending_requests(session, limit=limit)
    return RedeemQueueResponse(
        items=[
            RedeemQueueItem(
                id=row.id,
                user_id=row.user_id,
                amount=int(row.amount),
                upi_id=row.upi_id,
                phone_number=row.phone_number,
                requested_at=row.requested_at,
            )
            for row in rows
        ]
    )


@router.post("/admin/redeem-requests/{request_id}/complete", response_model=RedeemResponse)
async def complete_redeem_request(request_id: UUID, request: Request) -> RedeemResponse:
    await assert_admin_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await WalletService.complete_redeem(
                session,
                request_id=request_id,
                now_utc=now_utc,
            )
    except (RedeemRequestNotFoundError, WalletUserNotFoundError) as exc:
        raise HTTPException(status_code=404, detail={"code": "E_REDEEM_REQUEST_NOT_FOUND"}) from exc
    except WalletInsufficientBalanceError as exc:
        logger.warning("admin_redeem_insufficient_balance", request_id=str(request_id))
        raise HTTPException(status_code=409, detail={"code": "E_INSUFFICIENT_BALANCE"}) from exc

    return _as_response(result)
