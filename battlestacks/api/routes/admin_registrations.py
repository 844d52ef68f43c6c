from __future__ import annotations

from datetime import datetime, timezone
from functools import partial
from uuid import UUID

import structlog
from fastapi import APIRouter, Request

from battlestacks.tournaments.errors import TournamentError
from battlestacks.tournaments.service import confirm_payment, mark_pending

from .helpers import assert_admin_access, run_tournament_transaction, tournament_http_error
from .tournaments_models import (
    PaymentConfirmResponse,
    PaymentPendingResponse,
    tournament_response,
)

router = APIRouter(tags=["admin", "registrations"])
logger = structlog.get_logger(__name__)


@router.post(
    "/admin/registrations/{registration_id}/confirm",
    response_model=PaymentConfirmResponse,
)
async def confirm_payment_route(registration_id: UUID, request: Request) -> PaymentConfirmResponse:
    await assert_admin_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        result = await run_tournament_transaction(
            partial(confirm_payment, registration_id=registration_id, now_utc=now_utc)
        )
    except TournamentError as exc:
        logger.info(
            "admin_payment_confirm_rejected",
            registration_id=str(registration_id),
            reason=type(exc).__name__,
        )
        raise tournament_http_error(exc) from exc

    return PaymentConfirmResponse(
        tournament=tournament_response(result.snapshot),
        registration_id=result.registration_id,
        confirmed_now=result.confirmed_now,
        series_clone_id=result.series_clone_id,
    )


@router.post(
    "/admin/registrations/{registration_id}/pending",
    response_model=PaymentPendingResponse,
)
async def mark_pending_route(registration_id: UUID, request: Request) -> PaymentPendingResponse:
    await assert_admin_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        result = await run_tournament_transaction(
            partial(mark_pending, registration_id=registration_id, now_utc=now_utc)
        )
    except TournamentError as exc:
        logger.info(
            "admin_payment_pending_rejected",
            registration_id=str(registration_id),
            reason=type(exc).__name__,
        )
        raise tournament_http_error(exc) from exc

    return PaymentPendingResponse(
        tournament=tournament_response(result.snapshot),
        registration_id=result.registration_id,
        pending_now=result.pending_now,
    )
