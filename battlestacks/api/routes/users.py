from __future__ import annotations

from uuid import UUID

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from battlestacks.db.session import SessionLocal
from battlestacks.services.user_directory import (
    LEADERBOARD_DEFAULT_LIMIT,
    UserDirectoryService,
    UserNotFoundError,
    UserStatusValidationError,
)

from .helpers import assert_admin_access

router = APIRouter(tags=["users"])
logger = structlog.get_logger(__name__)


class LeaderboardEntryResponse(BaseModel):
    rank: int = Field(ge=1)
    user_id: UUID
    name: str
    team_name: str | None = None
    total_earnings: int = Field(ge=0)
    matches_won: int = Field(ge=0)


class LeaderboardResponse(BaseModel):
    items: list[LeaderboardEntryResponse]


class UserStatusUpdateRequest(BaseModel):
    status: str = Field(min_length=1, max_length=16)


class UserStatusResponse(BaseModel):
    user_id: UUID
    name: str
    role: str
    status: str
    changed: bool


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    limit: int = Query(default=LEADERBOARD_DEFAULT_LIMIT, ge=1, le=100),
) -> LeaderboardResponse:
    async with SessionLocal.begin() as session:
        standings = await UserDirectoryService.list_leaderboard(session, limit=limit)
    return LeaderboardResponse(
        items=[
            LeaderboardEntryResponse(
                rank=standing.rank,
                user_id=standing.user_id,
                name=standing.name,
                team_name=standing.team_name,
                total_earnings=standing.total_earnings,
                matches_won=standing.matches_won,
            )
            for standing in standings
        ]
    )


@router.post("/admin/users/{user_id}/status", response_model=UserStatusResponse)
async def update_user_status(
    user_id: UUID,
    payload: UserStatusUpdateRequest,
    request: Request,
) -> UserStatusResponse:
    await assert_admin_access(request)

    try:
        async with SessionLocal.begin() as session:
            result = await UserDirectoryService.set_user_status(
                session,
                user_id=user_id,
                status=payload.status,
            )
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_USER_NOT_FOUND"}) from exc
    except UserStatusValidationError as exc:
        logger.info("admin_user_status_rejected", user_id=str(user_id), status=payload.status)
        raise HTTPException(status_code=422, detail={"code": "E_USER_STATUS_INVALID"}) from exc

    return UserStatusResponse(
        user_id=result.user_id,
        name=result.name,
        role=result.role,
        status=result.status,
        changed=result.changed,
    )
