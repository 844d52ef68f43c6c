from __future__ import annotations

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from battlestacks.tournaments.types import (
    BracketRound,
    BracketTeam,
    RegistrationSnapshot,
    TournamentSnapshot,
    WinnerLogSnapshot,
)


class BracketTeamResponse(BaseModel):
    team_name: str
    game_ids: list[str]


class BracketMatchupResponse(BaseModel):
    team1: BracketTeamResponse | None = None
    team2: BracketTeamResponse | None = None
    winner: BracketTeamResponse | None = None


class BracketRoundResponse(BaseModel):
    title: str
    matchups: list[BracketMatchupResponse]


class TournamentWinnerResponse(BaseModel):
    user_id: UUID
    team_name: str
    prize_money: int = Field(ge=0)


class TournamentResponse(BaseModel):
    id: UUID
    title: str
    game: str
    team_type: str
    registration_deadline: datetime
    start_date: date | None = None
    entry_fee: int = Field(ge=0)
    prize_pool: int = Field(ge=0)
    slots_total: int = Field(ge=1)
    slots_allotted: int = Field(ge=0)
    status: str
    rules: list[str]
    confirmed_teams: list[BracketTeamResponse]
    bracket: list[BracketRoundResponse]
    winner: TournamentWinnerResponse | None = None
    series_id: UUID | None = None
    series_number: int | None = None
    created_at: datetime


class TournamentListResponse(BaseModel):
    items: list[TournamentResponse]


class TournamentCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=128)
    game: str = Field(min_length=1, max_length=16)
    team_type: str = Field(min_length=1, max_length=8)
    registration_deadline: datetime
    start_date: date | None = None
    entry_fee: int = Field(ge=0)
    prize_pool: int = Field(ge=0)
    slots_total: int = Field(ge=1)
    rules: list[str] = Field(default_factory=list)


class TournamentStatusUpdateRequest(BaseModel):
    status: str = Field(min_length=1, max_length=16)
    admin_override: bool = False


class RegistrationCreateRequest(BaseModel):
    team_name: str = Field(max_length=128)
    game_ids: list[str] = Field(max_length=8)
    upi_id: str = Field(max_length=128)


class RegistrationResponse(BaseModel):
    id: UUID
    tournament_id: UUID
    user_id: UUID
    team_name: str
    game_ids: list[str]
    upi_id: str
    payment_status: str
    registered_at: datetime


class RegistrationListResponse(BaseModel):
    items: list[RegistrationResponse]


class BracketWinnerRequest(BaseModel):
    round_index: int = Field(ge=0)
    matchup_index: int = Field(ge=0)
    team_name: str = Field(min_length=1, max_length=64)


class BracketPlacementRequest(BaseModel):
    matchup_index: int = Field(ge=0)
    slot: Literal["team1", "team2"]
    team_name: str | None = Field(default=None, max_length=64)


class TeamRemovalResponse(BaseModel):
    tournament: TournamentResponse
    removed_team: BracketTeamResponse
    registration_deleted: bool


class WinnerDeclarationResponse(BaseModel):
    tournament: TournamentResponse
    winner_log_id: UUID
    user_id: UUID
    prize_money: int = Field(ge=0)


class PaymentConfirmResponse(BaseModel):
    tournament: TournamentResponse
    registration_id: UUID
    confirmed_now: bool
    series_clone_id: UUID | None = None


class PaymentPendingResponse(BaseModel):
    tournament: TournamentResponse
    registration_id: UUID
    pending_now: bool


class WinnerLogResponse(BaseModel):
    id: UUID
    tournament_id: UUID
    tournament_title: str
    user_name: str
    team_name: str
    prize_money: int
    won_at: datetime


class WinnerLogListResponse(BaseModel):
    items: list[WinnerLogResponse]


def team_response(team: BracketTeam | None) -> BracketTeamResponse | None:
    if team is None:
        return None
    return BracketTeamResponse(team_name=team.team_name, game_ids=list(team.game_ids))


def _round_response(bracket_round: BracketRound) -> BracketRoundResponse:
    return BracketRoundResponse(
        title=bracket_round.title,
        matchups=[
            BracketMatchupResponse(
                team1=team_response(matchup.team1),
                team2=team_response(matchup.team2),
                winner=team_response(matchup.winner),
            )
            for matchup in bracket_round.matchups
        ],
    )


def tournament_response(snapshot: TournamentSnapshot) -> TournamentResponse:
    winner = snapshot.winner
    return TournamentResponse(
        id=snapshot.tournament_id,
        title=snapshot.title,
        game=snapshot.game,
        team_type=snapshot.team_type,
        registration_deadline=snapshot.registration_deadline,
        start_date=snapshot.start_date,
        entry_fee=snapshot.entry_fee,
        prize_pool=snapshot.prize_pool,
        slots_total=snapshot.slots_total,
        slots_allotted=snapshot.slots_allotted,
        status=snapshot.status,
        rules=list(snapshot.rules),
        confirmed_teams=[
            BracketTeamResponse(team_name=team.team_name, game_ids=list(team.game_ids))
            for team in snapshot.confirmed_teams
        ],
        bracket=[_round_response(bracket_round) for bracket_round in snapshot.bracket],
        winner=(
            TournamentWinnerResponse(
                user_id=winner.user_id,
                team_name=winner.team_name,
                prize_money=winner.prize_money,
            )
            if winner is not None
            else None
        ),
        series_id=snapshot.series_id,
        series_number=snapshot.series_number,
        created_at=snapshot.created_at,
    )


def registration_response(snapshot: RegistrationSnapshot) -> RegistrationResponse:
    return RegistrationResponse(
        id=snapshot.registration_id,
        tournament_id=snapshot.tournament_id,
        user_id=snapshot.user_id,
        team_name=snapshot.team_name,
        game_ids=list(snapshot.game_ids),
        upi_id=snapshot.upi_id,
        payment_status=snapshot.payment_status,
        registered_at=snapshot.registered_at,
    )


def winner_log_response(snapshot: WinnerLogSnapshot) -> WinnerLogResponse:
    return WinnerLogResponse(
        id=snapshot.winner_log_id,
        tournament_id=snapshot.tournament_id,
        tournament_title=snapshot.tournament_title,
        user_name=snapshot.user_name,
        team_name=snapshot.team_name,
        prize_money=snapshot.prize_money,
        won_at=snapshot.won_at,
    )
