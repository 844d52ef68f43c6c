from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class BracketTeam:
    team_name: str
    game_ids: tuple[str, ...] = ()


@dataclass(slots=True)
class BracketMatchup:
    team1: BracketTeam | None = None
    team2: BracketTeam | None = None
    winner: BracketTeam | None = None


@dataclass(slots=True)
class BracketRound:
    title: str
    matchups: list[BracketMatchup] = field(default_factory=list)


@dataclass(slots=True)
class TournamentWinner:
    user_id: UUID
    team_name: str
    prize_money: int


@dataclass(slots=True)
class TournamentSnapshot:
    tournament_id: UUID
    title: str
    game: str
    team_type: str
    registration_deadline: datetime
    start_date: date | None
    entry_fee: int
    prize_pool: int
    slots_total: int
    slots_allotted: int
    status: str
    rules: tuple[str, ...]
    confirmed_teams: tuple[BracketTeam, ...]
    bracket: tuple[BracketRound, ...]
    winner: TournamentWinner | None
    series_id: UUID | None
    series_number: int | None
    created_at: datetime


@dataclass(slots=True)
class RegistrationSnapshot:
    registration_id: UUID
    tournament_id: UUID
    user_id: UUID
    team_name: str
    game_ids: tuple[str, ...]
    upi_id: str
    payment_status: str
    registered_at: datetime


@dataclass(slots=True)
class PaymentConfirmResult:
    snapshot: TournamentSnapshot
    registration_id: UUID
    confirmed_now: bool
    series_clone_id: UUID | None = None


@dataclass(slots=True)
class PaymentPendingResult:
    snapshot: TournamentSnapshot
    registration_id: UUID
    pending_now: bool


@dataclass(slots=True)
class TeamRemovalResult:
    snapshot: TournamentSnapshot
    removed_team: BracketTeam
    registration_deleted: bool


@dataclass(slots=True)
class WinnerDeclarationResult:
    snapshot: TournamentSnapshot
    winner_log_id: UUID
    user_id: UUID
    prize_money: int


@dataclass(slots=True)
class WinnerLogSnapshot:
    winner_log_id: UUID
    tournament_id: UUID
    tournament_title: str
    user_id: UUID
    user_name: str
    team_name: str
    prize_money: int
    won_at: datetime
