from __future__ import annotations

import random

import pytest
from sqlalchemy import select

from battlestacks.db.models.registrations import Registration
from battlestacks.db.models.tournaments import Tournament
from battlestacks.db.models.users import User
from battlestacks.db.models.winner_logs import WinnerLog
from battlestacks.tournaments.bracket import bracket_from_payload, final_winner
from battlestacks.tournaments.bracket_ops import (
    advance_bracket_winner,
    declare_winner,
    ensure_bracket,
    place_bracket_team,
    remove_team,
    reset_tournament_bracket,
)
from battlestacks.tournaments.errors import (
    BracketFinalPendingError,
    InvalidSlotCountError,
    TeamNotFoundError,
    TournamentAlreadyCompletedError,
)
from battlestacks.tournaments.slots import confirm_payment
from tests.tournament_fixtures import (
    NOW_UTC,
    _create_pending_team,
    _create_tournament,
    _load_tournament,
)


async def _tournament_with_confirmed_teams(session_factory, *, names, slots_total=4):
    tournament_id = await _create_tournament(session_factory, slots_total=slots_total)
    users = {}
    for index, name in enumerate(names):
        user_id, registration_id = await _create_pending_team(
            session_factory,
            tournament_id=tournament_id,
            team_name=name,
            game_id=f"5{index:08d}",
        )
        async with session_factory.begin() as session:
            await confirm_payment(session, registration_id=registration_id, now_utc=NOW_UTC)
        users[name] = user_id
    return tournament_id, users


async def _play_out(session_factory, tournament_id) -> str:
    tournament = await _load_tournament(session_factory, tournament_id)
    bracket = bracket_from_payload(tournament.bracket)
    for round_index in range(len(bracket)):
        for matchup_index, matchup in enumerate(bracket[round_index].matchups):
            assert matchup.team1 is not None
            async with session_factory.begin() as session:
                snapshot = await advance_bracket_winner(
                    session,
                    tournament_id=tournament_id,
                    round_index=round_index,
                    matchup_index=matchup_index,
                    team_name=matchup.team1.team_name,
                )
        bracket = list(snapshot.bracket)
    champion = final_winner(bracket)
    assert champion is not None
    return champion.team_name


async def test_ensure_bracket_generates_once(session_factory) -> None:
    tournament_id, _ = await _tournament_with_confirmed_teams(
        session_factory,
        names=("Alpha", "Bravo", "Charlie"),
        slots_total=4,
    )

    async with session_factory.begin() as session:
        first = await ensure_bracket(session, tournament_id=tournament_id, rng=random.Random(1))
    async with session_factory.begin() as session:
        second = await ensure_bracket(session, tournament_id=tournament_id, rng=random.Random(99))

    assert [bracket_round.title for bracket_round in first.bracket] == ["Semi-Finals", "Finals"]
    assert first.bracket == second.bracket


async def test_ensure_bracket_rejects_non_power_of_two_capacity(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory, slots_total=6)

    with pytest.raises(InvalidSlotCountError):
        async with session_factory.begin() as session:
            await ensure_bracket(session, tournament_id=tournament_id)

    tournament = await _load_tournament(session_factory, tournament_id)
    assert tournament.bracket == []


async def test_reset_bracket_clears_progress(session_factory) -> None:
    tournament_id, _ = await _tournament_with_confirmed_teams(
        session_factory,
        names=("Alpha", "Bravo", "Charlie", "Delta"),
    )
    async with session_factory.begin() as session:
        await ensure_bracket(session, tournament_id=tournament_id)
    await _play_out(session_factory, tournament_id)

    async with session_factory.begin() as session:
        snapshot = await reset_tournament_bracket(session, tournament_id=tournament_id)

    assert all(
        matchup.winner is None for bracket_round in snapshot.bracket for matchup in bracket_round.matchups
    )
    assert final_winner(list(snapshot.bracket)) is None


async def test_place_bracket_team_uses_roster_entry(session_factory) -> None:
    tournament_id, _ = await _tournament_with_confirmed_teams(
        session_factory,
        names=("Alpha", "Bravo", "Charlie"),
    )
    async with session_factory.begin() as session:
        snapshot = await ensure_bracket(session, tournament_id=tournament_id)
    first_round = snapshot.bracket[0].matchups
    holder_index, holder_slot = next(
        (index, slot)
        for index, matchup in enumerate(first_round)
        for slot in ("team1", "team2")
        if getattr(matchup, slot) is not None
    )
    moved_name = getattr(first_round[holder_index], holder_slot).team_name

    async with session_factory.begin() as session:
        cleared = await place_bracket_team(
            session,
            tournament_id=tournament_id,
            matchup_index=holder_index,
            slot=holder_slot,
            team_name=None,
        )
    assert getattr(cleared.bracket[0].matchups[holder_index], holder_slot) is None

    async with session_factory.begin() as session:
        restored = await place_bracket_team(
            session,
            tournament_id=tournament_id,
            matchup_index=holder_index,
            slot=holder_slot,
            team_name=moved_name,
        )
    placed = getattr(restored.bracket[0].matchups[holder_index], holder_slot)
    assert placed.team_name == moved_name
    assert placed.game_ids


async def test_place_bracket_team_requires_confirmed_team(session_factory) -> None:
    tournament_id, _ = await _tournament_with_confirmed_teams(session_factory, names=("Alpha",))
    async with session_factory.begin() as session:
        await ensure_bracket(session, tournament_id=tournament_id)

    with pytest.raises(TeamNotFoundError):
        async with session_factory.begin() as session:
            await place_bracket_team(
                session,
                tournament_id=tournament_id,
                matchup_index=0,
                slot="team1",
                team_name="Ghosts",
            )


async def test_remove_team_repairs_roster_bracket_and_registration(session_factory) -> None:
    tournament_id, _ = await _tournament_with_confirmed_teams(
        session_factory,
        names=("Alpha", "Bravo", "Charlie"),
    )
    async with session_factory.begin() as session:
        await ensure_bracket(session, tournament_id=tournament_id)

    async with session_factory.begin() as session:
        result = await remove_team(session, tournament_id=tournament_id, team_name="Bravo")

    assert result.removed_team.team_name == "Bravo"
    assert result.registration_deleted is True
    tournament = await _load_tournament(session_factory, tournament_id)
    assert tournament.slots_allotted == len(tournament.confirmed_teams) == 2
    assert "Bravo" not in {team["team_name"] for team in tournament.confirmed_teams}
    bracket_names = {
        team.team_name
        for bracket_round in bracket_from_payload(tournament.bracket)
        for matchup in bracket_round.matchups
        for team in (matchup.team1, matchup.team2)
        if team is not None
    }
    assert bracket_names == {"Alpha", "Charlie"}
    async with session_factory() as session:
        registrations = (
            await session.execute(
                select(Registration).where(Registration.tournament_id == tournament_id)
            )
        ).scalars().all()
    assert sorted(registration.team_name for registration in registrations) == ["Alpha", "Charlie"]


async def test_remove_team_unknown_team(session_factory) -> None:
    tournament_id, _ = await _tournament_with_confirmed_teams(session_factory, names=("Alpha",))

    with pytest.raises(TeamNotFoundError):
        async with session_factory.begin() as session:
            await remove_team(session, tournament_id=tournament_id, team_name="Ghosts")


async def test_declare_winner_pays_prize_once(session_factory) -> None:
    tournament_id, users = await _tournament_with_confirmed_teams(
        session_factory,
        names=("Alpha", "Bravo", "Charlie", "Delta"),
    )
    async with session_factory.begin() as session:
        await ensure_bracket(session, tournament_id=tournament_id)
    champion_name = await _play_out(session_factory, tournament_id)

    async with session_factory.begin() as session:
        result = await declare_winner(session, tournament_id=tournament_id, now_utc=NOW_UTC)

    assert result.user_id == users[champion_name]
    assert result.prize_money == 1000
    assert result.snapshot.status == "Completed"
    assert result.snapshot.winner is not None
    assert result.snapshot.winner.team_name == champion_name

    with pytest.raises(TournamentAlreadyCompletedError):
        async with session_factory.begin() as session:
            await declare_winner(session, tournament_id=tournament_id, now_utc=NOW_UTC)

    async with session_factory() as session:
        champion = await session.get(User, users[champion_name])
        logs = (await session.execute(select(WinnerLog))).scalars().all()
    assert champion is not None
    assert champion.wallet_balance == 1000
    assert champion.total_earnings == 1000
    assert champion.matches_won == 1
    assert len(logs) == 1
    assert logs[0].team_name == champion_name
    assert logs[0].tournament_title == "Sunday Showdown"


async def test_declare_winner_requires_decided_final(session_factory) -> None:
    tournament_id, _ = await _tournament_with_confirmed_teams(
        session_factory,
        names=("Alpha", "Bravo"),
        slots_total=2,
    )
    async with session_factory.begin() as session:
        await ensure_bracket(session, tournament_id=tournament_id)

    with pytest.raises(BracketFinalPendingError):
        async with session_factory.begin() as session:
            await declare_winner(session, tournament_id=tournament_id, now_utc=NOW_UTC)

    tournament = await _load_tournament(session_factory, tournament_id)
    assert tournament.winner is None


async def test_bracket_is_frozen_once_winner_declared(session_factory) -> None:
    tournament_id, _ = await _tournament_with_confirmed_teams(
        session_factory,
        names=("Alpha", "Bravo"),
        slots_total=2,
    )
    async with session_factory.begin() as session:
        await ensure_bracket(session, tournament_id=tournament_id)
    champion_name = await _play_out(session_factory, tournament_id)
    runner_up = "Bravo" if champion_name == "Alpha" else "Alpha"
    async with session_factory.begin() as session:
        await declare_winner(session, tournament_id=tournament_id, now_utc=NOW_UTC)
    before = await _load_tournament(session_factory, tournament_id)

    attempts = [
        lambda session: advance_bracket_winner(
            session,
            tournament_id=tournament_id,
            round_index=0,
            matchup_index=0,
            team_name=runner_up,
        ),
        lambda session: reset_tournament_bracket(session, tournament_id=tournament_id),
        lambda session: remove_team(session, tournament_id=tournament_id, team_name=champion_name),
        lambda session: ensure_bracket(session, tournament_id=tournament_id),
        lambda session: place_bracket_team(
            session,
            tournament_id=tournament_id,
            matchup_index=0,
            slot="team1",
            team_name=None,
        ),
    ]
    for attempt in attempts:
        with pytest.raises(TournamentAlreadyCompletedError):
            async with session_factory.begin() as session:
                await attempt(session)

    after = await _load_tournament(session_factory, tournament_id)
    assert after.status == "Completed"
    assert after.winner == before.winner
    assert after.confirmed_teams == before.confirmed_teams
    assert after.bracket == before.bracket
    assert final_winner(bracket_from_payload(after.bracket)).team_name == champion_name


async def test_declare_winner_refuses_when_winner_log_exists(session_factory) -> None:
    tournament_id, users = await _tournament_with_confirmed_teams(
        session_factory,
        names=("Alpha", "Bravo"),
        slots_total=2,
    )
    async with session_factory.begin() as session:
        await ensure_bracket(session, tournament_id=tournament_id)
    champion_name = await _play_out(session_factory, tournament_id)
    async with session_factory.begin() as session:
        await declare_winner(session, tournament_id=tournament_id, now_utc=NOW_UTC)
    async with session_factory.begin() as session:
        tournament = await session.get(Tournament, tournament_id)
        assert tournament is not None
        tournament.winner = None

    with pytest.raises(TournamentAlreadyCompletedError):
        async with session_factory.begin() as session:
            await declare_winner(session, tournament_id=tournament_id, now_utc=NOW_UTC)

    async with session_factory() as session:
        champion = await session.get(User, users[champion_name])
        logs = (await session.execute(select(WinnerLog))).scalars().all()
    assert champion is not None
    assert champion.wallet_balance == 1000
    assert len(logs) == 1
