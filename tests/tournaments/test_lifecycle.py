from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest

from battlestacks.tournaments.errors import (
    TournamentNotFoundError,
    TournamentStatusTransitionError,
    TournamentValidationError,
)
from battlestacks.tournaments.lifecycle import change_status, create_tournament
from tests.tournament_fixtures import NOW_UTC, _create_tournament, _load_tournament


async def _create(session_factory, **overrides):
    params = {
        "title": "Friday Frenzy",
        "game": "Free Fire",
        "team_type": "Squad",
        "registration_deadline": NOW_UTC + timedelta(days=3),
        "entry_fee": 100,
        "prize_pool": 5000,
        "slots_total": 8,
        "now_utc": NOW_UTC,
    }
    params.update(overrides)
    async with session_factory.begin() as session:
        return await create_tournament(session, **params)


async def test_create_tournament_starts_empty_and_upcoming(session_factory) -> None:
    snapshot = await _create(session_factory, rules=["Be on time", "  "])

    assert snapshot.status == "Upcoming"
    assert snapshot.slots_allotted == 0
    assert snapshot.confirmed_teams == ()
    assert snapshot.bracket == ()
    assert snapshot.winner is None
    assert snapshot.rules == ("Be on time",)
    assert snapshot.series_id == snapshot.tournament_id
    assert snapshot.series_number == 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "   "},
        {"game": "Chess"},
        {"team_type": "Trio"},
        {"slots_total": 0},
        {"entry_fee": -1},
        {"prize_pool": -10},
    ],
)
async def test_create_tournament_validates_template(session_factory, overrides) -> None:
    with pytest.raises(TournamentValidationError):
        await _create(session_factory, **overrides)


async def test_change_status_moves_forward_one_step(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory)

    async with session_factory.begin() as session:
        ongoing = await change_status(session, tournament_id=tournament_id, status="Ongoing")
    async with session_factory.begin() as session:
        completed = await change_status(session, tournament_id=tournament_id, status="Completed")

    assert ongoing.status == "Ongoing"
    assert completed.status == "Completed"


@pytest.mark.parametrize(
    ("current", "target"),
    [("Ongoing", "Upcoming"), ("Completed", "Ongoing"), ("Upcoming", "Completed")],
)
async def test_change_status_rejects_backwards_or_skipping(session_factory, current, target) -> None:
    tournament_id = await _create_tournament(session_factory, status=current)

    with pytest.raises(TournamentStatusTransitionError):
        async with session_factory.begin() as session:
            await change_status(session, tournament_id=tournament_id, status=target)

    tournament = await _load_tournament(session_factory, tournament_id)
    assert tournament.status == current


async def test_change_status_admin_override(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory, status="Completed")

    async with session_factory.begin() as session:
        snapshot = await change_status(
            session,
            tournament_id=tournament_id,
            status="Upcoming",
            admin_override=True,
        )

    assert snapshot.status == "Upcoming"


async def test_change_status_unknown_values(session_factory) -> None:
    tournament_id = await _create_tournament(session_factory)

    with pytest.raises(TournamentValidationError):
        async with session_factory.begin() as session:
            await change_status(session, tournament_id=tournament_id, status="Paused")

    with pytest.raises(TournamentNotFoundError):
        async with session_factory.begin() as session:
            await change_status(session, tournament_id=uuid4(), status="Ongoing")
