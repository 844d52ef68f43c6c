"""Single-elimination bracket engine.

Every function takes the bracket by value and returns a new list of rounds;
callers persist the result themselves.
"""

from __future__ import annotations

import copy
import random
from collections.abc import Mapping, Sequence

from battlestacks.tournaments.constants import (
    BRACKET_MIN_SLOTS,
    BRACKET_SLOT_TEAM1,
    BRACKET_SLOT_TEAM2,
)
from battlestacks.tournaments.errors import (
    BracketInvalidWinnerError,
    BracketMatchupIncompleteError,
    BracketPositionError,
    BracketTeamAlreadyPlacedError,
    InvalidSlotCountError,
)
from battlestacks.tournaments.types import BracketMatchup, BracketRound, BracketTeam

_SYSTEM_RANDOM = random.SystemRandom()
_BRACKET_SLOTS = (BRACKET_SLOT_TEAM1, BRACKET_SLOT_TEAM2)


def is_power_of_two(value: int) -> bool:
    return value > 0 and value & (value - 1) == 0


def round_title(matchup_count: int) -> str:
    if matchup_count == 1:
        return "Finals"
    if matchup_count == 2:
        return "Semi-Finals"
    if matchup_count == 4:
        return "Quarter-Finals"
    return f"Round of {matchup_count * 2}"


def validate_slot_count(*, slots_total: int, teams_total: int = 0) -> None:
    if slots_total < BRACKET_MIN_SLOTS or not is_power_of_two(slots_total):
        raise InvalidSlotCountError(f"bracket needs a power-of-two slot count, got {slots_total}")
    if teams_total > slots_total:
        raise InvalidSlotCountError(
            f"{teams_total} teams do not fit into a bracket of {slots_total} slots"
        )


def shuffle_slots(
    slots: Sequence[BracketTeam | None],
    *,
    rng: random.Random | None = None,
) -> list[BracketTeam | None]:
    """Return a Fisher-Yates shuffled copy; every permutation is equally likely."""
    resolved_rng = rng or _SYSTEM_RANDOM
    shuffled = list(slots)
    for index in range(len(shuffled) - 1, 0, -1):
        swap_index = resolved_rng.randrange(index + 1)
        shuffled[index], shuffled[swap_index] = shuffled[swap_index], shuffled[index]
    return shuffled


def generate_bracket(
    *,
    teams: Sequence[BracketTeam],
    slots_total: int,
    rng: random.Random | None = None,
) -> list[BracketRound]:
    validate_slot_count(slots_total=slots_total, teams_total=len(teams))

    padded: list[BracketTeam | None] = list(teams)
    padded.extend([None] * (slots_total - len(padded)))
    seeded = shuffle_slots(padded, rng=rng)

    first_round = [
        BracketMatchup(team1=seeded[index], team2=seeded[index + 1])
        for index in range(0, len(seeded), 2)
    ]
    rounds = [BracketRound(title=round_title(len(first_round)), matchups=first_round)]

    matchups_total = len(first_round) // 2
    while matchups_total >= 1:
        rounds.append(
            BracketRound(
                title=round_title(matchups_total),
                matchups=[BracketMatchup() for _ in range(matchups_total)],
            )
        )
        matchups_total //= 2
    return rounds


def reset_bracket(
    *,
    teams: Sequence[BracketTeam],
    slots_total: int,
    rng: random.Random | None = None,
) -> list[BracketRound]:
    # Reset and reshuffle are the same operation: recorded winners are dropped
    # and first-round pairings are drawn again from the current roster.
    return generate_bracket(teams=teams, slots_total=slots_total, rng=rng)


def _matchup_at(
    bracket: Sequence[BracketRound],
    *,
    round_index: int,
    matchup_index: int,
) -> BracketMatchup:
    if not 0 <= round_index < len(bracket):
        raise BracketPositionError(f"round {round_index} does not exist")
    matchups = bracket[round_index].matchups
    if not 0 <= matchup_index < len(matchups):
        raise BracketPositionError(f"matchup {matchup_index} does not exist in round {round_index}")
    return matchups[matchup_index]


def _next_position(matchup_index: int) -> tuple[int, str]:
    slot = BRACKET_SLOT_TEAM1 if matchup_index % 2 == 0 else BRACKET_SLOT_TEAM2
    return matchup_index // 2, slot


def _clear_progress_from(
    bracket: list[BracketRound],
    *,
    round_index: int,
    matchup_index: int,
) -> None:
    bracket[round_index].matchups[matchup_index].winner = None
    next_round_index = round_index + 1
    if next_round_index >= len(bracket):
        return
    next_matchup_index, slot = _next_position(matchup_index)
    next_matchup = bracket[next_round_index].matchups[next_matchup_index]
    if getattr(next_matchup, slot) is None:
        return
    setattr(next_matchup, slot, None)
    _clear_progress_from(
        bracket,
        round_index=next_round_index,
        matchup_index=next_matchup_index,
    )


def advance_winner(
    *,
    bracket: Sequence[BracketRound],
    round_index: int,
    matchup_index: int,
    team_name: str,
) -> list[BracketRound]:
    updated = copy.deepcopy(list(bracket))
    matchup = _matchup_at(updated, round_index=round_index, matchup_index=matchup_index)
    if matchup.team1 is None or matchup.team2 is None:
        raise BracketMatchupIncompleteError(
            f"matchup {matchup_index} in round {round_index} still has an open slot"
        )

    if matchup.team1.team_name == team_name:
        winner = matchup.team1
    elif matchup.team2.team_name == team_name:
        winner = matchup.team2
    else:
        raise BracketInvalidWinnerError(f"{team_name!r} is not playing in this matchup")

    if matchup.winner is not None:
        if matchup.winner.team_name == winner.team_name:
            return updated
        _clear_progress_from(updated, round_index=round_index, matchup_index=matchup_index)

    matchup.winner = winner
    if round_index + 1 < len(updated):
        next_matchup_index, slot = _next_position(matchup_index)
        setattr(updated[round_index + 1].matchups[next_matchup_index], slot, winner)
    return updated


def place_team(
    *,
    bracket: Sequence[BracketRound],
    matchup_index: int,
    slot: str,
    team: BracketTeam | None,
) -> list[BracketRound]:
    if slot not in _BRACKET_SLOTS:
        raise BracketPositionError(f"unknown slot {slot!r}")
    updated = copy.deepcopy(list(bracket))
    matchup = _matchup_at(updated, round_index=0, matchup_index=matchup_index)

    current = getattr(matchup, slot)
    if current == team:
        return updated

    if team is not None:
        for index, other in enumerate(updated[0].matchups):
            for other_slot in _BRACKET_SLOTS:
                if index == matchup_index and other_slot == slot:
                    continue
                placed = getattr(other, other_slot)
                if placed is not None and placed.team_name == team.team_name:
                    raise BracketTeamAlreadyPlacedError(
                        f"{team.team_name!r} already sits in matchup {index}"
                    )

    setattr(matchup, slot, team)
    _clear_progress_from(updated, round_index=0, matchup_index=matchup_index)
    return updated


def final_winner(bracket: Sequence[BracketRound]) -> BracketTeam | None:
    if not bracket or not bracket[-1].matchups:
        return None
    return bracket[-1].matchups[0].winner


def team_to_payload(team: BracketTeam | None) -> dict[str, object] | None:
    if team is None:
        return None
    return {"team_name": team.team_name, "game_ids": list(team.game_ids)}


def team_from_payload(payload: Mapping[str, object] | None) -> BracketTeam | None:
    if not payload:
        return None
    raw_game_ids = payload.get("game_ids") or ()
    return BracketTeam(
        team_name=str(payload.get("team_name") or ""),
        game_ids=tuple(str(game_id) for game_id in raw_game_ids),  # type: ignore[union-attr]
    )


def bracket_to_payload(bracket: Sequence[BracketRound]) -> list[dict[str, object]]:
    return [
        {
            "title": bracket_round.title,
            "matchups": [
                {
                    BRACKET_SLOT_TEAM1: team_to_payload(matchup.team1),
                    BRACKET_SLOT_TEAM2: team_to_payload(matchup.team2),
                    "winner": team_to_payload(matchup.winner),
                }
                for matchup in bracket_round.matchups
            ],
        }
        for bracket_round in bracket
    ]


def bracket_from_payload(payload: Sequence[Mapping[str, object]] | None) -> list[BracketRound]:
    rounds: list[BracketRound] = []
    for raw_round in payload or ():
        matchups = [
            BracketMatchup(
                team1=team_from_payload(raw_matchup.get(BRACKET_SLOT_TEAM1)),
                team2=team_from_payload(raw_matchup.get(BRACKET_SLOT_TEAM2)),
                winner=team_from_payload(raw_matchup.get("winner")),
            )
            for raw_matchup in raw_round.get("matchups") or ()  # type: ignore[union-attr]
        ]
        rounds.append(BracketRound(title=str(raw_round.get("title") or ""), matchups=matchups))
    return rounds
