from battlestacks.tournaments.bracket_ops import (
    advance_bracket_winner,
    declare_winner,
    ensure_bracket,
    place_bracket_team,
    remove_team,
    reset_tournament_bracket,
)
from battlestacks.tournaments.lifecycle import change_status, create_tournament
from battlestacks.tournaments.queries import (
    get_tournament_snapshot,
    list_player_wins,
    list_tournament_registrations,
    list_tournaments_by_status,
)
from battlestacks.tournaments.registration import register_team
from battlestacks.tournaments.retry import run_with_conflict_retry
from battlestacks.tournaments.slots import confirm_payment, mark_pending

__all__ = [
    "advance_bracket_winner",
    "change_status",
    "confirm_payment",
    "create_tournament",
    "declare_winner",
    "ensure_bracket",
    "get_tournament_snapshot",
    "list_player_wins",
    "list_tournament_registrations",
    "list_tournaments_by_status",
    "mark_pending",
    "place_bracket_team",
    "register_team",
    "remove_team",
    "reset_tournament_bracket",
    "run_with_conflict_retry",
]
