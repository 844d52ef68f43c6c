TOURNAMENT_STATUS_UPCOMING = "Upcoming"
TOURNAMENT_STATUS_ONGOING = "Ongoing"
TOURNAMENT_STATUS_COMPLETED = "Completed"

TOURNAMENT_STATUS_ORDER = (
    TOURNAMENT_STATUS_UPCOMING,
    TOURNAMENT_STATUS_ONGOING,
    TOURNAMENT_STATUS_COMPLETED,
)

PAYMENT_STATUS_PENDING = "Pending"
PAYMENT_STATUS_CONFIRMED = "Confirmed"

GAME_PUBG = "PUBG"
GAME_FREE_FIRE = "Free Fire"
SUPPORTED_GAMES = frozenset({GAME_PUBG, GAME_FREE_FIRE})

TEAM_TYPE_SOLO = "Solo"
TEAM_TYPE_DUO = "Duo"
TEAM_TYPE_SQUAD = "Squad"
TEAM_SIZE_BY_TYPE = {
    TEAM_TYPE_SOLO: 1,
    TEAM_TYPE_DUO: 2,
    TEAM_TYPE_SQUAD: 4,
}

TEAM_NAME_MIN_LENGTH = 2
TEAM_NAME_MAX_LENGTH = 64
GAME_ID_MIN_DIGITS = 8
GAME_ID_MAX_DIGITS = 12

BRACKET_MIN_SLOTS = 2
BRACKET_SLOT_TEAM1 = "team1"
BRACKET_SLOT_TEAM2 = "team2"

OUTBOX_EVENT_REGISTRATION_CONFIRMED = "REGISTRATION_CONFIRMED"
OUTBOX_STATUS_NEW = "NEW"
