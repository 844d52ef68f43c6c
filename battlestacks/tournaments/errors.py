class TournamentError(Exception):
    pass


class TournamentNotFoundError(TournamentError):
    pass


class RegistrationNotFoundError(TournamentError):
    pass


class PlayerNotFoundError(TournamentError):
    pass


class PlayerBannedError(TournamentError):
    pass


class TeamNotFoundError(TournamentError):
    pass


class TournamentValidationError(TournamentError):
    pass


class TournamentClosedError(TournamentError):
    pass


class TournamentFullError(TournamentError):
    """Confirming one more team would exceed the tournament's slot count."""


class TournamentAlreadyRegisteredError(TournamentError):
    pass


class TournamentTeamNameTakenError(TournamentError):
    pass


class TournamentStatusTransitionError(TournamentError):
    pass


class TournamentAlreadyCompletedError(TournamentError):
    pass


class TournamentTransactionConflictError(TournamentError):
    """Another writer changed the tournament row; the whole transaction may be retried."""


class BracketError(Exception):
    pass


class InvalidSlotCountError(BracketError):
    pass


class BracketPositionError(BracketError):
    pass


class BracketMatchupIncompleteError(BracketError):
    pass


class BracketInvalidWinnerError(BracketError):
    pass


class BracketTeamAlreadyPlacedError(BracketError):
    pass


class BracketFinalPendingError(BracketError):
    pass
