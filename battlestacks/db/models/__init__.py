from battlestacks.db.models.outbox_events import OutboxEvent
from battlestacks.db.models.redeem_requests import RedeemRequest
from battlestacks.db.models.registrations import Registration
from battlestacks.db.models.tournaments import Tournament
from battlestacks.db.models.users import User
from battlestacks.db.models.winner_logs import WinnerLog

__all__ = [
    "OutboxEvent",
    "RedeemRequest",
    "Registration",
    "Tournament",
    "User",
    "WinnerLog",
]
