from battlestacks.db.repo.outbox_events_repo import OutboxEventsRepo
from battlestacks.db.repo.redeem_requests_repo import RedeemRequestsRepo
from battlestacks.db.repo.registrations_repo import RegistrationsRepo
from battlestacks.db.repo.tournaments_repo import TournamentsRepo
from battlestacks.db.repo.users_repo import UsersRepo
from battlestacks.db.repo.winner_logs_repo import WinnerLogsRepo

__all__ = [
    "OutboxEventsRepo",
    "RedeemRequestsRepo",
    "RegistrationsRepo",
    "TournamentsRepo",
    "UsersRepo",
    "WinnerLogsRepo",
]
