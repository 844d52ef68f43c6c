from __future__ import annotations

import secrets
from uuid import UUID

from battlestacks.db.models.users import User

ADMIN_ROLE = "ADMIN"
USER_STATUS_ACTIVE = "active"
USER_STATUS_BANNED = "banned"
USER_STATUSES = frozenset({USER_STATUS_ACTIVE, USER_STATUS_BANNED})


def is_valid_internal_token(*, expected_token: str, received_token: str | None) -> bool:
    if not expected_token or not received_token:
        return False
    return secrets.compare_digest(expected_token, received_token)


def parse_user_id(raw_value: str | None) -> UUID | None:
    if raw_value is None:
        return None
    candidate = raw_value.strip()
    if not candidate:
        return None
    try:
        return UUID(candidate)
    except ValueError:
        return None


def is_admin_user(user: User | None) -> bool:
    if user is None:
        return False
    return user.role == ADMIN_ROLE and user.status == USER_STATUS_ACTIVE
