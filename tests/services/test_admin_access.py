from __future__ import annotations

from types import SimpleNamespace
from uuid import uuid4

from battlestacks.services.admin_access import (
    is_admin_user,
    is_valid_internal_token,
    parse_user_id,
)


def test_is_valid_internal_token_requires_exact_match() -> None:
    assert is_valid_internal_token(expected_token="secret", received_token="secret") is True
    assert is_valid_internal_token(expected_token="secret", received_token="wrong") is False
    assert is_valid_internal_token(expected_token="secret", received_token=None) is False
    assert is_valid_internal_token(expected_token="", received_token="") is False


def test_parse_user_id_ignores_garbage() -> None:
    user_id = uuid4()
    assert parse_user_id(f" {user_id} ") == user_id
    assert parse_user_id("not-a-uuid") is None
    assert parse_user_id("") is None
    assert parse_user_id(None) is None


def test_is_admin_user_checks_role_and_status() -> None:
    assert is_admin_user(SimpleNamespace(role="ADMIN", status="active")) is True
    assert is_admin_user(SimpleNamespace(role="ADMIN", status="banned")) is False
    assert is_admin_user(SimpleNamespace(role="PLAYER", status="active")) is False
    assert is_admin_user(None) is False
