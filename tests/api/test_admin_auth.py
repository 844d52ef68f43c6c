from __future__ import annotations

from tests.tournament_fixtures import INTERNAL_TOKEN, _create_user

CREATE_PAYLOAD = {
    "title": "Weekend Cup",
    "game": "PUBG",
    "team_type": "Duo",
    "registration_deadline": "2030-01-01T12:00:00Z",
    "entry_fee": 100,
    "prize_pool": 2000,
    "slots_total": 4,
}


async def test_admin_route_rejects_missing_credentials(api_client) -> None:
    response = await api_client.post("/admin/tournaments", json=CREATE_PAYLOAD)

    assert response.status_code == 403
    assert response.json() == {"detail": {"code": "E_FORBIDDEN"}}


async def test_admin_route_rejects_wrong_token(api_client) -> None:
    response = await api_client.post(
        "/admin/tournaments",
        json=CREATE_PAYLOAD,
        headers={"X-Internal-Token": "guess"},
    )

    assert response.status_code == 403


async def test_admin_route_rejects_player_role(api_client, session_factory) -> None:
    player_id = await _create_user(session_factory, role="PLAYER")

    response = await api_client.post(
        "/admin/tournaments",
        json=CREATE_PAYLOAD,
        headers={"X-User-Id": str(player_id)},
    )

    assert response.status_code == 403


async def test_admin_route_accepts_admin_role(api_client, session_factory) -> None:
    admin_id = await _create_user(session_factory, name="Ops", role="ADMIN")

    response = await api_client.post(
        "/admin/tournaments",
        json=CREATE_PAYLOAD,
        headers={"X-User-Id": str(admin_id)},
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["status"] == "Upcoming"
    assert payload["slots_allotted"] == 0
    assert payload["team_type"] == "Duo"


async def test_admin_route_maps_validation_error(api_client) -> None:
    response = await api_client.post(
        "/admin/tournaments",
        json={**CREATE_PAYLOAD, "game": "Chess"},
        headers={"X-Internal-Token": INTERNAL_TOKEN},
    )

    assert response.status_code == 422
    assert response.json() == {"detail": {"code": "E_TOURNAMENT_INVALID"}}
