from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from tests.tournament_fixtures import ADMIN_HEADERS, _create_user


async def _create_tournament(api_client, *, slots_total: int = 2) -> str:
    deadline = datetime.now(timezone.utc) + timedelta(days=2)
    response = await api_client.post(
        "/admin/tournaments",
        json={
            "title": "Solo Sprint",
            "game": "Free Fire",
            "team_type": "Solo",
            "registration_deadline": deadline.isoformat(),
            "entry_fee": 20,
            "prize_pool": 500,
            "slots_total": slots_total,
            "rules": ["Mobile only"],
        },
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 201
    return response.json()["id"]


async def _register(api_client, *, tournament_id: str, user_id, team_name: str, game_id: str):
    return await api_client.post(
        f"/tournaments/{tournament_id}/registrations",
        json={"team_name": team_name, "game_ids": [game_id], "upi_id": "cap@upi"},
        headers={"X-User-Id": str(user_id)},
    )


async def test_full_tournament_flow(api_client, session_factory) -> None:
    tournament_id = await _create_tournament(api_client)
    alpha_user = await _create_user(session_factory, name="Asha")
    bravo_user = await _create_user(session_factory, name="Bilal")

    alpha = await _register(
        api_client,
        tournament_id=tournament_id,
        user_id=alpha_user,
        team_name="Alpha",
        game_id="511111111",
    )
    bravo = await _register(
        api_client,
        tournament_id=tournament_id,
        user_id=bravo_user,
        team_name="Bravo",
        game_id="522222222",
    )
    assert alpha.status_code == 201
    assert bravo.status_code == 201
    assert alpha.json()["payment_status"] == "Pending"

    listing = await api_client.get(
        f"/admin/tournaments/{tournament_id}/registrations",
        params={"payment_status": "Pending"},
        headers=ADMIN_HEADERS,
    )
    assert listing.status_code == 200
    assert [item["team_name"] for item in listing.json()["items"]] == ["Alpha", "Bravo"]

    first = await api_client.post(
        f"/admin/registrations/{alpha.json()['id']}/confirm",
        headers=ADMIN_HEADERS,
    )
    second = await api_client.post(
        f"/admin/registrations/{bravo.json()['id']}/confirm",
        headers=ADMIN_HEADERS,
    )
    assert first.status_code == 200
    assert first.json()["series_clone_id"] is None
    assert second.status_code == 200
    filled = second.json()
    assert filled["tournament"]["slots_allotted"] == 2
    assert filled["tournament"]["status"] == "Ongoing"
    assert filled["series_clone_id"] is not None

    clone = await api_client.get(f"/tournaments/{filled['series_clone_id']}")
    assert clone.status_code == 200
    assert clone.json()["status"] == "Upcoming"
    assert clone.json()["slots_allotted"] == 0
    assert clone.json()["series_number"] == 2

    bracket = await api_client.post(f"/admin/tournaments/{tournament_id}/bracket", headers=ADMIN_HEADERS)
    assert bracket.status_code == 200
    final = bracket.json()["bracket"][0]
    assert final["title"] == "Finals"
    assert {final["matchups"][0]["team1"]["team_name"], final["matchups"][0]["team2"]["team_name"]} == {
        "Alpha",
        "Bravo",
    }

    early = await api_client.post(f"/admin/tournaments/{tournament_id}/winner", headers=ADMIN_HEADERS)
    assert early.status_code == 409
    assert early.json() == {"detail": {"code": "E_BRACKET_FINAL_PENDING"}}

    advanced = await api_client.post(
        f"/admin/tournaments/{tournament_id}/bracket/winners",
        json={"round_index": 0, "matchup_index": 0, "team_name": "Alpha"},
        headers=ADMIN_HEADERS,
    )
    assert advanced.status_code == 200
    assert advanced.json()["bracket"][0]["matchups"][0]["winner"]["team_name"] == "Alpha"

    declared = await api_client.post(f"/admin/tournaments/{tournament_id}/winner", headers=ADMIN_HEADERS)
    assert declared.status_code == 200
    assert declared.json()["user_id"] == str(alpha_user)
    assert declared.json()["tournament"]["status"] == "Completed"

    wins = await api_client.get(f"/players/{alpha_user}/wins")
    assert wins.status_code == 200
    assert [item["tournament_title"] for item in wins.json()["items"]] == ["Solo Sprint"]

    wallet = await api_client.get("/wallet", headers={"X-User-Id": str(alpha_user)})
    assert wallet.json()["wallet_balance"] == 500
    assert wallet.json()["matches_won"] == 1

    redeem = await api_client.post(
        "/wallet/redeem-requests",
        json={"amount": 300, "phone_number": "9876543210", "upi_id": "asha@upi"},
        headers={"X-User-Id": str(alpha_user)},
    )
    assert redeem.status_code == 201
    queue = await api_client.get("/admin/redeem-requests", headers=ADMIN_HEADERS)
    assert [item["id"] for item in queue.json()["items"]] == [redeem.json()["id"]]

    completed = await api_client.post(
        f"/admin/redeem-requests/{redeem.json()['id']}/complete",
        headers=ADMIN_HEADERS,
    )
    assert completed.status_code == 200
    assert completed.json()["status"] == "Completed"
    assert completed.json()["wallet_balance"] == 200


async def test_registration_requires_user_header(api_client) -> None:
    tournament_id = await _create_tournament(api_client)

    response = await api_client.post(
        f"/tournaments/{tournament_id}/registrations",
        json={"team_name": "Alpha", "game_ids": ["511111111"], "upi_id": "cap@upi"},
    )

    assert response.status_code == 401
    assert response.json() == {"detail": {"code": "E_USER_REQUIRED"}}


async def test_registration_error_codes(api_client, session_factory) -> None:
    tournament_id = await _create_tournament(api_client)
    user_id = await _create_user(session_factory)

    missing = await _register(
        api_client,
        tournament_id=str(uuid4()),
        user_id=user_id,
        team_name="Alpha",
        game_id="511111111",
    )
    bad_ids = await _register(
        api_client,
        tournament_id=tournament_id,
        user_id=user_id,
        team_name="Alpha",
        game_id="12ab",
    )
    await _register(
        api_client,
        tournament_id=tournament_id,
        user_id=user_id,
        team_name="Alpha",
        game_id="511111111",
    )
    again = await _register(
        api_client,
        tournament_id=tournament_id,
        user_id=user_id,
        team_name="Alpha Two",
        game_id="511111111",
    )

    assert missing.status_code == 404
    assert missing.json() == {"detail": {"code": "E_TOURNAMENT_NOT_FOUND"}}
    assert bad_ids.status_code == 422
    assert again.status_code == 409
    assert again.json() == {"detail": {"code": "E_ALREADY_REGISTERED"}}


async def test_remove_team_route(api_client, session_factory) -> None:
    tournament_id = await _create_tournament(api_client, slots_total=4)
    user_id = await _create_user(session_factory)
    registration = await _register(
        api_client,
        tournament_id=tournament_id,
        user_id=user_id,
        team_name="Alpha",
        game_id="511111111",
    )
    await api_client.post(
        f"/admin/registrations/{registration.json()['id']}/confirm",
        headers=ADMIN_HEADERS,
    )

    removed = await api_client.delete(
        f"/admin/tournaments/{tournament_id}/teams/Alpha",
        headers=ADMIN_HEADERS,
    )
    missing = await api_client.delete(
        f"/admin/tournaments/{tournament_id}/teams/Alpha",
        headers=ADMIN_HEADERS,
    )

    assert removed.status_code == 200
    assert removed.json()["registration_deleted"] is True
    assert removed.json()["tournament"]["slots_allotted"] == 0
    assert missing.status_code == 404
    assert missing.json() == {"detail": {"code": "E_TEAM_NOT_FOUND"}}


async def test_status_route_enforces_forward_transitions(api_client) -> None:
    tournament_id = await _create_tournament(api_client)

    skipped = await api_client.post(
        f"/admin/tournaments/{tournament_id}/status",
        json={"status": "Completed"},
        headers=ADMIN_HEADERS,
    )
    forced = await api_client.post(
        f"/admin/tournaments/{tournament_id}/status",
        json={"status": "Completed", "admin_override": True},
        headers=ADMIN_HEADERS,
    )

    assert skipped.status_code == 409
    assert skipped.json() == {"detail": {"code": "E_STATUS_TRANSITION_INVALID"}}
    assert forced.status_code == 200
    assert forced.json()["status"] == "Completed"
