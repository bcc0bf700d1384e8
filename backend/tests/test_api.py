"""
HTTP surface: players, play dates, schedule generation, score entry with
optimistic locking, history and rankings.
"""
import logging

import pytest
from sqlalchemy import update

import pickleball.main  # noqa: F401
from pickleball.models import PlayDate


def create_players(client, n, start=1):
    ids = []
    for i in range(start, start + n):
        response = client.post("/api/players", json={"name": f"Player {i}", "email": f"player{i}@example.com"})
        assert response.status_code == 201, response.text
        ids.append(response.json()["id"])
    return ids


def create_play_date(client, organizer_id, **overrides):
    body = {
        "event_date": "2026-05-02",
        "organizer_id": organizer_id,
        "num_courts": 2,
        "win_condition": "win-by-2",
        "target_score": 11,
    }
    body.update(overrides)
    return client.post("/api/play-dates", json=body)


@pytest.fixture
def scheduled(client):
    """Four-player play date on two courts with its schedule generated."""
    player_ids = create_players(client, 4)
    play_date = create_play_date(client, player_ids[0]).json()
    response = client.post(f"/api/play-dates/{play_date['id']}/schedule", json={"player_ids": player_ids})
    assert response.status_code == 201, response.text
    return play_date, player_ids, response.json()


def first_match(schedule):
    return schedule["rounds"][0]["matches"][0]


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_player_validation_and_uniqueness(client):
    assert client.post("/api/players", json={"name": "A", "email": "a@example.com"}).status_code == 422
    assert client.post("/api/players", json={"name": "Ann", "email": "not-an-email"}).status_code == 422

    assert client.post("/api/players", json={"name": "Ann", "email": "ann@example.com"}).status_code == 201
    duplicate = client.post("/api/players", json={"name": "Ann", "email": "other@example.com"})
    assert duplicate.status_code == 409

    assert client.get("/api/players/999").status_code == 404


def test_play_date_config_rejected(client):
    organizer_id = create_players(client, 1)[0]
    assert create_play_date(client, organizer_id, num_courts=5).status_code == 400
    assert create_play_date(client, organizer_id, target_score=30).status_code == 400
    assert create_play_date(client, organizer_id, win_condition="sudden-death").status_code == 400
    assert create_play_date(client, 999).status_code == 404


def test_generate_schedule(scheduled):
    play_date, _, schedule = scheduled

    assert play_date["win_condition"] == "win_by_2"
    assert schedule["strategy"] == "sequential"
    assert len(schedule["partnerships"]) == 6
    assert schedule["match_count"] == 3
    assert schedule["round_count"] == 2
    assert [m["court_number"] for m in schedule["rounds"][0]["matches"]] == [1, 2]
    assert all(m["version"] == 0 and m["status"] == "waiting" for r in schedule["rounds"] for m in r["matches"])


def test_schedule_read_back_and_regeneration_conflict(client, scheduled):
    play_date, player_ids, schedule = scheduled

    read = client.get(f"/api/play-dates/{play_date['id']}/schedule")
    assert read.status_code == 200
    assert read.json()["rounds"] == schedule["rounds"]

    again = client.post(f"/api/play-dates/{play_date['id']}/schedule", json={"player_ids": player_ids})
    assert again.status_code == 409


def test_schedule_capacity_error(client):
    player_ids = create_players(client, 3)
    play_date = create_play_date(client, player_ids[0]).json()

    response = client.post(f"/api/play-dates/{play_date['id']}/schedule", json={"player_ids": player_ids})
    assert response.status_code == 400
    assert client.get(f"/api/play-dates/{play_date['id']}/schedule").json()["match_count"] == 0


def test_player_safe_strategy_accepted(client):
    player_ids = create_players(client, 4)
    play_date = create_play_date(client, player_ids[0]).json()

    response = client.post(
        f"/api/play-dates/{play_date['id']}/schedule",
        json={"player_ids": player_ids, "strategy": "player-safe"},
    )
    assert response.status_code == 201
    assert response.json()["strategy"] == "player_safe"
    assert response.json()["round_count"] == 3


def test_score_update_and_stale_version(client, scheduled):
    _, player_ids, schedule = scheduled
    match_id = first_match(schedule)["id"]
    headers = {"X-Actor-Id": str(player_ids[0])}

    response = client.patch(
        f"/api/matches/{match_id}/score",
        json={"team1_score": 11, "team2_score": 9, "version": 0},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["match"]["version"] == 1
    assert body["match"]["status"] == "completed"
    assert body["match"]["recorded_by"] == player_ids[0]
    assert body["warnings"] == []
    assert body["audit_recorded"] is True

    stale = client.patch(
        f"/api/matches/{match_id}/score",
        json={"team1_score": 11, "team2_score": 4, "version": 0},
        headers={"X-Actor-Id": str(player_ids[1])},
    )
    assert stale.status_code == 409
    detail = stale.json()["detail"]
    assert detail["code"] == "VERSION_CONFLICT"
    assert detail["expected_version"] == 0
    assert detail["current_version"] == 1


def test_invalid_score_returns_errors(client, scheduled):
    _, player_ids, schedule = scheduled
    match_id = first_match(schedule)["id"]

    response = client.patch(
        f"/api/matches/{match_id}/score",
        json={"team1_score": 11, "team2_score": 10, "version": 0},
        headers={"X-Actor-Id": str(player_ids[0])},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["errors"] == ["Winning team must win by at least 2 points"]


def test_outsider_forbidden(client, scheduled):
    _, _, schedule = scheduled
    outsider_id = create_players(client, 1, start=10)[0]

    response = client.patch(
        f"/api/matches/{first_match(schedule)['id']}/score",
        json={"team1_score": 11, "team2_score": 3, "version": 0},
        headers={"X-Actor-Id": str(outsider_id)},
    )
    assert response.status_code == 403


def test_missing_match_and_actor_header(client, scheduled):
    _, player_ids, schedule = scheduled

    missing = client.patch(
        "/api/matches/9999/score",
        json={"team1_score": 11, "team2_score": 3, "version": 0},
        headers={"X-Actor-Id": str(player_ids[0])},
    )
    assert missing.status_code == 404

    no_actor = client.patch(
        f"/api/matches/{first_match(schedule)['id']}/score",
        json={"team1_score": 11, "team2_score": 3, "version": 0},
    )
    assert no_actor.status_code == 422


def test_history_and_rankings(client, scheduled):
    play_date, player_ids, schedule = scheduled
    match_id = first_match(schedule)["id"]
    headers = {"X-Actor-Id": str(player_ids[0])}

    client.patch(f"/api/matches/{match_id}/score", json={"team1_score": 11, "team2_score": 9, "version": 0}, headers=headers)
    client.patch(
        f"/api/matches/{match_id}/score",
        json={"team1_score": 11, "team2_score": 7, "version": 1, "reason": "corrected"},
        headers=headers,
    )

    history = client.get(f"/api/matches/{match_id}/history").json()
    assert [h["new_version"] for h in history] == [2, 1]
    assert history[0]["old_team2_score"] == 9
    assert history[0]["changed_by_name"] == "Player 1"
    assert history[0]["reason"] == "corrected"

    rankings = client.get(f"/api/play-dates/{play_date['id']}/rankings").json()
    assert rankings["summary"]["completed_matches"] == 1
    assert rankings["summary"]["total_matches"] == 3
    assert len(rankings["rankings"]) == 4
    assert {r["games_won"] for r in rankings["rankings"][:2]} == {1}


def test_common_scores(client, scheduled):
    play_date, _, _ = scheduled
    response = client.get(f"/api/play-dates/{play_date['id']}/common-scores")
    assert response.status_code == 200
    assert response.json()[0]["label"] == "11-0"
    assert client.get("/api/play-dates/999/common-scores").status_code == 404


def test_importing_app_leaves_root_logger_alone():
    # Handler and level setup belongs to whoever runs the server
    assert logging.getLogger().level == logging.WARNING


def test_corrupt_stored_win_condition_is_a_client_error(client, session, scheduled):
    play_date, player_ids, schedule = scheduled
    session.execute(update(PlayDate).where(PlayDate.id == play_date["id"]).values(win_condition="best_of_3"))
    session.commit()

    response = client.patch(
        f"/api/matches/{first_match(schedule)['id']}/score",
        json={"team1_score": 11, "team2_score": 3, "version": 0},
        headers={"X-Actor-Id": str(player_ids[0])},
    )
    assert response.status_code == 400
    assert "best_of_3" in response.json()["detail"]
