# tests/test_players.py

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from survival.models import ManualVote, Player, Vote


def _start(client: TestClient, nights: int = 1):
    for _ in range(nights):
        client.post("/api/night/next")
    for rank, points in ((1, 3), (2, 1)):
        client.put("/api/choice", json={"rank": rank, "points": points})


def test_add_and_get_player(client: TestClient):
    res = client.post("/api/player", json={"id": 123456789012, "name": "Alice"})
    assert res.status_code == 201
    assert res.json() == {
        "player": {
            "id": 123456789012,
            "name": "Alice",
            "total_votes": 0,
            "total_manual_votes": 0,
        }
    }

    res = client.get("/api/player/123456789012")
    assert res.status_code == 200
    assert res.json()["player"]["name"] == "Alice"


def test_add_player_requires_name(client: TestClient):
    res = client.post("/api/player", json={"id": 1})

    assert res.status_code == 400
    assert res.json()["error"] == {
        "code": 11,
        "description": "Missing Parameter",
        "metadata": {"param_name": "name"},
    }


def test_add_duplicate_player(client: TestClient):
    client.post("/api/player", json={"id": 1, "name": "Alice"})

    res = client.post("/api/player", json={"id": 1, "name": "Alicia"})

    assert res.status_code == 409
    assert res.json()["error"]["metadata"] == {"id": 1}


def test_unknown_player(client: TestClient):
    res = client.get("/api/player/42")

    assert res.status_code == 404
    assert res.json()["error"]["metadata"] == {"player_id": 42}


def test_patch_player_name(client: TestClient):
    client.post("/api/player", json={"id": 1, "name": "Alice"})

    res = client.patch("/api/player/1", json={"name": "Alicia"})
    assert res.status_code == 204

    res = client.get("/api/player")
    assert res.json()["count"] == 1
    assert res.json()["players"][0]["name"] == "Alicia"


def test_player_totals_count_active_votes_and_manual(client: TestClient):
    _start(client)
    client.post("/api/player", json={"id": 1, "name": "Alice"})
    client.post("/api/player", json={"id": 2, "name": "Bob"})
    client.post("/api/player", json={"id": 3, "name": "Carol"})

    client.put("/api/vote/1/1/3", json={"choice": 1})
    client.put("/api/vote/1/2/3", json={"choice": 1, "is_active": False})
    client.put("/api/vote/1/3/manual", json={"points": 4, "description": "bonus"})

    res = client.get("/api/player/3")
    player = res.json()["player"]
    assert player["total_votes"] == 3
    assert player["total_manual_votes"] == 4


def test_kill_requires_current_night(client: TestClient):
    client.post("/api/player", json={"id": 1, "name": "Alice"})

    res = client.post("/api/player/1/kill")

    assert res.status_code == 400
    assert res.json()["error"]["description"] == "No Current Night"


def test_kill_and_revive(client: TestClient):
    _start(client, nights=2)
    client.post("/api/player", json={"id": 1, "name": "Alice"})

    res = client.post("/api/player/1/kill")
    assert res.status_code == 200
    assert res.json()["player"]["died_on"] == 2

    res = client.post("/api/player/1/revive")
    assert res.status_code == 200
    assert "died_on" not in res.json()["player"]


def test_delete_player_removes_their_votes(db: Session, client: TestClient):
    _start(client)
    client.post("/api/player", json={"id": 1, "name": "Alice"})
    client.post("/api/player", json={"id": 2, "name": "Bob"})
    client.put("/api/vote/1/1/2", json={"choice": 1})
    client.put("/api/vote/1/2/1", json={"choice": 1})
    client.put("/api/vote/1/1/manual", json={"points": 2})

    res = client.delete("/api/player/1")
    assert res.status_code == 200
    assert res.json()["player"]["total_votes"] == 3
    assert res.json()["player"]["total_manual_votes"] == 2

    assert client.get("/api/player/1").status_code == 404
    assert db.query(Player).count() == 1
    assert db.query(Vote).count() == 0
    assert db.query(ManualVote).count() == 0


def test_player_summary_defaults_to_current_night(client: TestClient):
    _start(client, nights=4)
    client.post("/api/player", json={"id": 1, "name": "Alice"})
    client.post("/api/player", json={"id": 2, "name": "Bob"})

    client.put("/api/vote/4/1/2", json={"choice": 1})

    res = client.get("/api/player/2/summary")
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == 2
    assert "died_on" not in body
    assert body["today"] == 3 + 2   # 票 3 + 未投票 4 夜目 (0, 0, 1, 2)
    assert body["no_votes"] == 2
    assert body["total"] == 3 + 3
    assert body["players"] == 1

    res = client.get("/api/player/2/summary", params={"night": 2})
    body = res.json()
    assert body["today"] == 0
    assert body["total"] == 0
    assert body["votes"] == []


def test_player_summary_unknown_night(client: TestClient):
    client.post("/api/night/next")
    client.post("/api/player", json={"id": 1, "name": "Alice"})

    res = client.get("/api/player/1/summary", params={"night": 9})

    assert res.status_code == 404
    assert res.json()["error"]["description"] == "Night Not Found"


def test_delete_player_moves_up_ranks_voted_below_them(db: Session, client: TestClient):
    _start(client)
    client.post("/api/player", json={"id": 1, "name": "Alice"})
    client.post("/api/player", json={"id": 2, "name": "Bob"})
    client.post("/api/player", json={"id": 3, "name": "Carol"})
    client.post("/api/player", json={"id": 4, "name": "Dave"})
    client.put("/api/vote/1/1/2", json={"choice": 1})
    client.put("/api/vote/1/1/3", json={"choice": 2})

    res = client.delete("/api/player/2")
    assert res.status_code == 200

    res = client.get("/api/vote/1/1/3")
    assert res.status_code == 200
    assert res.json()["vote"]["choice"] == 1

    # 空いた 2 位がそのまま次の順位として使える
    res = client.put("/api/vote/1/1/4", json={"choice": 2})
    assert res.status_code == 201

    ranks = sorted(v.choice_rank for v in db.query(Vote).filter(Vote.night_id == 1).all())
    assert ranks == [1, 2]
