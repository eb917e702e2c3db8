# tests/test_errors.py

from fastapi.testclient import TestClient

from survival import errors
from survival.errors import ErrorCode, SurvivalError
from survival.main import _param_name


def test_to_dict_with_metadata():
    err = errors.non_sequential_vote(by_id=1, rank=4, prev_rank=2)

    assert err.status_code == 400
    assert err.to_dict() == {
        "error": {
            "code": 8,
            "description": "Non-Sequential Vote",
            "metadata": {"by_id": 1, "rank": 4, "prev_rank": 2},
        }
    }


def test_to_dict_without_metadata():
    # metadata が無いときはキーごと出さない
    assert errors.no_current_night().to_dict() == {
        "error": {"code": 3, "description": "No Current Night"}
    }


def test_status_codes():
    assert errors.player_not_found(1).status_code == 404
    assert errors.manual_vote_not_found(1).status_code == 404
    assert errors.duplicate_player_id(1).status_code == 409
    assert errors.missing_parameter("name").status_code == 400


def test_unknown_code_description():
    err = SurvivalError(ErrorCode.UNKNOWN_ERROR, 500)

    assert err.to_dict()["error"] == {"code": -1, "description": "Unknown Error"}


def test_param_name_strips_location():
    assert _param_name(("body", "points")) == "points"
    assert _param_name(("query", "night")) == "night"
    assert _param_name(("body",)) == "body"


def test_malformed_body_field(client: TestClient):
    res = client.post("/api/player", json={"id": "abc", "name": "Alice"})

    assert res.status_code == 400
    assert res.json() == {
        "error": {
            "code": 5,
            "description": "Malformed Parameter",
            "metadata": {"parameter": "id"},
        }
    }


def test_missing_body_field(client: TestClient):
    res = client.post("/api/player", json={"name": "Alice"})

    assert res.status_code == 400
    assert res.json()["error"]["code"] == 11
    assert res.json()["error"]["metadata"] == {"param_name": "id"}


def test_malformed_query_parameter(client: TestClient):
    client.post("/api/night/next")
    client.post("/api/player", json={"id": 1, "name": "Alice"})

    res = client.get("/api/player/1/summary", params={"night": "x"})

    assert res.status_code == 400
    assert res.json()["error"]["metadata"] == {"parameter": "night"}
