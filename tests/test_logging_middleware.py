# tests/test_logging_middleware.py

import itertools
import logging

from fastapi.testclient import TestClient

from survival.config import Settings
from survival.main import create_app

LOGGER = "survival.logging_middleware"


def test_request_and_response_are_logged(client: TestClient, caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)

    client.get("/api/night", params={"status": 1})

    messages = [r.getMessage() for r in caplog.records if r.name == LOGGER]
    assert any("REQUEST GET /api/night" in m for m in messages)
    assert any(m.endswith("?status=1") for m in messages)
    assert any("RESPONSE 200 OK /api/night" in m for m in messages)


def test_bodies_are_logged_when_enabled(tmp_path, caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)
    settings = Settings(
        database_url=f"sqlite:///{tmp_path / 'logging.db'}",
        log_request_body=True,
        log_response_body=True,
    )

    with TestClient(create_app(settings)) as client:
        res = client.put("/api/choice", json={"rank": 1, "points": 3})

    # ボディを読んだ後もレスポンスはそのまま返る
    assert res.status_code == 201
    assert res.json() == {"choice": {"rank": 1, "points": 3}}

    messages = [r.getMessage() for r in caplog.records if r.name == LOGGER]
    assert any('"points": 3' in m or '"points":3' in m for m in messages if "RESPONSE" not in m)
    assert any("RESPONSE 201 Created /api/choice" in m for m in messages)
    assert any('{"choice":{"rank":1,"points":3}}' in m for m in messages)


def test_response_line_is_stamped_after_the_request(tmp_path, caplog, monkeypatch):
    caplog.set_level(logging.INFO, logger=LOGGER)
    ticks = itertools.count()
    monkeypatch.setattr(f"{LOGGER}._now", lambda: f"t{next(ticks)}")
    settings = Settings(
        database_url=f"sqlite:///{tmp_path / 'logging.db'}",
        log_response_body=True,
    )

    with TestClient(create_app(settings)) as client:
        client.get("/api/night")

    messages = [r.getMessage() for r in caplog.records if r.name == LOGGER]
    request = next(m for m in messages if "REQUEST GET /api/night" in m)
    response = next(m for m in messages if "RESPONSE 200 OK /api/night" in m)
    assert request.startswith("[t0]")
    assert not response.startswith("[t0]")


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SURVIVAL_DATABASE_URL", "sqlite:///./other.db")
    monkeypatch.setenv("SURVIVAL_LOG_RESPONSE_BODY", "true")
    monkeypatch.delenv("SURVIVAL_LOG_REQUEST_QUERY", raising=False)

    settings = Settings.from_env()

    assert settings.database_url == "sqlite:///./other.db"
    assert settings.log_response_body is True
    assert settings.log_request_query is True
    assert settings.log_request_body is False
