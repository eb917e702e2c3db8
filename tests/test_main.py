# tests/test_main.py

import importlib

from fastapi.testclient import TestClient

import survival.main


def test_import_does_not_create_database(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    importlib.reload(survival.main)

    assert not (tmp_path / "survival.db").exists()
    assert not hasattr(survival.main, "app")


def test_create_app_uses_env_settings(tmp_path, monkeypatch):
    db_path = tmp_path / "env.db"
    monkeypatch.setenv("SURVIVAL_DATABASE_URL", f"sqlite:///{db_path}")

    with TestClient(survival.main.create_app()) as client:
        res = client.get("/")

    assert res.status_code == 200
    assert db_path.exists()
