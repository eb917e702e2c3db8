# tests/conftest.py
import pytest
from sqlalchemy.orm import Session
from fastapi.testclient import TestClient

from survival.config import Settings
from survival.main import create_app


@pytest.fixture(scope="function")
def app(tmp_path):
    """
    テストごとにクリーンな SQLite ファイルを使うアプリ。
    """
    settings = Settings(database_url=f"sqlite:///{tmp_path / 'survival.db'}")
    return create_app(settings)


@pytest.fixture(scope="function")
def db(app) -> Session:
    """
    アプリ本体と同じ session_factory から作ったセッション。
    API 経由で書き換えた後に読むときは db.expire_all() してから。
    """
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(app) -> TestClient:
    with TestClient(app) as c:
        yield c
