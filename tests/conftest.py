import time

import pytest
from fastapi.testclient import TestClient

from app.core import db


@pytest.fixture
def database(tmp_path):
    db.set_db_path(tmp_path / "test.duckdb")
    db.init_db()
    yield tmp_path / "test.duckdb"
    db.close_connection()


@pytest.fixture
def api_client(database):
    from app.main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def local_tz(monkeypatch):
    """Fixa o fuso local do processo; desfeito ao fim do teste."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset indisponível nesta plataforma")

    def _set(name):
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield _set
    monkeypatch.undo()
    time.tzset()
