"""Maintenance endpoint tests."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from albumkeeper.database import build_engine, get_session
from albumkeeper.main import app


def _override(engine):
    def _session():
        with Session(engine) as session:
            yield session
    return _session


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_session] = _override(engine)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(make_asset, make_album):
    make_asset("a1", datetime(2023, 1, 1, tzinfo=timezone.utc))
    make_asset("a2", datetime(2023, 6, 1, tzinfo=timezone.utc))
    make_album("alb_x", asset_ids=["a1", "a2"])
    make_album("alb_y", thumbnail="a1")
    make_album("alb_ok", asset_ids=["a1"], thumbnail="a1")


def test_health(client):
    assert client.get("/api/v1/health").json() == {"status": "ok"}
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "running"


def test_list_inconsistent(client, seeded):
    r = client.get("/api/v1/maintenance/thumbnails/inconsistent")
    assert r.status_code == 200
    assert r.json() == {
        "album_ids": ["alb_x", "alb_y"],
        "count": 2,
        "missing": ["alb_x"],
        "stale": ["alb_y"],
    }


def test_plan(client, seeded):
    r = client.get("/api/v1/maintenance/thumbnails/plan")
    assert r.status_code == 200
    assert r.json() == {"corrections": {"alb_x": "a2", "alb_y": None}}


def test_reconcile_then_nothing_left(client, seeded, thumbnail_of):
    r = client.post("/api/v1/maintenance/thumbnails/reconcile")
    assert r.status_code == 200
    assert r.json() == {"updated": 2}

    assert thumbnail_of("alb_x") == "a2"
    assert thumbnail_of("alb_y") is None

    r = client.post("/api/v1/maintenance/thumbnails/reconcile")
    assert r.json() == {"updated": 0}
    r = client.get("/api/v1/maintenance/thumbnails/inconsistent")
    assert r.json()["count"] == 0


def test_reconcile_store_unavailable(tmp_path):
    broken = build_engine(f"sqlite:///{tmp_path / 'missing' / 'nowhere.db'}")
    app.dependency_overrides[get_session] = _override(broken)
    try:
        client = TestClient(app)
        r = client.post("/api/v1/maintenance/thumbnails/reconcile")
        assert r.status_code == 503
        r = client.get("/api/v1/maintenance/thumbnails/inconsistent")
        assert r.status_code == 503
    finally:
        app.dependency_overrides.clear()
        broken.dispose()


def test_status_when_worker_idle(client):
    r = client.get("/api/v1/maintenance/status")
    assert r.status_code == 200
    assert r.json()["running"] is False
