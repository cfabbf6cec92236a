"""Tests for the FastAPI dev server."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from docsync.config import SyncConfig
from docsync.service import RELOAD_EVENT, create_app
from tests._fixtures.source_tree import SourceTreeBuilder
from tests._fixtures.watch_fakes import ImmediateRunner, RecordingRunner

WIDGET = """
    package demo;

    /** A widget. */
    public class Widget {
        public void spin(int turns) {
        }
    }
"""


@pytest.fixture
def config(source_tree: SourceTreeBuilder, tmp_path: Path) -> SyncConfig:
    source_tree.write({"demo/Widget.java": WIDGET})
    settings = SyncConfig.defaults(tmp_path)
    settings.source_root = source_tree.root
    settings.output_root = source_tree.output
    return settings


def test_health_endpoint(config: SyncConfig) -> None:
    client = TestClient(create_app(config))
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_status_without_watching(config: SyncConfig) -> None:
    client = TestClient(create_app(config))
    data = client.get("/status").json()
    assert data["watching"] is False
    assert data["state"] is None


def test_sync_endpoint_generates_pages(config: SyncConfig) -> None:
    client = TestClient(create_app(config))

    response = client.post("/sync")

    assert response.status_code == 200
    data = response.json()
    assert data["generated"] == 1
    assert data["failed"] == 0
    assert data["pages"][0].endswith("Widget.md")
    assert (config.output_root / "demo" / "Widget.md").exists()


def test_sync_endpoint_broadcasts_reload(config: SyncConfig) -> None:
    client = TestClient(create_app(config))

    with client.websocket_connect("/reload") as websocket:
        response = client.post("/sync")
        assert response.status_code == 200
        assert websocket.receive_json() == RELOAD_EVENT


def test_sync_endpoint_maps_top_level_failure(config: SyncConfig, tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    config.output_root = blocker
    client = TestClient(create_app(config))

    response = client.post("/sync")

    assert response.status_code == 400
    assert "Cannot create output directory" in response.json()["detail"]


def test_watch_lifespan_runs_initial_sync(config: SyncConfig) -> None:
    runner = ImmediateRunner()
    app = create_app(config, watch=True, runner=runner)

    with TestClient(app) as client:
        data = client.get("/status").json()

    assert runner.launches == 1
    assert data["watching"] is True
    assert data["state"] == "idle"
    assert data["runs"] == 1


def test_sync_endpoint_ignores_request_roots(config: SyncConfig, tmp_path: Path) -> None:
    elsewhere = tmp_path / "elsewhere"
    client = TestClient(create_app(config))

    response = client.post("/sync", json={"output_root": str(elsewhere)})

    assert response.status_code == 200
    assert not elsewhere.exists()
    assert (config.output_root / "demo" / "Widget.md").exists()


def test_watch_sync_request_does_not_overlap_run_in_flight(config: SyncConfig) -> None:
    runner = RecordingRunner()
    app = create_app(config, watch=True, runner=runner)

    with TestClient(app) as client:
        assert client.get("/status").json()["state"] == "running"

        response = client.post("/sync")

        assert response.status_code == 202
        assert response.json() == {"started": False, "state": "pending-rerun"}
        assert runner.launches == 1
        assert not (config.output_root / "demo" / "Widget.md").exists()

        runner.finish(0)
        assert runner.launches == 2
        runner.finish(0)
        assert client.get("/status").json()["state"] == "idle"


def test_watch_sync_request_starts_run_when_idle(config: SyncConfig) -> None:
    runner = ImmediateRunner()
    app = create_app(config, watch=True, runner=runner)

    with TestClient(app) as client:
        response = client.post("/sync")
        data = client.get("/status").json()

    assert response.status_code == 202
    assert response.json()["started"] is True
    assert runner.launches == 2
    assert data["runs"] == 2
