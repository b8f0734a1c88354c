"""Tests for the HTTP routes under /api/v1/pipelines."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from orchestrator.api.deps import get_pipeline_service
from orchestrator.core.constants import RunStatus
from orchestrator.main import app
from orchestrator.pipeline.catalog import default_catalog
from orchestrator.pipeline.errors import RunNotFoundError
from orchestrator.pipeline.models import Run, StepResult

STARTED = datetime(2026, 1, 5, 4, 0, tzinfo=timezone.utc)

RUN = Run(
    id="run-1",
    pipeline_id="daily-maintenance",
    status=RunStatus.FAILED,
    current_step=0,
    results=(StepResult(success=False, error="boom", duration_ms=12, step_id="health-check"),),
    started_at=STARTED,
    completed_at=STARTED,
    error="health-check failed: boom",
    version=3,
)


class StubService:
    """In-memory stand-in for PipelineService."""

    def __init__(self):
        self.catalog = default_catalog()
        self.triggered: list[str] = []
        self.limits: list[int] = []

    def list_pipelines(self):
        return [p.summary() for p in self.catalog]

    async def list_runs(self, limit):
        self.limits.append(limit)
        return [RUN]

    async def get_run(self, run_id):
        if run_id != RUN.id:
            raise RunNotFoundError(run_id)
        return RUN

    async def trigger(self, pipeline_id):
        self.catalog.get(pipeline_id)
        self.triggered.append(pipeline_id)
        return "run-2"


@pytest.fixture
def stub():
    return StubService()


@pytest.fixture
def client(stub):
    app.dependency_overrides[get_pipeline_service] = lambda: stub
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestListPipelines:
    def test_lists_catalog(self, client):
        response = client.get("/api/v1/pipelines")

        assert response.status_code == 200
        pipelines = response.json()["pipelines"]
        daily = next(p for p in pipelines if p["id"] == "daily-maintenance")
        assert daily == {
            "id": "daily-maintenance",
            "name": "Daily Maintenance",
            "description": "Daily cleanup and health verification",
            "steps": 3,
            "schedule": "0 4 * * *",
        }


class TestRuns:
    def test_list_runs_default_limit(self, client, stub):
        response = client.get("/api/v1/pipelines/runs")

        assert response.status_code == 200
        (summary,) = response.json()["runs"]
        assert summary["id"] == "run-1"
        assert summary["pipelineId"] == "daily-maintenance"
        assert summary["status"] == "failed"
        assert "stepResults" not in summary
        assert stub.limits == [50]

    def test_list_runs_limit_is_capped(self, client, stub):
        client.get("/api/v1/pipelines/runs", params={"limit": 5000})
        assert stub.limits == [200]

    def test_get_run(self, client):
        response = client.get("/api/v1/pipelines/runs/run-1")

        assert response.status_code == 200
        body = response.json()
        assert body["error"] == "health-check failed: boom"
        assert body["stepResults"][0]["step_id"] == "health-check"
        assert body["stepResults"][0]["success"] is False

    def test_get_unknown_run(self, client):
        response = client.get("/api/v1/pipelines/runs/unknown-id")

        assert response.status_code == 404
        assert response.json() == {"error": "Run not found"}


class TestTrigger:
    def test_trigger(self, client, stub):
        response = client.post("/api/v1/pipelines/run", json={"pipelineId": "content-refresh"})

        assert response.status_code == 202
        assert response.json() == {"runId": "run-2", "status": "started"}
        assert stub.triggered == ["content-refresh"]

    def test_missing_pipeline_id(self, client, stub):
        response = client.post("/api/v1/pipelines/run", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "pipelineId required"}
        assert stub.triggered == []

    def test_non_string_pipeline_id(self, client, stub):
        response = client.post("/api/v1/pipelines/run", json={"pipelineId": 5})

        assert response.status_code == 400
        assert response.json() == {"error": "pipelineId required"}
        assert stub.triggered == []

    def test_body_not_json(self, client, stub):
        response = client.post(
            "/api/v1/pipelines/run",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "pipelineId required"}
        assert stub.triggered == []

    def test_other_routes_keep_default_validation(self, client):
        response = client.get("/api/v1/pipelines/runs", params={"limit": "many"})
        assert response.status_code == 422

    def test_unknown_pipeline(self, client):
        response = client.post("/api/v1/pipelines/run", json={"pipelineId": "nope"})

        assert response.status_code == 404
        assert response.json() == {"error": "Pipeline not found: nope"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
