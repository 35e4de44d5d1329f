"""
API tests: health, run submission and run retrieval
"""
import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.routes import runs
from api.storage.run_storage import clear_runs
from webtest_agent.agent.runner import AgentRunner
from webtest_agent.browser import ScaffoldBackend
from webtest_agent.config import Settings, settings
from webtest_agent.llm import ReasoningConfigError

PREFIX = settings.api_prefix

DEFINITION = """TEST: api-001
TITLE: Submit from the API
STEPS:
1. Navigate to https://example.com
2. Click the Start button
"""


@pytest.fixture
def client(tmp_path):
    config = Settings(_env_file=None, reasoning_enabled=False, artifacts_dir=str(tmp_path / "artifacts"))
    app.dependency_overrides[runs.get_runner] = lambda: AgentRunner(config, backend=ScaffoldBackend())
    clear_runs()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    clear_runs()


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_health(client):
    response = client.get(f"{PREFIX}/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_ready_reports_checks(client):
    body = client.get(f"{PREFIX}/ready").json()

    assert body["checks"]["api"] is True
    assert "reasoning" in body["checks"]


def test_submit_and_fetch_run(client):
    response = client.post(f"{PREFIX}/runs", json={"definitions": [DEFINITION, "garbage"]})

    assert response.status_code == 200
    run = response.json()
    assert run["status"] == "completed"
    assert run["summaries"][0]["test_id"] == "api-001"
    assert run["summaries"][0]["status"] == "PASSED"
    assert len(run["parse_errors"]) == 1

    fetched = client.get(f"{PREFIX}/runs/{run['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == run["id"]

    listed = client.get(f"{PREFIX}/runs").json()
    assert [r["id"] for r in listed] == [run["id"]]


def test_all_definitions_invalid_is_rejected(client):
    response = client.post(f"{PREFIX}/runs", json={"definitions": ["garbage", "TEST: x"]})

    assert response.status_code == 400
    assert len(response.json()["detail"]["parse_errors"]) == 2


def test_unknown_run_is_404(client):
    assert client.get(f"{PREFIX}/runs/does-not-exist").status_code == 404


def test_configuration_error_is_500(monkeypatch):
    def broken_runner():
        raise ReasoningConfigError("OpenAI API key not found")

    monkeypatch.setattr(runs, "AgentRunner", broken_runner)
    with TestClient(app) as test_client:
        response = test_client.post(f"{PREFIX}/runs", json={"definitions": [DEFINITION]})

    assert response.status_code == 500
    assert "API key" in response.json()["detail"]


def test_request_runner_is_closed(monkeypatch, tmp_path):
    config = Settings(_env_file=None, reasoning_enabled=False, artifacts_dir=str(tmp_path / "artifacts"))
    runners = []

    class TrackingRunner(AgentRunner):
        closed = False

        async def aclose(self):
            self.closed = True
            await super().aclose()

    def build_runner():
        runner = TrackingRunner(config)
        runners.append(runner)
        return runner

    monkeypatch.setattr(runs, "AgentRunner", build_runner)
    clear_runs()
    with TestClient(app) as test_client:
        response = test_client.post(f"{PREFIX}/runs", json={"definitions": [DEFINITION]})
    clear_runs()

    assert response.status_code == 200
    assert len(runners) == 1
    assert runners[0].closed is True
