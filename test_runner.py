"""
End-to-end run tests: runner + LangGraph workflow + reporters, scaffold backend
"""
import asyncio
import logging
import shutil
from pathlib import Path

import pytest

from webtest_agent.agent.runner import AgentRunner
from webtest_agent.browser import ScaffoldBackend
from webtest_agent.config import Settings
from webtest_agent.llm import ReasoningConfigError
from webtest_agent.state import create_initial_state, recursion_limit_for
from webtest_agent.utils.run_registry import run_count
from webtest_agent.views import ActionOutcome, ObservedState
from webtest_agent.workflow import create_run_workflow

SAMPLE_DIR = Path(__file__).parent / "tests"

CLICK_TEST = """TEST: click-001
TITLE: Click through
STEPS:
1. Navigate to https://example.com
2. Click the Submit button
"""


class FailingClicksBackend(ScaffoldBackend):
    async def perform_action(self, locator, action, value=None):
        if action == "navigate":
            return await super().perform_action(locator, action, value)
        self.actions.append({"locator": locator, "action": action, "value": value})
        return ActionOutcome(success=False, error_message="element not found (locator)")


class LoginPageBackend(ScaffoldBackend):
    async def observe(self):
        return ObservedState(url=self.current_url, dom_snapshot="<form>Password <button>Sign in</button></form>")


def make_settings(tmp_path, **overrides):
    return Settings(
        _env_file=None,
        reasoning_enabled=False,
        artifacts_dir=str(tmp_path / "artifacts"),
        **overrides,
    )


def test_run_sample_directory(tmp_path):
    tests_dir = tmp_path / "defs"
    shutil.copytree(SAMPLE_DIR, tests_dir)
    (tests_dir / "zz_broken.txt").write_text("TITLE: missing id\n", encoding="utf-8")
    (tests_dir / "notes.md").write_text("ignored", encoding="utf-8")

    runner = AgentRunner(make_settings(tmp_path), backend=ScaffoldBackend())
    summaries = asyncio.run(runner.run_from_directory(tests_dir))

    assert [s.test_id for s in summaries] == ["login-001", "orders-002"]
    assert all(s.status == "PASSED" for s in summaries)
    assert [len(s.steps) for s in summaries] == [4, 3]
    assert summaries[0].tags == ["smoke", "auth"]
    assert len(runner.parse_errors) == 1
    assert "zz_broken.txt" in runner.parse_errors[0]
    assert (tmp_path / "artifacts" / "report.json").exists()
    assert run_count() == 0


def test_step_ids_continue_across_tests(tmp_path):
    runner = AgentRunner(make_settings(tmp_path), backend=ScaffoldBackend())

    summaries = asyncio.run(runner.run_definitions([CLICK_TEST, CLICK_TEST.replace("click-001", "click-002")]))

    ids = [result.step.id for summary in summaries for result in summary.steps]
    assert ids == ["step-1", "step-2", "step-3", "step-4"]


def test_failed_step_gets_failure_analysis(tmp_path):
    backend = FailingClicksBackend()
    runner = AgentRunner(make_settings(tmp_path), backend=backend)

    summaries = asyncio.run(runner.run_definitions([CLICK_TEST]))

    summary = summaries[0]
    assert summary.status == "FAILED"
    navigate, click = summary.steps
    assert navigate.status == "PASSED"
    assert navigate.failure_analysis is None
    assert click.status == "FAILED"
    assert click.self_healing_attempts == 3
    assert click.failure_analysis.root_cause_class == "Locator/UI change"
    assert click.failure_analysis.confidence == 0.35


def test_failure_analysis_disabled(tmp_path):
    runner = AgentRunner(make_settings(tmp_path, enable_failure_analysis=False), backend=FailingClicksBackend())

    summaries = asyncio.run(runner.run_definitions([CLICK_TEST]))

    assert summaries[0].steps[1].status == "FAILED"
    assert summaries[0].steps[1].failure_analysis is None


def test_every_step_runs_after_a_failure(tmp_path):
    definition = CLICK_TEST + "3. Click the Cancel link\n"
    runner = AgentRunner(make_settings(tmp_path), backend=FailingClicksBackend())

    summaries = asyncio.run(runner.run_definitions([definition]))

    assert [r.status for r in summaries[0].steps] == ["PASSED", "FAILED", "FAILED"]


def test_empty_run_still_reports(tmp_path):
    runner = AgentRunner(make_settings(tmp_path), backend=ScaffoldBackend())

    summaries = asyncio.run(runner.run_definitions(["not a definition"]))

    assert summaries == []
    assert len(runner.parse_errors) == 1
    healing = (tmp_path / "artifacts" / "healing_insights.md").read_text(encoding="utf-8")
    assert "No self-healing activity recorded." in healing


def test_test_without_steps_passes(tmp_path):
    runner = AgentRunner(make_settings(tmp_path), backend=ScaffoldBackend())

    summaries = asyncio.run(runner.run_definitions(["TEST: empty\nTITLE: Nothing to do\n"]))

    assert summaries[0].status == "PASSED"
    assert summaries[0].steps == []


def test_login_page_pauses(tmp_path, caplog):
    config = make_settings(tmp_path, enable_manual_login_pause=True, manual_login_pause_seconds=0.01)
    runner = AgentRunner(config, backend=LoginPageBackend())

    with caplog.at_level(logging.WARNING):
        asyncio.run(runner.run_definitions([CLICK_TEST]))

    assert sum("Login page detected" in record.getMessage() for record in caplog.records) == 2


def test_login_detector():
    from webtest_agent.agent.login_detector import LoginDetector

    detector = LoginDetector()
    assert detector.is_login_page(ObservedState(dom_snapshot="<input type=PASSWORD><b>Sign In</b>"))
    assert not detector.is_login_page(ObservedState(dom_snapshot="<input type=password>"))


def test_missing_credentials_fail_before_any_step(tmp_path):
    config = Settings(
        _env_file=None,
        reasoning_enabled=True,
        llm_provider="openai",
        openai_api_key=None,
        artifacts_dir=str(tmp_path / "artifacts"),
    )

    with pytest.raises(ReasoningConfigError):
        AgentRunner(config, backend=ScaffoldBackend())


def test_runner_closes_the_backend_it_created(tmp_path):
    config = make_settings(tmp_path, automation_backend="http", automation_endpoint="http://automation.local")

    async def scenario():
        async with AgentRunner(config, reporters=[]) as runner:
            await runner.run([])
        return runner

    runner = asyncio.run(scenario())

    assert runner.backend._client.is_closed


def test_runner_leaves_an_injected_backend_open(tmp_path):
    closed = []

    class TrackingBackend(ScaffoldBackend):
        async def aclose(self):
            closed.append(True)

    runner = AgentRunner(make_settings(tmp_path), backend=TrackingBackend(), reporters=[])
    asyncio.run(runner.aclose())

    assert closed == []


def test_recursion_limit_covers_the_graph(tmp_path):
    runner = AgentRunner(make_settings(tmp_path), backend=FailingClicksBackend())
    definition = "TEST: long\nTITLE: Long\nSTEPS:\n" + "\n".join(f"{i}. Click item {i}" for i in range(1, 31))

    summaries = asyncio.run(runner.run_definitions([definition]))

    assert len(summaries[0].steps) == 30


def test_initial_state():
    state = create_initial_state("run-1", [])

    assert state["run_id"] == "run-1"
    assert state["summaries"] == []
    assert state["completed"] is False
    assert recursion_limit_for([]) == 10


def test_workflow_compiles():
    graph = create_run_workflow().get_graph()

    assert {"plan", "act", "analyze", "finalize", "report"} <= set(graph.nodes)
