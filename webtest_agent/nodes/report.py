"""
Report Nodes - per-test summary and the final reporter fan-out

finalize_node closes the current test with a RunSummary; report_node runs
every reporter over the completed summaries.
"""
import logging
from typing import Dict, Any

from webtest_agent.nodes.plan import require_runner
from webtest_agent.reporting import write_reports
from webtest_agent.state import RunState
from webtest_agent.views import RunSummary

logger = logging.getLogger(__name__)


async def finalize_node(state: RunState) -> Dict[str, Any]:
	"""
	Finalize node: RunSummary for the current test

	Args:
		state: Current run state

	Returns:
		Summary appended (reducer) and the test cursor advanced
	"""
	test = state["plan"].test
	summary = RunSummary(
		test_id=test.id,
		title=test.title,
		steps=list(state["step_results"]),
		tags=list(test.tags),
	)
	logger.info(f"🏁 {summary.test_id}: {summary.status} ({len(summary.steps)} step(s))")

	return {
		"summaries": [summary],
		"test_index": state["test_index"] + 1,
		"plan": None,
		"step_index": 0,
		"step_results": [],
	}


async def report_node(state: RunState) -> Dict[str, Any]:
	"""Report node: all reporters, concurrently"""
	runner = require_runner(state)
	summaries = state.get("summaries", [])

	passed = sum(1 for summary in summaries if summary.status == "PASSED")
	logger.info(f"📊 Run complete: {passed}/{len(summaries)} test(s) passed")

	await write_reports(runner.reporters, summaries, runner.settings)
	return {"completed": True}
