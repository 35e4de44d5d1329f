"""
Analyze Node - attach a FailureAnalysis to the step that just failed

Only reached when the last step failed and failure analysis is enabled.
The analyzed result replaces the last entry; earlier results are untouched.
"""
import logging
from typing import Dict, Any

from webtest_agent.nodes.plan import require_runner
from webtest_agent.state import RunState

logger = logging.getLogger(__name__)


async def analyze_node(state: RunState) -> Dict[str, Any]:
	runner = require_runner(state)
	results = state["step_results"]
	failed = results[-1]

	analysis = await runner.failure_analyzer.analyze(
		failed.step.description,
		failed.error_message,
		failed.observed_state,
	)
	logger.info(f"🔎 {failed.step.label}: {analysis.root_cause_class} - {analysis.short_reason}")

	return {"step_results": results[:-1] + [failed.model_copy(update={"failure_analysis": analysis})]}
