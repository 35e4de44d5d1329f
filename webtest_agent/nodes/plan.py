"""
Plan Node - build the execution plan for the next test

This node:
1. Looks up the runner for this run in the registry
2. Builds the ExecutionPlan for tests[test_index]
3. Resets the per-test step cursor and results
"""
import logging
from typing import Dict, Any

from webtest_agent.state import RunState
from webtest_agent.utils.run_registry import get_run

logger = logging.getLogger(__name__)


def require_runner(state: RunState) -> Any:
	"""Runner registered for state['run_id'] (raises if missing)"""
	runner = get_run(state["run_id"])
	if runner is None:
		raise RuntimeError(f"Run {state['run_id']} is not registered")
	return runner


async def plan_node(state: RunState) -> Dict[str, Any]:
	"""
	Plan node: ParsedTest -> ExecutionPlan

	Args:
		state: Current run state

	Returns:
		Updated state with the new plan and a reset step cursor
	"""
	runner = require_runner(state)
	test = state["tests"][state["test_index"]]
	logger.info(f"🧪 Test {state['test_index'] + 1}/{len(state['tests'])}: {test.id} - {test.title}")

	plan = runner.planner.build_plan(test)
	return {
		"plan": plan,
		"step_index": 0,
		"step_results": [],
	}
