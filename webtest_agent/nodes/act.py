"""
Act Node - execute one plan step

This node:
1. Hands the current plan step to the StepExecutor
2. Appends the StepResult to the current test's results
3. Pauses for a manual login when enabled and the page looks like a sign-in form
"""
import asyncio
import logging
from typing import Dict, Any

from webtest_agent.nodes.plan import require_runner
from webtest_agent.state import RunState

logger = logging.getLogger(__name__)


async def act_node(state: RunState) -> Dict[str, Any]:
	"""
	Act node: one observe/plan/act/retry cycle

	Args:
		state: Current run state

	Returns:
		Updated state with the step result appended and the cursor advanced
	"""
	runner = require_runner(state)
	plan = state["plan"]
	step = plan.steps[state["step_index"]]

	result = await runner.executor.execute_step(plan.test.id, step)
	logger.info(f"{'✅' if result.status == 'PASSED' else '❌'} {plan.test.id} {step.label}: {result.status}")

	config = runner.settings
	if config.enable_manual_login_pause and runner.login_detector.is_login_page(result.observed_state):
		logger.warning(
			f"🔐 Login page detected at {result.observed_state.url} - "
			f"pausing {config.manual_login_pause_seconds}s for manual sign-in"
		)
		await asyncio.sleep(config.manual_login_pause_seconds)

	return {
		"step_results": state["step_results"] + [result],
		"step_index": state["step_index"] + 1,
	}
