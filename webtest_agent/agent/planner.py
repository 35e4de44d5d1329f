"""
Test Planner - ParsedTest -> ExecutionPlan

Step ids come from a counter owned by the planner instance, so two runners in
one process never share or race on it.
"""
import logging
from typing import List, Optional

from webtest_agent.views import ExecutionPlan, ExecutionPlanStep, ParsedTest

logger = logging.getLogger(__name__)


class TestPlanner:
    """Turns parsed tests into execution plans"""
    __test__ = False

    def __init__(self):
        self._step_counter = 0

    def _next_step_id(self) -> str:
        self._step_counter += 1
        return f"step-{self._step_counter}"

    def build_plan(self, test: ParsedTest) -> ExecutionPlan:
        steps = [
            ExecutionPlanStep(
                id=self._next_step_id(),
                label=f"Step {step.index}",
                description=step.description.strip(),
                expected_outcome=derive_expected_outcome(step.description),
                possible_locators=[],
                assertion_hooks=derive_assertion_hooks(step.description),
            )
            for step in test.steps
        ]
        logger.info(f"📋 Planned {len(steps)} step(s) for {test.id}")
        return ExecutionPlan(test=test, steps=steps)


def derive_expected_outcome(description: str) -> Optional[str]:
    """The description itself for verification steps, otherwise nothing"""
    if description.lower().startswith("verify"):
        return description
    return None


def derive_assertion_hooks(description: str) -> List[str]:
    # toast wins over grid when both appear
    lowered = description.lower()
    if "toast" in lowered:
        return ["toast"]
    if "grid" in lowered:
        return ["grid"]
    return []
