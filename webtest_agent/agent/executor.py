"""
Step Executor - observe → think → act → retry for a single plan step

Per step:
1. Observe the page
2. Ask the Thinker for a PlannedAction (history of earlier successes included)
3. Branch on the action type:
   - noop: log and pass
   - navigate: one attempt, no locator lookup, no retries
   - click/type/select/assert: walk the merged candidate list with a bounded
     self-healing budget, caching the locator that works
4. Observe again and return an immutable StepResult

The executor owns the action history and the locator cache for its whole
lifetime; nothing else writes to them.
"""
import logging
from typing import List, Optional, Sequence

from webtest_agent.agent.thinker import Thinker
from webtest_agent.browser.backend import AutomationBackend
from webtest_agent.config import Settings, settings as default_settings
from webtest_agent.locators.self_healing import SelfHealingLocator
from webtest_agent.views import (
    ExecutionPlanStep,
    LocatorCandidate,
    ObservedState,
    PlannedAction,
    StepResult,
)

logger = logging.getLogger(__name__)


def parse_locator_token(token: str) -> Optional[LocatorCandidate]:
    """
    Parse a "strategy:value" token

    The split happens at the first colon so values may contain colons.
    Tokens without a colon or with an empty strategy are rejected.
    """
    if not isinstance(token, str) or ":" not in token:
        return None
    strategy, value = token.split(":", 1)
    if not strategy:
        return None
    return LocatorCandidate(strategy=strategy, value=value)


def merge_candidates(
    planned_tokens: Sequence[str],
    fallback_candidates: Sequence[LocatorCandidate],
) -> List[LocatorCandidate]:
    """
    Planned tokens first, then cache/strategy candidates, deduplicated

    The dedup key is the literal (strategy, value) pair, so candidates that
    differ only in casing are kept. The first occurrence wins.
    """
    merged: List[LocatorCandidate] = []
    seen = set()

    parsed = [parse_locator_token(token) for token in planned_tokens]
    for candidate in [c for c in parsed if c is not None] + list(fallback_candidates):
        if candidate.key in seen:
            continue
        seen.add(candidate.key)
        merged.append(candidate)

    return merged


class StepExecutor:
    """Executes plan steps against an automation backend"""

    def __init__(
        self,
        backend: AutomationBackend,
        thinker: Thinker,
        self_healing_locator: Optional[SelfHealingLocator] = None,
        config: Optional[Settings] = None,
    ):
        self.backend = backend
        self.thinker = thinker
        self.self_healing_locator = self_healing_locator if self_healing_locator is not None else SelfHealingLocator()
        self.config = config or default_settings
        self.history: List[str] = []

    async def execute_step(self, test_id: str, step: ExecutionPlanStep) -> StepResult:
        """
        Execute one plan step

        Args:
            test_id: Id of the test owning the step (cache key part)
            step: Plan step to execute

        Returns:
            StepResult with status PASSED or FAILED
        """
        observed_before = await self.backend.observe()
        planned = await self.thinker.plan(step, observed_before, list(self.history))
        logger.info(f"▶️  {test_id} {step.label}: {planned.action_type} ({planned.target_description})")

        if planned.action_type == "noop":
            return await self._execute_noop(step, planned)

        if planned.action_type == "navigate":
            return await self._execute_navigate(step, planned, observed_before)

        return await self._execute_interactive(test_id, step, planned, observed_before)

    async def _execute_noop(self, step: ExecutionPlanStep, planned: PlannedAction) -> StepResult:
        observed_after = await self.backend.observe()
        self.history.append("noop")
        return StepResult(
            step=step,
            status="PASSED",
            action_logs=[f"Action: noop ({planned.target_description})"],
            observed_state=observed_after,
            self_healing_attempts=0,
        )

    async def _execute_navigate(
        self,
        step: ExecutionPlanStep,
        planned: PlannedAction,
        observed_before: ObservedState,
    ) -> StepResult:
        destination = planned.input_value or self.config.base_url or None
        locator = f"url={destination}" if destination else ""

        outcome = await self.backend.perform_action(locator, "navigate", destination)
        if not outcome.success:
            error = outcome.error_message or "Unknown automation backend failure"
            logger.warning(f"❌ {step.label}: navigation failed: {error}")
            return await self._failed(step, attempts=1, last_error=error)

        observed_after = await self.backend.observe()
        self.history.append(f"navigate:{planned.target_description}")
        return StepResult(
            step=step,
            status="PASSED",
            action_logs=[
                f"Observed URL: {observed_before.url}",
                f"Action: navigate -> {destination}",
            ],
            observed_state=observed_after,
            self_healing_attempts=0,
        )

    async def _execute_interactive(
        self,
        test_id: str,
        step: ExecutionPlanStep,
        planned: PlannedAction,
        observed_before: ObservedState,
    ) -> StepResult:
        candidates = merge_candidates(
            planned.candidate_locators,
            self.self_healing_locator.get_candidates(test_id, step),
        )

        attempts = 0
        last_error: Optional[str] = None if candidates else "No candidate locators available"

        for candidate in candidates:
            attempts += 1
            locator = candidate.as_locator()
            outcome = await self.backend.perform_action(locator, planned.action_type, planned.input_value)

            if outcome.success:
                self.self_healing_locator.record_success(test_id, step, candidate)
                observed_after = await self.backend.observe()
                self.history.append(f"{planned.action_type}:{locator}")
                if attempts > 1:
                    logger.info(f"🩹 {step.label}: healed after {attempts - 1} failed attempt(s) with {locator}")
                return StepResult(
                    step=step,
                    status="PASSED",
                    action_logs=[
                        f"Observed URL: {observed_before.url}",
                        f"Action: {planned.action_type} -> {locator}",
                    ],
                    observed_state=observed_after,
                    self_healing_attempts=attempts - 1,
                )

            last_error = outcome.error_message or "Unknown automation backend failure"
            logger.debug(f"{step.label}: attempt {attempts} with {locator} failed: {last_error}")

            if not self.config.enable_self_healing or attempts > self.config.max_self_heal_attempts:
                break

        logger.warning(f"❌ {step.label}: {planned.action_type} failed after {attempts} attempt(s): {last_error}")
        return await self._failed(step, attempts=attempts, last_error=last_error)

    async def _failed(self, step: ExecutionPlanStep, attempts: int, last_error: Optional[str]) -> StepResult:
        observed_after = await self.backend.observe()
        return StepResult(
            step=step,
            status="FAILED",
            action_logs=[f"Action failed for {step.label}", last_error or "Unknown error"],
            observed_state=observed_after,
            self_healing_attempts=attempts,
            error_message=last_error,
        )
