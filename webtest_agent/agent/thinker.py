"""
Thinker - decide the next action for a plan step

This component:
1. Builds a prompt from the step, the observed page and the action history
2. Asks the reasoning backend for a JSON action
3. Repairs the reply field by field with defaults taken from the step
4. Falls back to a deterministic heuristic plan when nothing usable comes back

plan() never raises. The fallback does not depend on the reasoning backend,
so every step always gets a usable action.
"""
import logging
import re
from typing import List, Literal, Optional, Sequence

from pydantic import BaseModel

from webtest_agent.llm.reasoning_client import ReasoningClient
from webtest_agent.locators.strategy import LocatorStrategy
from webtest_agent.utils.response_parser import (
	Recovered,
	as_optional_text,
	as_text_list,
	parse_json_object,
	pick,
)
from webtest_agent.views import ACTION_TYPES, ExecutionPlanStep, ObservedState, PlannedAction

logger = logging.getLogger(__name__)

VISIBLE_TEXT_SAMPLE = 20
_URL_PATTERN = re.compile(r"https?://\S+", re.IGNORECASE)

# Accepted spellings per PlannedAction field
_FIELD_NAMES = {
	"action_type": ("actionType", "action_type", "action"),
	"target_description": ("targetDescription", "target_description", "target"),
	"candidate_locators": ("candidateLocators", "candidate_locators", "locators"),
	"expected_outcome": ("expectedOutcome", "expected_outcome"),
	"input_value": ("inputValue", "input_value", "value"),
}


class PlanDecision(BaseModel):
	"""Planned action plus where it came from"""
	action: PlannedAction
	source: Literal["reasoning", "fallback"]
	reason: Optional[str] = None


def extract_url(description: str) -> Optional[str]:
	"""First URL-shaped substring, without trailing punctuation"""
	match = _URL_PATTERN.search(description)
	if not match:
		return None
	return match.group(0).rstrip("),.") or None


class Thinker:
	"""Plans the next action via the reasoning backend with a heuristic fallback"""

	def __init__(
		self,
		reasoning: Optional[ReasoningClient] = None,
		locator_strategy: Optional[LocatorStrategy] = None,
	):
		self.reasoning = reasoning or ReasoningClient(llm=None)
		self.locator_strategy = locator_strategy or LocatorStrategy()

	async def plan(
		self,
		step: ExecutionPlanStep,
		observed_state: ObservedState,
		previous_actions: Sequence[str],
	) -> PlannedAction:
		"""Planned action for the step (never raises)"""
		decision = await self.decide(step, observed_state, previous_actions)
		return decision.action

	async def decide(
		self,
		step: ExecutionPlanStep,
		observed_state: ObservedState,
		previous_actions: Sequence[str],
	) -> PlanDecision:
		"""
		Ask the reasoning backend for the next action

		Args:
			step: Step being executed
			observed_state: Page state observed just before planning
			previous_actions: Action summaries of earlier successful steps

		Returns:
			PlanDecision with source "reasoning" or "fallback"
		"""
		try:
			prompt = self.build_prompt(step, observed_state, previous_actions)
			reply = await self.reasoning.ask(prompt)
			if not reply.ok:
				return self._fallback(step, reply.error)

			parsed = parse_json_object(reply.text)
			if not isinstance(parsed, Recovered):
				return self._fallback(step, parsed.reason)

			action = self.repair_action(parsed.fields, step)
			if action is None:
				return self._fallback(step, "response has no recognizable action fields")

			logger.info(f"🧠 {step.label}: reasoning planned {action.action_type} -> {action.target_description}")
			return PlanDecision(action=action, source="reasoning")
		except Exception as e:
			return self._fallback(step, f"{type(e).__name__}: {e}")

	def build_prompt(
		self,
		step: ExecutionPlanStep,
		observed_state: ObservedState,
		previous_actions: Sequence[str],
	) -> str:
		"""Structured natural-language prompt for one step"""
		visible_text = " | ".join(observed_state.visible_text[:VISIBLE_TEXT_SAMPLE])
		history = " -> ".join(previous_actions) or "none"

		return "\n".join([
			"You are the reasoning brain of an agentic web testing framework.",
			"Given the current step, observed page context, and previous actions, respond with a JSON object describing the next action.",
			'The JSON schema is {"actionType": "navigate|click|type|select|assert|noop", "targetDescription": string, '
			'"candidateLocators": string[], "expectedOutcome": string, "inputValue": string}.',
			'Candidate locators are "strategy:value" tokens, e.g. "text:Submit" or "data-testid:login-button".',
			f"Step ID: {step.id}",
			f"Step Label: {step.label}",
			f"Step Description: {step.description}",
			f"Expected Outcome: {step.expected_outcome or 'N/A'}",
			f"Possible Locators: {', '.join(step.possible_locators)}",
			f"Assertion Hooks: {', '.join(step.assertion_hooks)}",
			f"Current URL: {observed_state.url}",
			f"Page Title: {observed_state.title}",
			f"Visible Text Sample: {visible_text}",
			f"Previous Actions: {history}",
			"Return JSON only with no additional commentary.",
		])

	def repair_action(self, fields: dict, step: ExecutionPlanStep) -> Optional[PlannedAction]:
		"""
		Build a PlannedAction from recovered fields, defaulting each one

		Returns None when none of the known fields is present.
		"""
		known = [name for names in _FIELD_NAMES.values() for name in names]
		if not any(name in fields for name in known):
			return None

		action_type = pick(fields, *_FIELD_NAMES["action_type"])
		if not isinstance(action_type, str) or action_type.strip().lower() not in ACTION_TYPES:
			if action_type is not None:
				logger.warning(f"Unknown action type {action_type!r} from reasoning backend, using click")
			action_type = "click"
		else:
			action_type = action_type.strip().lower()

		return PlannedAction(
			action_type=action_type,
			target_description=as_optional_text(pick(fields, *_FIELD_NAMES["target_description"])) or step.description,
			candidate_locators=as_text_list(pick(fields, *_FIELD_NAMES["candidate_locators"])),
			expected_outcome=as_optional_text(pick(fields, *_FIELD_NAMES["expected_outcome"])) or step.expected_outcome,
			input_value=as_optional_text(pick(fields, *_FIELD_NAMES["input_value"])),
		)

	def build_fallback_action(self, step: ExecutionPlanStep) -> PlannedAction:
		"""Deterministic plan used whenever the reasoning backend gives nothing usable"""
		if step.description.lower().startswith("navigate"):
			return PlannedAction(
				action_type="navigate",
				target_description=step.description,
				candidate_locators=[],
				expected_outcome=step.expected_outcome,
				input_value=extract_url(step.description),
			)

		tokens: List[str] = [
			candidate.as_token()
			for candidate in self.locator_strategy.build_candidate_locators(step)
		]
		return PlannedAction(
			action_type="click",
			target_description=step.description,
			candidate_locators=tokens,
			expected_outcome=step.expected_outcome,
		)

	def _fallback(self, step: ExecutionPlanStep, reason: Optional[str]) -> PlanDecision:
		logger.warning(f"⚠️  Falling back to heuristic plan for {step.label}: {reason}")
		return PlanDecision(action=self.build_fallback_action(step), source="fallback", reason=reason)
