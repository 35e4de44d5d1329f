"""
Failure Analyzer - post-hoc root-cause classification of a failed step

The reasoning backend is asked to classify the failure into one of a closed
set of root-cause classes. Anything it returns outside that set, and any
backend failure, drops to a keyword heuristic. analyze() never raises.
"""
import logging
from typing import List, Literal, Optional

from pydantic import BaseModel

from webtest_agent.llm.reasoning_client import ReasoningClient
from webtest_agent.utils.response_parser import (
    Recovered,
    as_optional_text,
    as_text_list,
    parse_json_object,
    pick,
)
from webtest_agent.views import ROOT_CAUSE_CLASSES, FailureAnalysis, ObservedState

logger = logging.getLogger(__name__)

VISIBLE_TEXT_SAMPLE = 20
DEFAULT_CONFIDENCE = 0.5
FALLBACK_CONFIDENCE = 0.35
FALLBACK_NEXT_ACTIONS = ["Inspect DOM snapshot", "Capture console logs"]


class AnalysisDecision(BaseModel):
    """Failure analysis plus where it came from"""
    analysis: FailureAnalysis
    source: Literal["reasoning", "fallback"]
    reason: Optional[str] = None


def clamp_confidence(value) -> float:
    """Numeric confidence clamped to [0, 1]; anything else becomes the default"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_CONFIDENCE
    if value != value:  # NaN
        return DEFAULT_CONFIDENCE
    return min(1.0, max(0.0, float(value)))


class FailureAnalyzer:
    """Classifies failed steps"""

    def __init__(self, reasoning: Optional[ReasoningClient] = None):
        self.reasoning = reasoning or ReasoningClient(llm=None)

    async def analyze(
        self,
        step_description: str,
        error_message: Optional[str],
        observed_state: ObservedState,
    ) -> FailureAnalysis:
        decision = await self.decide(step_description, error_message, observed_state)
        return decision.analysis

    async def decide(
        self,
        step_description: str,
        error_message: Optional[str],
        observed_state: ObservedState,
    ) -> AnalysisDecision:
        """
        Classify a failure

        Args:
            step_description: Description of the failed step
            error_message: Last error reported for the step, if any
            observed_state: Page state observed after the failure

        Returns:
            AnalysisDecision with source "reasoning" or "fallback"
        """
        try:
            reply = await self.reasoning.ask(self.build_prompt(step_description, error_message, observed_state))
            if not reply.ok:
                return self._fallback(step_description, error_message, observed_state, reply.error)

            parsed = parse_json_object(reply.text)
            if not isinstance(parsed, Recovered):
                return self._fallback(step_description, error_message, observed_state, parsed.reason)

            root_cause = pick(parsed.fields, "rootCauseClass", "root_cause_class")
            if root_cause not in ROOT_CAUSE_CLASSES:
                return self._fallback(
                    step_description, error_message, observed_state,
                    f"unknown root cause class {root_cause!r}",
                )

            analysis = FailureAnalysis(
                root_cause_class=root_cause,
                confidence=clamp_confidence(pick(parsed.fields, "confidence")),
                short_reason=as_optional_text(pick(parsed.fields, "shortReason", "short_reason"))
                or error_message
                or "Unknown failure",
                detailed_analysis=as_text_list(pick(parsed.fields, "detailedAnalysis", "detailed_analysis")),
                suggested_next_actions=as_text_list(
                    pick(parsed.fields, "suggestedNextActions", "suggested_next_actions")
                ),
            )
            logger.info(f"🔎 Failure classified as {analysis.root_cause_class} ({analysis.confidence:.2f})")
            return AnalysisDecision(analysis=analysis, source="reasoning")
        except Exception as e:
            return self._fallback(step_description, error_message, observed_state, f"{type(e).__name__}: {e}")

    def build_prompt(
        self,
        step_description: str,
        error_message: Optional[str],
        observed_state: ObservedState,
    ) -> str:
        console_errors = [entry.message for entry in observed_state.console_logs if entry.type == "error"]
        failed_requests = [
            f"{event.method} {event.url} -> {event.status}"
            for event in observed_state.network_events
            if event.status >= 400
        ]

        lines: List[str] = [
            "You analyze failed steps of automated web UI tests.",
            "Classify the root cause as one of: " + ", ".join(ROOT_CAUSE_CLASSES) + ".",
            'Respond with JSON {"rootCauseClass": string, "confidence": number between 0 and 1, '
            '"shortReason": string, "detailedAnalysis": string[], "suggestedNextActions": string[]}.',
            f"Step: {step_description}",
            f"Error: {error_message or 'none'}",
            f"Current URL: {observed_state.url}",
            f"Visible Text Sample: {' | '.join(observed_state.visible_text[:VISIBLE_TEXT_SAMPLE])}",
            f"Console Errors: {' | '.join(console_errors) or 'none'}",
            f"Failed Network Requests: {' | '.join(failed_requests) or 'none'}",
            "Return JSON only with no additional commentary.",
        ]
        return "\n".join(lines)

    def build_fallback_analysis(
        self,
        step_description: str,
        error_message: Optional[str],
        observed_state: ObservedState,
    ) -> FailureAnalysis:
        reason = error_message or "Unknown failure"
        root_cause = "Locator/UI change" if "locator" in reason.lower() else "Timing/Flakiness"
        return FailureAnalysis(
            root_cause_class=root_cause,
            confidence=FALLBACK_CONFIDENCE,
            short_reason=reason,
            detailed_analysis=[
                f"Step: {step_description}",
                f"URL: {observed_state.url}",
            ],
            suggested_next_actions=list(FALLBACK_NEXT_ACTIONS),
        )

    def _fallback(
        self,
        step_description: str,
        error_message: Optional[str],
        observed_state: ObservedState,
        reason: Optional[str],
    ) -> AnalysisDecision:
        logger.warning(f"⚠️  Falling back to heuristic failure analysis: {reason}")
        return AnalysisDecision(
            analysis=self.build_fallback_analysis(step_description, error_message, observed_state),
            source="fallback",
            reason=reason,
        )
